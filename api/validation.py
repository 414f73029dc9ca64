"""
Book validation and document mapping.

Create requests must carry a non-empty title and author. Updates are applied
as given, without validation.
"""

from typing import Any, Dict

from api.errors import ValidationError

BOOK_FIELDS = ("title", "author", "year", "genre")

REQUIRED_FIELDS_MESSAGE = "Title and author are required"


def validate_for_create(payload: Dict[str, Any]) -> None:
    """
    Check that a create payload has both title and author.

    Args:
        payload: Decoded JSON request body

    Raises:
        ValidationError: If title or author is missing or empty
    """
    if not payload.get("title") or not payload.get("author"):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)


def to_document(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Build a store document from the Book fields present in the payload."""
    return {field: payload[field] for field in BOOK_FIELDS if field in payload}


def to_update_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Select the fields an update may overwrite.

    Unknown keys and ``id``/``_id`` are dropped; the values are not checked,
    so title and author may be set to empty here.
    """
    return to_document(payload)


def from_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a stored document to its wire shape.

    Args:
        document: Raw MongoDB document

    Returns:
        Dictionary with ``id`` as a string followed by the present Book fields
    """
    book = {"id": str(document["_id"])}
    for field in BOOK_FIELDS:
        if field in document:
            book[field] = document[field]
    return book
