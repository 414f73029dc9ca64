"""
Error taxonomy for the book catalog service.

Raised by the validator, the store adapter and the weather gateway; caught at
the route boundary in ``api.main`` and translated to a fixed HTTP status with
a ``{"error": ...}`` body.
"""

from fastapi import status


class BookAPIError(Exception):
    """Base class for errors the route handlers translate to HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookAPIError):
    """Client input failed create-time validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(BookAPIError):
    """No book exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, book_id: str):
        super().__init__(f"Book '{book_id}' not found")
        self.book_id = book_id


class StoreUnavailable(BookAPIError):
    """The document store could not complete the operation."""


class UpstreamError(BookAPIError):
    """The third-party weather API failed or returned an unusable payload."""
