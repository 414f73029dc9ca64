"""
Database service layer for the FastAPI application.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from api.errors import NotFound, StoreUnavailable
from api.validation import from_document

logger = structlog.get_logger(__name__)


def parse_object_id(book_id: str) -> Optional[ObjectId]:
    """Return the ObjectId for a book id, or None when it is malformed."""
    try:
        return ObjectId(book_id)
    except (InvalidId, TypeError):
        return None


class BookStore:
    """Store adapter for Book documents in a MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @classmethod
    def from_client(
        cls,
        client: AsyncIOMotorClient,
        default_database: str,
        collection_name: str
    ) -> "BookStore":
        """
        Build a store on the database named in the client's URI.

        Args:
            client: Connected Motor client
            default_database: Database to use when the URI names none
            collection_name: Name of the books collection
        """
        database = client.get_default_database(default=default_database)
        return cls(database[collection_name])

    async def list_all(self) -> List[Dict[str, Any]]:
        """
        Get every stored book.

        Returns:
            List of books in wire shape
        """
        try:
            cursor = self.collection.find({})
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed to list books", error=str(e))
            raise StoreUnavailable("Failed to list books") from e

        return [from_document(document) for document in documents]

    async def get_by_id(self, book_id: str) -> Dict[str, Any]:
        """
        Get a single book by ID.

        Args:
            book_id: Book identifier (hex ObjectId)

        Returns:
            Book in wire shape

        Raises:
            NotFound: If no book has this id
        """
        object_id = parse_object_id(book_id)
        if object_id is None:
            raise NotFound(book_id)

        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise StoreUnavailable("Failed to get book") from e

        if document is None:
            raise NotFound(book_id)
        return from_document(document)

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new book.

        Args:
            document: Book fields without an id

        Returns:
            The stored book, including its newly assigned id
        """
        document = dict(document)
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Failed to insert book", error=str(e))
            raise StoreUnavailable("Failed to insert book") from e

        document["_id"] = result.inserted_id
        logger.debug("Inserted book", book_id=str(result.inserted_id))
        return from_document(document)

    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge the given fields into an existing book.

        Args:
            book_id: Book identifier
            fields: Fields to overwrite; others are left as stored

        Returns:
            The book after the update

        Raises:
            NotFound: If no book has this id
        """
        object_id = parse_object_id(book_id)
        if object_id is None:
            raise NotFound(book_id)

        try:
            if fields:
                document = await self.collection.find_one_and_update(
                    {"_id": object_id},
                    {"$set": fields},
                    return_document=ReturnDocument.AFTER
                )
            else:
                # $set rejects an empty document
                document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise StoreUnavailable("Failed to update book") from e

        if document is None:
            raise NotFound(book_id)
        logger.debug("Updated book", book_id=book_id, fields=sorted(fields))
        return from_document(document)

    async def delete_by_id(self, book_id: str) -> None:
        """
        Remove a book permanently.

        Raises:
            NotFound: If no book has this id
        """
        object_id = parse_object_id(book_id)
        if object_id is None:
            raise NotFound(book_id)

        try:
            result = await self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StoreUnavailable("Failed to delete book") from e

        if result.deleted_count == 0:
            raise NotFound(book_id)
        logger.debug("Deleted book", book_id=book_id)

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.collection.database.command("ping")
            books_count = await self.collection.count_documents({})

            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count
            }
        except PyMongoError as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
