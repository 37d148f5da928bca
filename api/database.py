"""
Book repository over a single MongoDB collection.
Maps the CRUD verbs of the API onto Motor collection calls.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from api.exceptions import NotFoundError, StoreError, ValidationError
from api.models import BookResponse, missing_fields

logger = structlog.get_logger(__name__)


def _to_object_id(book_id: str) -> Optional[ObjectId]:
    """Parse a book id, returning None when it is not a valid ObjectId."""
    try:
        return ObjectId(book_id)
    except (InvalidId, TypeError):
        return None


def _to_book(book_doc: Dict[str, Any]) -> BookResponse:
    book_doc = dict(book_doc)
    book_doc["id"] = str(book_doc.pop("_id"))
    return BookResponse(**book_doc)


class BookRepository:
    """Repository for book records."""

    def __init__(self, collection: AsyncIOMotorCollection, client: Optional[AsyncIOMotorClient] = None):
        self.collection = collection
        self.client = client

    @classmethod
    def from_url(cls, connection_url: str, database_name: str, collection_name: str) -> "BookRepository":
        """Build a repository whose client connects on first use."""
        client = AsyncIOMotorClient(connection_url)
        return cls(client[database_name][collection_name], client=client)

    @classmethod
    async def connect(cls, connection_url: str, database_name: str, collection_name: str) -> "BookRepository":
        """
        Open a MongoDB connection and return a repository bound to it.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the books collection

        Returns:
            BookRepository owning the client
        """
        repository = cls.from_url(connection_url, database_name, collection_name)
        try:
            await repository.collection.database.command("ping")
        except PyMongoError as e:
            repository.close()
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise StoreError("Database connection failed") from e

        logger.info("Successfully connected to MongoDB",
                    database=database_name,
                    collection=collection_name)
        return repository

    def close(self) -> None:
        """Close the owned MongoDB client, if any."""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

    async def ping(self) -> bool:
        """Return True when the store answers a ping."""
        try:
            await self.collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.error("Database health check failed", error=str(e))
            return False

    async def list_books(self) -> List[BookResponse]:
        """
        Get every book in store order.

        Returns:
            List of books, empty when the collection is empty
        """
        try:
            cursor = self.collection.find({})
            books_docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed to list books", error=str(e))
            raise StoreError("Failed to list books") from e

        return [_to_book(book_doc) for book_doc in books_docs]

    async def create_book(self, title, author, year, genre) -> BookResponse:
        """
        Insert a new book.

        Returns:
            The stored book including its assigned id

        Raises:
            ValidationError: a field is absent or empty
            StoreError: the insert failed
        """
        book_doc = {"title": title, "author": author, "year": year, "genre": genre}
        missing = missing_fields(book_doc)
        if missing:
            raise ValidationError(missing)

        try:
            result = await self.collection.insert_one(book_doc)
        except PyMongoError as e:
            logger.error("Failed to insert book", title=title, error=str(e))
            raise StoreError("Failed to insert book") from e

        logger.debug("Successfully inserted book", book_id=str(result.inserted_id), title=title)
        return _to_book(dict(book_doc, _id=result.inserted_id))

    async def update_book(self, book_id: str, title, author, year, genre) -> BookResponse:
        """
        Replace all four fields of an existing book.

        Returns:
            The book as stored after the update

        Raises:
            ValidationError: a field is absent or empty
            NotFoundError: no book has this id
            StoreError: the update failed
        """
        fields = {"title": title, "author": author, "year": year, "genre": genre}
        missing = missing_fields(fields)
        if missing:
            raise ValidationError(missing)

        object_id = _to_object_id(book_id)
        if object_id is None:
            raise NotFoundError(book_id)

        try:
            book_doc = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise StoreError("Failed to update book") from e

        if book_doc is None:
            raise NotFoundError(book_id)
        logger.debug("Successfully updated book", book_id=book_id)
        return _to_book(book_doc)

    async def delete_book(self, book_id: str) -> None:
        """
        Remove a book.

        Raises:
            NotFoundError: no book has this id
            StoreError: the delete failed
        """
        object_id = _to_object_id(book_id)
        if object_id is None:
            raise NotFoundError(book_id)

        try:
            book_doc = await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StoreError("Failed to delete book") from e

        if book_doc is None:
            raise NotFoundError(book_id)
        logger.debug("Successfully deleted book", book_id=book_id)
