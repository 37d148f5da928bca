"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


BOOK_FIELDS = ("title", "author", "year", "genre")

BOOK_EXAMPLE = {
    "title": "Dune",
    "author": "Herbert",
    "year": 1965,
    "genre": "SciFi"
}


def is_blank(value: Any) -> bool:
    """Return True when a field value counts as absent for the presence check."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return value == 0
    return False


def missing_fields(values: dict) -> List[str]:
    """Names of the required book fields that are absent or empty in ``values``."""
    return [name for name in BOOK_FIELDS if is_blank(values.get(name))]


class BookData(BaseModel):
    """The four user-supplied fields of a book record."""
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    year: Union[int, float] = Field(..., description="Publication year")
    genre: str = Field(..., description="Book genre")

    model_config = ConfigDict(json_schema_extra={"example": BOOK_EXAMPLE})


class PresenceCheck(BaseModel):
    """Outcome of checking a request body for the required book fields."""
    ok: bool
    missing: List[str] = Field(default_factory=list)
    book: Optional[BookData] = None


class BookPayload(BaseModel):
    """
    Request body for creating or replacing a book.

    Every field is optional at parse time so that an absent field is reported
    by ``check()`` as a 400 instead of being rejected by the parser.
    """
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    year: Optional[Union[int, float]] = Field(None, description="Publication year")
    genre: Optional[str] = Field(None, description="Book genre")

    model_config = ConfigDict(json_schema_extra={"example": BOOK_EXAMPLE})

    def check(self) -> PresenceCheck:
        """Run the presence check and return the accepted book when it passes."""
        values = self.model_dump()
        missing = missing_fields(values)
        if missing:
            return PresenceCheck(ok=False, missing=missing)
        return PresenceCheck(ok=True, book=BookData(**values))


class BookResponse(BookData):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "652f1c2e8b3e4a6f9c0d1e2f",
            "title": "Dune",
            "author": "Herbert",
            "year": 1965,
            "genre": "SciFi"
        }
    })


class NewsArticle(BaseModel):
    """A news article reshaped from the upstream provider."""
    title: Optional[str] = Field(None, description="Headline")
    description: Optional[str] = Field(None, description="Article summary")
    source: Optional[str] = Field(None, description="Provider display name")
    url: Optional[str] = Field(None, description="Link to the full article")
    publishedAt: Optional[str] = Field(None, description="Publication timestamp")


class NewsResponse(BaseModel):
    """Response model for news searches."""
    totalResults: int = Field(0, description="Total results reported by the provider")
    articles: List[NewsArticle] = Field(default_factory=list, description="Reshaped articles")


class MessageResponse(BaseModel):
    """Plain acknowledgment message."""
    message: str = Field(..., description="Confirmation message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
