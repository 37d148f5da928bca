"""
Domain errors raised by the book repository and the news gateway.
"""


class BookServiceError(Exception):
    """Base class for errors raised by the service layer."""


class ValidationError(BookServiceError):
    """Raised when a required book field is missing or empty."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class NotFoundError(BookServiceError):
    """Raised when a book id does not resolve to a stored record."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book with ID '{book_id}' not found")


class StoreError(BookServiceError):
    """Raised when the document store fails."""


class UpstreamError(BookServiceError):
    """Raised when the news provider fails or answers with a non-success status."""


class ConfigurationError(BookServiceError):
    """Raised when a required setting is absent at startup."""
