"""
FastAPI main application for the News and Book API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import APIConfig, config as default_config
from api.database import BookRepository
from api.exceptions import (
    ConfigurationError, NotFoundError, StoreError, UpstreamError, ValidationError
)
from api.models import (
    BookPayload, BookResponse, ErrorResponse, HealthResponse,
    MessageResponse, NewsResponse
)
from api.news import NewsGateway

logger = structlog.get_logger(__name__)

FIELDS_REQUIRED = "All fields are required"
BOOK_NOT_FOUND = "Book not found"
SERVER_ERROR = "Server error"
NEWS_ERROR = "Error fetching news. Try again later."


def get_book_repository(request: Request) -> BookRepository:
    repository = request.app.state.book_repository
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SERVER_ERROR
        )
    return repository


def get_news_gateway(request: Request) -> NewsGateway:
    gateway = request.app.state.news_gateway
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=NEWS_ERROR
        )
    return gateway


def _require_fields(payload: BookPayload):
    """Presence check at the HTTP boundary, before any store call."""
    outcome = payload.check()
    if not outcome.ok:
        logger.info("Rejected book payload", missing=outcome.missing)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=FIELDS_REQUIRED
        )
    return outcome.book


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: APIConfig = app.state.settings
    logger.info("Starting News and Book API")

    owned_repository = None
    if app.state.book_repository is None:
        try:
            owned_repository = await BookRepository.connect(
                settings.mongodb_url,
                settings.mongodb_database,
                settings.mongodb_collection
            )
        except StoreError:
            # book routes answer 500 until the store is reachable
            logger.warning("MongoDB unavailable at startup, continuing without a verified connection")
            owned_repository = BookRepository.from_url(
                settings.mongodb_url,
                settings.mongodb_database,
                settings.mongodb_collection
            )
        app.state.book_repository = owned_repository

    if app.state.news_gateway is None:
        try:
            app.state.news_gateway = NewsGateway(settings.news_api_key, base_url=settings.news_api_url)
        except ConfigurationError:
            if owned_repository:
                owned_repository.close()
            logger.error("News provider credential is not configured")
            raise

    yield

    logger.info("Shutting down News and Book API")
    if owned_repository:
        owned_repository.close()
        app.state.book_repository = None


def create_app(
    book_repository: Optional[BookRepository] = None,
    news_gateway: Optional[NewsGateway] = None,
    settings: Optional[APIConfig] = None
) -> FastAPI:
    """
    Build the application.

    Collaborators that are not supplied are created from ``settings`` when the
    application starts, and the ones created there are closed on shutdown.
    """
    settings = settings or default_config

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.book_repository = book_repository
    app.state.news_gateway = news_gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                status_code=exc.status_code
            ).model_dump(),
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report unparseable request bodies as a 400."""
        logger.info("Rejected malformed request", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error=FIELDS_REQUIRED,
                status_code=status.HTTP_400_BAD_REQUEST
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error=SERVER_ERROR,
                detail=str(exc) if settings.debug else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        repository = request.app.state.book_repository
        db_status = "unhealthy"
        if repository is not None and await repository.ping():
            db_status = "healthy"

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=settings.api_version,
            database_status=db_status
        )

    # Books endpoints
    @app.get(
        "/books",
        response_model=List[BookResponse],
        tags=["Books"],
        summary="Fetch all books",
        responses={500: {"model": ErrorResponse}}
    )
    async def list_books(repository: BookRepository = Depends(get_book_repository)):
        """Return every stored book."""
        try:
            return await repository.list_books()
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR
            )

    @app.post(
        "/books",
        response_model=BookResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Books"],
        summary="Add a new book",
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
    )
    async def create_book(
        payload: BookPayload,
        repository: BookRepository = Depends(get_book_repository)
    ):
        """
        Create a book.

        - **title**, **author**, **year**, **genre**: all required
        """
        book = _require_fields(payload)
        try:
            return await repository.create_book(book.title, book.author, book.year, book.genre)
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=FIELDS_REQUIRED
            )
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR
            )

    @app.put(
        "/books/{book_id}",
        response_model=BookResponse,
        tags=["Books"],
        summary="Update a book's details",
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse}
        }
    )
    async def update_book(
        book_id: str,
        payload: BookPayload,
        repository: BookRepository = Depends(get_book_repository)
    ):
        """
        Replace all fields of a book.

        - **book_id**: The book's ID
        """
        book = _require_fields(payload)
        try:
            return await repository.update_book(book_id, book.title, book.author, book.year, book.genre)
        except ValidationError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=FIELDS_REQUIRED
            )
        except NotFoundError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=BOOK_NOT_FOUND
            )
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR
            )

    @app.delete(
        "/books/{book_id}",
        response_model=MessageResponse,
        tags=["Books"],
        summary="Delete a book",
        responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
    )
    async def delete_book(
        book_id: str,
        repository: BookRepository = Depends(get_book_repository)
    ):
        """
        Delete a book.

        - **book_id**: The book's ID
        """
        try:
            await repository.delete_book(book_id)
        except NotFoundError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=BOOK_NOT_FOUND
            )
        except StoreError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR
            )
        return MessageResponse(message="Book deleted successfully")

    # News endpoint
    @app.get(
        "/news",
        response_model=NewsResponse,
        tags=["News"],
        summary="Fetch news articles based on query parameters",
        responses={500: {"model": ErrorResponse}}
    )
    async def get_news(
        query: Optional[str] = None,
        category: Optional[str] = None,
        country: Optional[str] = None,
        gateway: NewsGateway = Depends(get_news_gateway)
    ):
        """
        Fetch top headlines from the news provider.

        - **query**: The search term to filter news articles
        - **category**: The category of news (e.g., technology, sports)
        - **country**: The country of the news (e.g., us, gb)
        """
        try:
            return await gateway.search(query=query, category=category, country=country)
        except UpstreamError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=NEWS_ERROR
            )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_config.host,
        port=default_config.port,
        reload=default_config.debug,
        log_level="info"
    )
