"""
FastAPI main application for the Book Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig, config
from api.database import BookStore
from api.errors import NotFound, UpstreamError, ValidationError
from api.models import (
    BookCreate, BookResponse, BookUpdate, ErrorResponse,
    HealthResponse, MessageResponse, WeatherReport
)
from api.validation import to_document, to_update_fields, validate_for_create
from api.weather import WeatherGateway

logger = structlog.get_logger(__name__)

BOOK_NOT_FOUND = "Book not found"

router = APIRouter()


def get_book_store(request: Request) -> BookStore:
    """Book store owned by the application."""
    return request.app.state.book_store


def get_weather_gateway(request: Request) -> WeatherGateway:
    """Weather gateway owned by the application."""
    return request.app.state.weather_gateway


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


# Health check endpoint
@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request, store: BookStore = Depends(get_book_store)):
    """Health check endpoint."""
    health_info = await store.health_check()
    db_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=request.app.version,
        database_status=db_status
    )


# Books endpoints
@router.get("/books", response_model=List[BookResponse], tags=["Books"])
async def list_books(store: BookStore = Depends(get_book_store)):
    """Get every book in the catalog."""
    try:
        books = await store.list_all()
        return JSONResponse(content=books)

    except Exception as e:
        logger.error("Failed to get books", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching books"
        )


@router.get("/books/{book_id}", response_model=BookResponse, tags=["Books"])
async def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """
    Get a single book by ID.

    - **book_id**: Book identifier (MongoDB ObjectId)
    """
    try:
        book = await store.get_by_id(book_id)
        return JSONResponse(content=book)

    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to get book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching book"
        )


@router.post(
    "/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Books"],
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": BookCreate.model_json_schema()}}}}
)
async def create_book(
    payload: Optional[Dict[str, Any]] = Body(None),
    store: BookStore = Depends(get_book_store)
):
    """
    Add a book to the catalog.

    - **title**, **author**: required and non-empty
    - **year**, **genre**: optional
    """
    payload = payload or {}
    try:
        validate_for_create(payload)
        book = await store.insert(to_document(payload))
        logger.info("Book created", book_id=book["id"])
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=book)

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error("Failed to add book", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error adding book"
        )


@router.put(
    "/books/{book_id}",
    response_model=BookResponse,
    tags=["Books"],
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": BookUpdate.model_json_schema()}}}}
)
async def update_book(
    book_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    store: BookStore = Depends(get_book_store)
):
    """
    Update any subset of a book's fields.

    Supplied fields overwrite the stored ones as-is; they are not validated.
    """
    try:
        book = await store.update_by_id(book_id, to_update_fields(payload or {}))
        return JSONResponse(content=book)

    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to update book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating book"
        )


@router.delete("/books/{book_id}", response_model=MessageResponse, tags=["Books"])
async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """Remove a book from the catalog."""
    try:
        await store.delete_by_id(book_id)
        logger.info("Book deleted", book_id=book_id)
        return MessageResponse(message="Book deleted successfully")

    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    except Exception as e:
        logger.error("Failed to delete book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting book"
        )


# Weather endpoint
@router.get("/weather/{city}", response_model=WeatherReport, tags=["Weather"])
async def get_weather(city: str, gateway: WeatherGateway = Depends(get_weather_gateway)):
    """
    Get the current weather for a city.

    - **city**: City name, e.g. `Paris` or `London,uk`
    """
    try:
        return await gateway.fetch(city)

    except UpstreamError as e:
        logger.error("Failed to fetch weather", city=city, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching weather data"
        )
    except Exception as e:
        logger.error("Unexpected weather failure", city=city, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching weather data"
        )


def create_app(
    settings: APIConfig = config,
    book_store: Optional[BookStore] = None,
    weather_gateway: Optional[WeatherGateway] = None
) -> FastAPI:
    """
    Build the application.

    Collaborators that are not passed in are created from ``settings`` when
    the application starts and closed when it stops.

    Args:
        settings: API configuration
        book_store: Store adapter to use instead of connecting to MongoDB
        weather_gateway: Weather gateway to use instead of a new HTTP client
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Book Catalog API")

        client = None
        store = book_store
        if store is None:
            client = AsyncIOMotorClient(settings.mongo_uri)
            store = BookStore.from_client(
                client, settings.mongodb_database, settings.mongodb_collection
            )
            try:
                await client.admin.command("ping")
                logger.info("Database connection established")
            except PyMongoError as e:
                # Requests report the outage individually
                logger.error("Failed to connect to database", error=str(e))

        gateway = weather_gateway
        if gateway is None:
            if not settings.is_weather_configured():
                logger.warning("WEATHER_API_KEY is not set; weather lookups will fail")
            gateway = WeatherGateway(
                api_key=settings.weather_api_key,
                api_url=settings.weather_api_url,
                timeout=settings.request_timeout
            )

        app.state.book_store = store
        app.state.weather_gateway = gateway

        yield

        logger.info("Shutting down Book Catalog API")
        if weather_gateway is None:
            await gateway.aclose()
        if client is not None:
            client.close()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies."""
        logger.warning("Invalid request body", path=request.url.path, error_count=len(exc.errors()))
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
