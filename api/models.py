"""
API models and schemas for the FastAPI application.

Book bodies are deliberately loose: only ``title``/``author`` are checked, and
only on create (see ``api.validation``). These models describe the wire shape
for the OpenAPI docs.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class BookCreate(BaseModel):
    """Request body for creating a book."""
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    year: Optional[int] = Field(None, description="Publication year")
    genre: Optional[str] = Field(None, description="Book genre")


class BookUpdate(BaseModel):
    """Request body for updating a book; any subset of fields."""
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    year: Optional[int] = Field(None, description="Publication year")
    genre: Optional[str] = Field(None, description="Book genre")


class BookResponse(BaseModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    title: Any = Field(..., description="Book title")
    author: Any = Field(..., description="Book author")
    year: Optional[Any] = Field(None, description="Publication year")
    genre: Optional[Any] = Field(None, description="Book genre")


class WeatherReport(BaseModel):
    """Current weather for a city, reshaped from the upstream provider."""
    city: str = Field(..., description="City name as resolved by the provider")
    temperature: str = Field(..., description="Temperature with unit suffix, e.g. '18°C'")
    condition: str = Field(..., description="Free-text weather description")


class MessageResponse(BaseModel):
    """Confirmation message response model."""
    message: str = Field(..., description="Confirmation message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
