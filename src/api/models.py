"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models only enforce shape; field rules (email format, password
length) are applied by the domain so every workflow reports them the same way.
"""

from typing import Any

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    fullname: str = Field(..., description="Display name")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Email address to verify")
    password: str = Field(..., description="User password (min 6 characters)")


class LoginRequest(BaseModel):
    """Request model for login."""

    email: str
    password: str


class VerifyRequest(BaseModel):
    """Request model for email verification."""

    email: str
    code: str = Field(..., description="5-digit verification code")


class ResendVerificationRequest(BaseModel):
    """Request model for issuing a new verification code."""

    email: str


class MessageResponse(BaseModel):
    """Generic success response."""

    message: str


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    token: str


class VerificationStatusResponse(BaseModel):
    """Response model for verification status lookups."""

    email: str
    verified: bool


class ProfileResponse(BaseModel):
    """Response model for the authenticated user's profile."""

    id: int
    fullname: str
    username: str
    email: str
    image: dict[str, Any] | None = None


class PlaylistRequest(BaseModel):
    """Request model for creating or renaming a playlist."""

    name: str


class PlaylistResponse(BaseModel):
    """Single playlist."""

    id: int
    name: str


class PlaylistListResponse(BaseModel):
    """Page of playlists visible to the caller."""

    data: list[PlaylistResponse]
    total: int
    page: int
    page_size: int


class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str
    errors: dict[str, str] | None = None
    request_id: str | None = None
