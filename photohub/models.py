"""Pydantic models for the photo service API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CredentialRecord(BaseModel):
    """One stored user. The password is kept in plaintext."""

    email: str
    password: str


class CredentialsRequest(BaseModel):
    """Request body for /api/login and /api/register."""

    email: str | None = Field(default="", description="User email, compared verbatim.")
    password: str | None = Field(default="", description="Plaintext password, compared verbatim.")


class LoginResponse(BaseModel):
    """Response body returned after a successful login."""

    token: str = Field(description="Constant placeholder token.")
    user: str = Field(description="Email of the authenticated user.")


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    """Response body returned after an upload has been stored."""

    message: str
    url: str = Field(description="Public path under /uploads/ serving the stored file.")


class PhotoItem(BaseModel):
    url: str
