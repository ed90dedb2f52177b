"""Error taxonomy shared by the credential store, storage and API layers."""

from __future__ import annotations

from fastapi import status


class PhotoHubError(RuntimeError):
    """Base exception for failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal error."

    def __init__(self, message: str | None = None, *, reason: str | None = None) -> None:
        self.message = message or self.message
        self.reason = reason
        super().__init__(self.message if reason is None else f"{self.message}: {reason}")

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.reason is not None:
            payload["error"] = self.reason
        return payload


class StoreUnavailable(PhotoHubError):
    """Raised when the credential file does not exist."""

    message = "User database is missing."


class InvalidCredentials(PhotoHubError):
    """Raised when no record matches the supplied email and password."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password."


class AlreadyExists(PhotoHubError):
    """Raised when registering an email that is already stored."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists."


class MissingFields(PhotoHubError):
    """Raised when email or password is empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Email and password are required."


class NoFileProvided(PhotoHubError):
    """Raised when an upload request carries no file."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "No file uploaded."


class CompressionFailed(PhotoHubError):
    """Raised when the image codec cannot re-encode a stored upload."""

    message = "Failed to process file."


class ReplaceFailed(PhotoHubError):
    """Raised when the re-encoded file cannot be swapped into place."""

    message = "Failed to process file."


class ListingUnavailable(PhotoHubError):
    """Raised when the upload directory cannot be read."""

    message = "Failed to read files."
