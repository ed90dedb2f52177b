"""HTTP route definitions for the photo service."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse, PlainTextResponse

from . import users
from .compression import ProfileMap, build_upload_profiles, compress
from .config import Settings, get_settings
from .errors import CompressionFailed, NoFileProvided, ReplaceFailed
from .models import CredentialsRequest, LoginResponse, MessageResponse, PhotoItem, UploadResponse
from .storage import ImageStorage, public_url

logger = logging.getLogger(__name__)
router = APIRouter()

ROUTE_SUMMARY = "API is running! Available routes: /api/login, /api/register, /api/photos, /api/upload"


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "photohub"}


def get_storage(settings: Settings = Depends(get_settings)) -> ImageStorage:
    """Dependency provider for ImageStorage."""
    return ImageStorage(settings.upload_dir, compressed_suffix=settings.compressed_suffix)


def get_credential_store(settings: Settings = Depends(get_settings)) -> users.CredentialStore:
    """Dependency provider for the credential store."""
    return users.JsonFileCredentialStore(settings.users_file)


def get_upload_profiles(settings: Settings = Depends(get_settings)) -> ProfileMap:
    return build_upload_profiles(settings.jpeg_quality, settings.png_compress_level)


@router.get("/api", response_class=PlainTextResponse)
async def route_summary() -> str:
    return ROUTE_SUMMARY


@router.post("/api/login", response_model=LoginResponse)
async def login(
    credentials: CredentialsRequest,
    settings: Settings = Depends(get_settings),
    store: users.CredentialStore = Depends(get_credential_store),
) -> LoginResponse:
    """Check credentials and return the placeholder token."""
    token = await asyncio.to_thread(
        users.authenticate,
        store,
        credentials.email,
        credentials.password,
        settings.placeholder_token,
    )
    return LoginResponse(token=token, user=credentials.email)


@router.post(
    "/api/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    credentials: CredentialsRequest,
    store: users.CredentialStore = Depends(get_credential_store),
) -> MessageResponse:
    await asyncio.to_thread(users.register, store, credentials.email, credentials.password)
    return MessageResponse(message="User registered successfully.")


@router.post("/api/upload", response_model=UploadResponse)
async def upload_image(
    image: UploadFile | None = File(default=None),
    storage: ImageStorage = Depends(get_storage),
    profiles: ProfileMap = Depends(get_upload_profiles),
) -> UploadResponse:
    """
    Store the file sent in the ``image`` field and re-encode it in place.

    Unsupported extensions are stored untouched and still reported as a
    success. When re-encoding fails the raw upload stays on disk and the
    request answers 500.
    """
    if image is None:
        raise NoFileProvided()

    data = await image.read()
    file_path = await asyncio.to_thread(storage.save_upload, image.filename, data)

    try:
        await asyncio.to_thread(compress, file_path, profiles, storage.commit)
    except (CompressionFailed, ReplaceFailed):
        logger.exception("Failed to compress upload", extra={"path": str(file_path)})
        raise

    return UploadResponse(message="File uploaded and compressed.", url=public_url(file_path.name))


@router.get("/api/photos", response_model=list[PhotoItem])
async def list_photos(storage: ImageStorage = Depends(get_storage)) -> list[PhotoItem]:
    urls = await asyncio.to_thread(storage.list_images)
    return [PhotoItem(url=url) for url in urls]


@router.get("/uploads/{image_filename}")
async def fetch_image(
    image_filename: str,
    storage: ImageStorage = Depends(get_storage),
) -> FileResponse:
    """Serve binary image data for the requested file."""
    file_path = storage.resolve_image_path(image_filename)
    media_type = storage.guess_media_type(file_path)
    return FileResponse(path=file_path, media_type=media_type)
