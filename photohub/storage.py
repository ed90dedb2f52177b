"""Utilities for persisting, replacing and listing uploaded image files."""

from __future__ import annotations

import logging
import mimetypes
import time
from pathlib import Path
from typing import Final
from uuid import uuid4

from fastapi import HTTPException, status

from .errors import ListingUnavailable, NoFileProvided, ReplaceFailed

logger = logging.getLogger(__name__)

PUBLIC_PREFIX: Final[str] = "/uploads"


def public_url(filename: str) -> str:
    return f"{PUBLIC_PREFIX}/{filename}"


class ImageStorage:
    """File-system backed storage for uploaded images."""

    _listed_suffixes: Final[frozenset[str]] = frozenset({".jpeg", ".jpg", ".png", ".webp"})

    def __init__(self, base_dir: Path, compressed_suffix: str = "_compressed") -> None:
        self.base_dir = base_dir
        self.compressed_suffix = compressed_suffix
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_filename(original_name: str) -> str:
        """Build ``<millisecond timestamp>-<random hex><original extension>``."""
        extension = Path(original_name).suffix
        return f"{time.time_ns() // 1_000_000}-{uuid4().hex[:8]}{extension}"

    def save_upload(self, original_name: str | None, data: bytes) -> Path:
        """Write raw upload bytes under a generated name and return the path."""
        if not original_name:
            raise NoFileProvided()
        file_path = self.base_dir / self.generate_filename(original_name)
        with file_path.open("xb") as handle:
            handle.write(data)
        logger.info("Stored upload", extra={"path": str(file_path), "size": len(data)})
        return file_path

    def commit(self, original_path: Path, new_bytes: bytes) -> None:
        """
        Swap ``new_bytes`` into ``original_path``.

        The bytes go to a sibling temp file first; the original is then removed
        and the temp file renamed over it. A crash between the last two steps
        leaves no file at ``original_path``.
        """
        temp_path = original_path.with_name(original_path.name + self.compressed_suffix)
        try:
            temp_path.write_bytes(new_bytes)
            original_path.unlink()
            temp_path.rename(original_path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise ReplaceFailed(reason=str(exc)) from exc

    def list_images(self) -> list[str]:
        """Return public URLs of listable images in directory order."""
        try:
            entries = list(self.base_dir.iterdir())
        except OSError as exc:
            logger.exception("Failed to read upload directory", extra={"path": str(self.base_dir)})
            raise ListingUnavailable(reason=str(exc)) from exc
        return [public_url(entry.name) for entry in entries if entry.suffix.lower() in self._listed_suffixes]

    def resolve_image_path(self, filename: str) -> Path:
        """
        Resolve filename within the storage directory, preventing path traversal.

        Raises HTTPException with 404 if the file does not exist.
        """
        candidate = (self.base_dir / filename).resolve()

        try:
            candidate.relative_to(self.base_dir.resolve())
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid image path supplied.",
            ) from exc

        if not candidate.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Image not found.",
            )

        return candidate

    @staticmethod
    def guess_media_type(file_path: Path) -> str:
        """Infer MIME type based on file suffix."""
        media_type, _ = mimetypes.guess_type(file_path.name)
        return media_type or "application/octet-stream"
