"""Extension-based dispatch of uploaded files to Pillow re-encode profiles."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Callable, Mapping

from PIL import Image

from .errors import CompressionFailed

logger = logging.getLogger(__name__)

_JPEG_MODES = {"RGB", "L", "CMYK"}


@dataclass(frozen=True)
class ImageProfile:
    """Pillow output format plus the keyword options passed to ``Image.save``."""

    format: str
    options: dict = field(default_factory=dict)


ProfileMap = Mapping[str, ImageProfile]


def build_upload_profiles(jpeg_quality: int = 70, png_compress_level: int = 9) -> dict[str, ImageProfile]:
    """Profiles applied to uploads. Extensions missing here are stored untouched."""
    jpeg = ImageProfile("JPEG", {"quality": jpeg_quality})
    return {
        ".jpg": jpeg,
        ".jpeg": jpeg,
        ".png": ImageProfile("PNG", {"compress_level": png_compress_level}),
    }


def build_batch_profiles(
    jpeg_quality: int = 70,
    png_compress_level: int = 1,
    webp_quality: int = 75,
) -> dict[str, ImageProfile]:
    """Upload profiles extended with WebP, used by the directory recompressor."""
    profiles = build_upload_profiles(jpeg_quality, png_compress_level)
    profiles[".webp"] = ImageProfile("WEBP", {"quality": webp_quality})
    return profiles


def select_profile(path: Path, profiles: ProfileMap) -> ImageProfile | None:
    return profiles.get(path.suffix.lower())


def encode(data: bytes, profile: ImageProfile) -> bytes:
    """Decode ``data`` and re-encode it with ``profile``."""
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            if profile.format == "JPEG" and image.mode not in _JPEG_MODES:
                image = image.convert("RGB")
            buffer = BytesIO()
            image.save(buffer, format=profile.format, **profile.options)
    except (
        Image.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
        EOFError,
        IndexError,
        struct.error,
    ) as exc:
        raise CompressionFailed(reason=str(exc)) from exc
    return buffer.getvalue()


def compress(
    path: Path,
    profiles: ProfileMap,
    commit: Callable[[Path, bytes], None],
) -> bool:
    """
    Re-encode the file at ``path`` in place according to its extension.

    Returns False when no profile matches and the file was left as is. Codec
    failures raise CompressionFailed before ``commit`` runs, so the original
    file is never touched in that case.
    """
    profile = select_profile(path, profiles)
    if profile is None:
        logger.info("No compression profile for file; storing as is", extra={"path": str(path)})
        return False

    try:
        original = path.read_bytes()
    except OSError as exc:
        raise CompressionFailed(reason=str(exc)) from exc

    compressed = encode(original, profile)
    commit(path, compressed)
    logger.info(
        "Compressed stored image",
        extra={
            "path": str(path),
            "format": profile.format,
            "original_bytes": len(original),
            "compressed_bytes": len(compressed),
        },
    )
    return True
