"""Recompress every image of a directory into an output directory.

Usage:
    python -m photohub.batch public/uploads public/output
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .compression import ProfileMap, build_batch_profiles, encode, select_profile
from .errors import CompressionFailed

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    compressed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def recompress_directory(input_dir: Path, output_dir: Path, profiles: ProfileMap) -> BatchReport:
    """Write a re-encoded copy of each supported file of ``input_dir`` to ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    report = BatchReport()

    for path in sorted(input_dir.iterdir()):
        if not path.is_file():
            continue

        profile = select_profile(path, profiles)
        if profile is None:
            logger.info("Skipped file with unsupported format", extra={"file": path.name})
            report.skipped.append(path.name)
            continue

        try:
            data = encode(path.read_bytes(), profile)
            (output_dir / path.name).write_bytes(data)
        except (CompressionFailed, OSError) as exc:
            logger.warning("Failed to compress file", extra={"file": path.name, "error": str(exc)})
            report.failed.append(path.name)
            continue

        logger.info("Compressed file", extra={"file": path.name, "format": profile.format})
        report.compressed.append(path.name)

    return report


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="photohub-batch",
        description="Recompress JPEG, PNG and WebP files of a directory",
    )
    parser.add_argument("input_dir", type=Path, help="Directory holding the source images")
    parser.add_argument("output_dir", type=Path, help="Directory receiving the compressed copies")
    parser.add_argument("--jpeg-quality", type=int, default=70)
    parser.add_argument("--png-compress-level", type=int, default=1)
    parser.add_argument("--webp-quality", type=int, default=75)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the batch recompressor."""
    logging.basicConfig(level=logging.INFO)
    args = create_parser().parse_args(argv)

    if not args.input_dir.is_dir():
        logger.error("Input directory does not exist", extra={"input_dir": str(args.input_dir)})
        return 2

    profiles = build_batch_profiles(args.jpeg_quality, args.png_compress_level, args.webp_quality)
    report = recompress_directory(args.input_dir, args.output_dir, profiles)
    logger.info(
        "Batch recompression finished",
        extra={
            "compressed": len(report.compressed),
            "skipped": len(report.skipped),
            "failed": len(report.failed),
        },
    )
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
