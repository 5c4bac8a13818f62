"""Locate report files on disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def find_report_files(source_path: Path, extension: str) -> list[Path]:
    """Find report files for a source path.

    Args:
        source_path: A report file, or a directory searched recursively
        extension: File extension of the reports (e.g., "xml")

    Returns:
        Sorted list of report file paths

    Raises:
        FileNotFoundError: If the source path doesn't exist
        ValueError: If a single file doesn't have the expected extension

    """
    if not source_path.exists():
        raise FileNotFoundError(f"Report path not found: {source_path}")

    if source_path.is_dir():
        logger.info(f"{source_path} is a folder. Looking for *.{extension} files")
        files = sorted(p for p in source_path.rglob(f"*.{extension}") if p.is_file())
        for file in files:
            logger.info(f"Found report file: {file}")
        return files

    if source_path.suffix.lstrip(".").lower() != extension:
        raise ValueError(
            f"{source_path} is not a .{extension} file, unable to process it"
        )

    logger.info(f"{source_path} is a file")
    return [source_path]
