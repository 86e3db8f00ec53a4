"""File-list manifest reader.

This module parses the plain-text manifest that lists HDF5 files.
Every whitespace-separated token is one path, kept verbatim and in order.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import H5FeedManifestError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def read_manifest(source: str) -> tuple[str, ...]:
    """Read HDF5 file paths from a manifest.

    Args:
        source: Path to the UTF-8 manifest file.

    Returns:
        Ordered file paths, one per whitespace-separated token.

    Raises:
        H5FeedManifestError: If the manifest cannot be read or lists no files.
    """
    _LOGGER.info("manifest_loading", source=source)
    manifest_path = Path(source).expanduser()
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        _LOGGER.error("manifest_unreadable", source=source, reason=str(error))
        raise H5FeedManifestError(
            f"Failed to open source file {source}: {error}. "
            "Point 'source' at a readable text file listing HDF5 paths."
        ) from error
    file_paths = tuple(text.split())
    if not file_paths:
        _LOGGER.error("manifest_empty", source=source)
        raise H5FeedManifestError(
            f"Must have at least 1 HDF5 filename listed in {source}. "
            "Add one path per line and retry."
        )
    _LOGGER.info("manifest_loaded", source=source, num_files=len(file_paths))
    return file_paths
