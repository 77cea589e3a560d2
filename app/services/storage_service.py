"""
app/services/storage_service.py

Purpose: On-disk storage of PDF binaries

- Generates unique stored names (uuid4 based)
- Resolves stored names inside the upload directory
- Reads, writes and removes binaries
- Builds the relative URL a stored file is served from
"""

import os
import uuid
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError
from app.core.logging import get_logger
from utils.constants import PDF_EXTENSION

logger = get_logger(__name__)


def upload_root() -> Path:
    """Returns the upload directory, creating it when missing."""
    root = Path(settings.UPLOAD_PATH)
    root.mkdir(parents=True, exist_ok=True)
    return root


def generate_stored_name(prefix: str = "", extension: str = PDF_EXTENSION) -> str:
    """
    Unique name for a new binary, e.g. `merged-<uuid>.pdf`.
    Concurrent requests never share an output path.
    """
    extension = extension if extension.startswith(".") else f".{extension}"
    return f"{prefix}{uuid.uuid4()}{extension.lower()}"


def resolve_path(stored_name: str) -> Path:
    """
    Maps a stored name to its path. Names containing directory parts are
    rejected so a record can never point outside the upload directory.
    """
    if not stored_name or Path(stored_name).name != stored_name:
        raise ResourceNotFoundError("File not found on disk")
    return upload_root() / stored_name


def file_url(stored_name: str) -> str:
    return f"{settings.UPLOAD_URL_PREFIX}/{stored_name}"


def exists(stored_name: str) -> bool:
    try:
        return resolve_path(stored_name).is_file()
    except ResourceNotFoundError:
        return False


def write_bytes(stored_name: str, data: bytes) -> Path:
    path = resolve_path(stored_name)
    path.write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {stored_name}")
    return path


def read_bytes(stored_name: str) -> bytes:
    """
    Raises:
        ResourceNotFoundError: If the binary is missing on disk
    """
    path = resolve_path(stored_name)
    if not path.is_file():
        raise ResourceNotFoundError("File not found on disk")
    return path.read_bytes()


def remove_file(stored_name: str) -> bool:
    """
    Best-effort removal. Failures are logged, never raised.

    Returns:
        True if a binary was removed
    """
    try:
        path = resolve_path(stored_name)
        if path.is_file():
            os.remove(path)
            logger.debug(f"Removed {stored_name}")
            return True
    except (OSError, ResourceNotFoundError) as e:
        logger.warning(f"Could not remove stored file {stored_name}: {e}")
    return False
