"""
Upload storage on local disk.

Files are written to the configured upload directory under a random hex
name that keeps the original extension; the original name is kept in the
attachment row only.
"""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from grant_portal.core.errors import NotFoundError, UploadRejectedError
from grant_portal.core.logging_config import get_logger
from grant_portal.server.core.config import UploadConfig

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredFile:
    """Where an upload landed and what it was."""

    filename: str
    original_name: str
    content_type: Optional[str]
    size: int


def extension_of(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def store_upload(file: Optional[UploadFile], config: UploadConfig) -> StoredFile:
    """
    Validate and persist an uploaded file.

    Args:
        file: The multipart upload, None when the field was missing
        config: Upload directory, size limit and allowed extensions

    Returns:
        StoredFile describing the saved file

    Raises:
        UploadRejectedError: 400 when no file was sent or its type is not
            allowed, 413 when it exceeds the size limit
    """
    if file is None or not file.filename:
        raise UploadRejectedError("No file uploaded")

    extension = extension_of(file.filename)
    allowed = {ext.lower().lstrip(".") for ext in config.allowed_extensions}
    if extension not in allowed:
        raise UploadRejectedError("Unsupported file type")

    content = bytearray()
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        content.extend(chunk)
        if len(content) > config.max_bytes:
            raise UploadRejectedError(
                f"File too large (limit {config.max_bytes} bytes)", status_code=413
            )

    filename = f"{secrets.token_hex(16)}.{extension}"
    await asyncio.to_thread(_write, Path(config.directory) / filename, bytes(content))
    logger.debug(f"Stored upload {file.filename!r} as {filename} ({len(content)} bytes)")

    return StoredFile(
        filename=filename,
        original_name=file.filename,
        content_type=file.content_type,
        size=len(content),
    )


def discard_upload(filename: str, config: UploadConfig) -> None:
    """Delete a stored file that no attachment row refers to."""
    (Path(config.directory) / filename).unlink(missing_ok=True)
    logger.debug(f"Discarded upload {filename}")


def stored_path(filename: str, config: UploadConfig) -> Path:
    """Resolve a stored file, refusing names that escape the upload directory."""
    directory = Path(config.directory).resolve()
    path = (directory / filename).resolve()
    if path.parent != directory or not path.is_file():
        raise NotFoundError("File not found")
    return path
