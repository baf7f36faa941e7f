"""Handling of multipart image uploads.

Uploads are written to the upload directory under a unique name, the way the
mobile client's files have always been stored: ``<epoch-ms>-<id>-<name>``.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from pathlib import Path

from fastapi import UploadFile

from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


def upload_filename(original: str | None) -> str:
    """Build a unique on-disk name that keeps the client's base name.

    Example:
        >>> upload_filename("../photos/face.jpg")  # doctest: +SKIP
        '1700000000000-3f2a9c1d-face.jpg'
    """
    base = Path(original or "").name or "image"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{base}"


async def save_upload(upload: UploadFile, upload_dir: Path) -> Path:
    """Write an uploaded file to ``upload_dir``.

    Args:
        upload: Multipart file from the request
        upload_dir: Destination directory (created if missing)

    Returns:
        Path of the written file.
    """
    data = await upload.read()
    path = Path(upload_dir) / upload_filename(upload.filename)
    await asyncio.to_thread(_write_file, path, data)

    logger.debug(f"Stored upload {path.name} ({len(data)} bytes)")
    return path


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    f = open(path, "xb")
    try:
        with f:
            f.write(data)
    except BaseException:
        path.unlink(missing_ok=True)
        raise
