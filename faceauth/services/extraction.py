"""Shared steps of enrollment and verification.

Both services read an uploaded file, decode it, ask the embedding provider for
one descriptor, and must delete the upload whatever happens.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

from faceauth.core.errors import NoFaceDetected, ProcessingFailure
from faceauth.core.interfaces import EmbeddingProvider
from faceauth.core.logging_config import get_logger
from faceauth.core.utils import decode_image

logger = get_logger(__name__)


def extract_from_file(provider: EmbeddingProvider, image_path: Union[str, Path]) -> np.ndarray:
    """Decode an image file and extract one face descriptor from it.

    Args:
        provider: Embedding provider used for detection + encoding
        image_path: Uploaded image on disk

    Returns:
        Descriptor of the detected face.

    Raises:
        NoFaceDetected: If the file is not a valid image or has no face.
        ProcessingFailure: If reading, decoding or the provider fails unexpectedly.
    """
    image_path = Path(image_path)

    try:
        image = decode_image(image_path.read_bytes())
        result = None if image is None else provider.extract(image)
    except Exception as e:
        logger.error(f"Failed to process {image_path.name}: {e}", exc_info=True)
        raise ProcessingFailure(details=str(e)) from e

    if image is None:
        logger.info(f"{image_path.name} is not a decodable image")
        raise NoFaceDetected()

    if result is None:
        logger.info(f"No face detected in {image_path.name}")
        raise NoFaceDetected()

    return result.descriptor


def discard_upload(image_path: Union[str, Path]) -> None:
    """Delete an uploaded file. Missing files are ignored.

    A failure to delete is logged rather than raised so it never replaces the
    outcome of the request that owned the file.
    """
    try:
        Path(image_path).unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Failed to remove upload {image_path}: {e}")
