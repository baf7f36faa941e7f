"""Utility functions for the enrollment/verification pipeline.

This module provides image decoding and descriptor math helpers.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

import cv2
import numpy as np

from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)

ArrayLike = Union[np.ndarray, Sequence[float]]


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes (JPEG, PNG, ...) into a BGR array.

    Args:
        data: Raw file contents

    Returns:
        Image in BGR format [H, W, 3], or None if the bytes are not an image.

    Example:
        >>> image = decode_image(path.read_bytes())
        >>> if image is None:
        ...     print("Not an image")
    """
    if not data:
        return None

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)

    if image is None or image.size == 0:
        logger.debug(f"Could not decode {len(data)} bytes as an image")
        return None

    return image


def as_descriptor(values: ArrayLike) -> np.ndarray:
    """Convert a sequence of numbers into a read-only float64 descriptor.

    Args:
        values: Descriptor values, any 1-D numeric sequence

    Returns:
        Read-only 1-D float64 array.

    Raises:
        ValueError: If the input is not a non-empty 1-D vector of finite numbers.
    """
    descriptor = np.array(values, dtype=np.float64)

    if descriptor.ndim != 1 or descriptor.size == 0:
        raise ValueError(
            f"Descriptor must be a non-empty 1-D vector, got shape {descriptor.shape}"
        )

    if not np.all(np.isfinite(descriptor)):
        raise ValueError("Descriptor contains NaN or infinite values")

    descriptor.setflags(write=False)
    return descriptor


def euclidean_distance(a: ArrayLike, b: ArrayLike) -> float:
    """Compute Euclidean distance between two descriptors.

    distance = sqrt(sum_i (a[i] - b[i])^2)

    Args:
        a: First descriptor, shape [D]
        b: Second descriptor, shape [D]

    Returns:
        Non-negative distance; 0.0 for identical descriptors.

    Raises:
        ValueError: If the descriptors have different shapes.

    Example:
        >>> euclidean_distance([0.0, 0.0], [3.0, 4.0])
        5.0
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    if a.shape != b.shape:
        raise ValueError(f"Descriptor shapes differ: {a.shape} vs {b.shape}")

    return float(np.sqrt(np.sum((a - b) ** 2)))
