"""Core interfaces and data structures for the enrollment/verification pipeline.

This module defines the abstract interfaces (Protocols) and data classes
that keep the services independent of the face model backend.

Following the Dependency Inversion Principle, the enrollment and verification
services depend on ``EmbeddingProvider`` rather than on dlib directly; the
concrete backend is chosen at the composition root.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple, runtime_checkable

import numpy as np


@dataclass
class BBox:
    """Bounding box for a detected face.

    Attributes:
        x1: Left edge x-coordinate (pixels)
        y1: Top edge y-coordinate (pixels)
        x2: Right edge x-coordinate (pixels)
        y2: Bottom edge y-coordinate (pixels)
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def width(self) -> int:
        """Get bounding box width in pixels."""
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        """Get bounding box height in pixels."""
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        """Get bounding box area in square pixels."""
        return self.width * self.height

    def to_location(self) -> Tuple[int, int, int, int]:
        """Convert to face_recognition's (top, right, bottom, left) order."""
        return (self.y1, self.x2, self.y2, self.x1)

    def __repr__(self) -> str:
        """String representation of bounding box."""
        return f"BBox(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


@dataclass
class Detection:
    """Face detection result with bounding box and confidence.

    Attributes:
        bbox: Bounding box around detected face
        score: Detection confidence score (0.0 to 1.0)
    """

    bbox: BBox
    score: float

    def __post_init__(self) -> None:
        """Validate detection data after initialization."""
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Detection score must be in [0, 1], got {self.score}")


@dataclass(frozen=True)
class DetectionResult:
    """The single face an embedding provider extracted from an image.

    Attributes:
        descriptor: Face descriptor, 1-D float array (128 values for dlib)
        bbox: Where the face was found, if the backend reports it
    """

    descriptor: np.ndarray
    bbox: Optional[BBox] = None

    def __post_init__(self) -> None:
        if self.descriptor.ndim != 1 or self.descriptor.size == 0:
            raise ValueError(
                f"descriptor must be a non-empty 1-D array, got shape {self.descriptor.shape}"
            )


@runtime_checkable
class Detector(Protocol):
    """Protocol for face detection models."""

    def detect(self, frame_bgr: np.ndarray) -> List[Detection]:
        """Detect faces in an image.

        Args:
            frame_bgr: Input image in BGR format (OpenCV convention), shape [H, W, 3]

        Returns:
            List of Detection objects, best candidate first.
            List may be empty if no faces detected.
        """
        ...


@runtime_checkable
class Embedder(Protocol):
    """Protocol for face descriptor extraction at a known face location."""

    embedding_dim: int

    def embed_from_frame(
        self,
        frame_bgr: np.ndarray,
        face_location: Tuple[int, int, int, int],
    ) -> np.ndarray:
        """Extract a descriptor for the face at ``face_location``.

        Args:
            frame_bgr: Full frame in BGR format
            face_location: (top, right, bottom, left) in pixels

        Returns:
            Descriptor vector, shape [D].
        """
        ...


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for the external face model the services consume.

    Given a decoded image, an EmbeddingProvider returns the descriptor of one
    face (the best or first one found) or None when there is no face.
    Multi-face images are not an error; only one descriptor is used.

    Example:
        >>> result = provider.extract(image)
        >>> if result is None:
        ...     print("No face")
        ... else:
        ...     print(result.descriptor.shape)
        (128,)
    """

    def extract(self, image_bgr: np.ndarray) -> Optional[DetectionResult]:
        """Extract a single face descriptor from an image.

        Args:
            image_bgr: Decoded image in BGR format, shape [H, W, 3]

        Returns:
            DetectionResult for one face, or None if no face was detected.
        """
        ...
