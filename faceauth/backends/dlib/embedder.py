"""Dlib embedder for face descriptor extraction using face_recognition library.

This module provides face descriptor extraction using dlib's ResNet-34 model
via the face_recognition library. It converts a located face into a
128-dimensional feature vector.
"""

from __future__ import annotations

from typing import Literal, Tuple

import cv2
import face_recognition
import numpy as np

from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


class DlibEmbedder:
    """Dlib embedder for extracting 128-D face descriptors.

    This embedder uses dlib's ResNet-34 model (trained on ~3 million faces)
    to convert face images into 128-dimensional feature vectors. Descriptors
    of the same person are typically within 0.6 Euclidean distance.

    Attributes:
        model: Landmark model size ("large" or "small")
        num_jitters: Number of times to re-sample face for encoding
        embedding_dim: Dimension of output descriptors (128 for dlib)

    Example:
        >>> embedder = DlibEmbedder(model="large")
        >>> descriptor = embedder.embed_from_frame(frame, (top, right, bottom, left))
        >>> assert descriptor.shape == (128,)
    """

    def __init__(
        self,
        model: Literal["large", "small"] = "large",
        num_jitters: int = 1,
    ):
        """Initialize dlib embedder.

        Args:
            model: Landmark model used to align the face before encoding.
                   "large" - 68 points, more accurate (default)
                   "small" - 5 points, faster
            num_jitters: Number of times to re-sample the face when calculating
                        encoding. Higher values are more accurate but slower.
        """
        if model not in ("large", "small"):
            raise ValueError(f"model must be 'large' or 'small', got '{model}'")
        if num_jitters < 1:
            raise ValueError(f"num_jitters must be >= 1, got {num_jitters}")

        self.model = model
        self.num_jitters = num_jitters
        self.embedding_dim = 128

        logger.info(f"Initialized dlib embedder (model={model}, num_jitters={num_jitters})")

    def embed_from_frame(
        self,
        frame_bgr: np.ndarray,
        face_location: Tuple[int, int, int, int],
    ) -> np.ndarray:
        """Extract a descriptor directly from a frame with a face location.

        Args:
            frame_bgr: Full frame in BGR format.
            face_location: Face location as (top, right, bottom, left).

        Returns:
            Descriptor vector, shape [128], dtype float64.
            Descriptors are NOT normalized: the 0.6 distance tolerance is
            calibrated on raw dlib output.

        Raises:
            ValueError: If the frame is empty or no encoding could be computed.
            RuntimeError: If the underlying library fails.
        """
        if frame_bgr is None or frame_bgr.size == 0:
            raise ValueError("Empty frame provided")

        try:
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

            encodings = face_recognition.face_encodings(
                frame_rgb,
                known_face_locations=[face_location],
                num_jitters=self.num_jitters,
                model=self.model,
            )
        except Exception as e:
            logger.error(f"Failed to extract embedding from frame: {e}")
            raise RuntimeError(f"Embedding extraction failed: {e}") from e

        if not encodings:
            raise ValueError("Could not compute face encoding at given location")

        descriptor = np.asarray(encodings[0], dtype=np.float64)

        if descriptor.shape[0] != self.embedding_dim:
            raise RuntimeError(
                f"Unexpected embedding dimension {descriptor.shape[0]}, "
                f"expected {self.embedding_dim}"
            )

        return descriptor

    def __repr__(self) -> str:
        """String representation of embedder."""
        return (
            f"DlibEmbedder(model='{self.model}', "
            f"num_jitters={self.num_jitters}, dim={self.embedding_dim})"
        )
