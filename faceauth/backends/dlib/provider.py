"""Embedding provider backed by dlib.

Combines DlibDetector and DlibEmbedder into the single ``extract`` call the
enrollment and verification services depend on.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from faceauth.core.interfaces import DetectionResult, Detector, Embedder
from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


class DlibEmbeddingProvider:
    """EmbeddingProvider using dlib detection + ResNet-34 descriptors.

    Only the first detected face (the largest one) is encoded. Images with
    several faces are accepted; the others are ignored.

    Example:
        >>> provider = DlibEmbeddingProvider(DlibDetector(), DlibEmbedder())
        >>> result = provider.extract(image)
        >>> result.descriptor.shape
        (128,)
    """

    def __init__(self, detector: Detector, embedder: Embedder):
        self.detector = detector
        self.embedder = embedder

    @property
    def embedding_dim(self) -> int:
        return self.embedder.embedding_dim

    def extract(self, image_bgr: np.ndarray) -> Optional[DetectionResult]:
        """Extract the descriptor of the best face in an image.

        Args:
            image_bgr: Decoded image in BGR format, shape [H, W, 3]

        Returns:
            DetectionResult with descriptor and bbox, or None if no face found.

        Raises:
            RuntimeError: If detection or encoding fails inside dlib.
        """
        detections = self.detector.detect(image_bgr)

        if not detections:
            logger.info("No face detected")
            return None

        if len(detections) > 1:
            logger.info(f"{len(detections)} faces detected, using the largest")

        best = detections[0]

        try:
            descriptor = self.embedder.embed_from_frame(image_bgr, best.bbox.to_location())
        except ValueError as e:
            logger.info(f"Face found but not encodable: {e}")
            return None

        return DetectionResult(descriptor=descriptor, bbox=best.bbox)

    def __repr__(self) -> str:
        """String representation of provider."""
        return f"DlibEmbeddingProvider(detector={self.detector}, embedder={self.embedder})"
