"""Verification service comparing a new face against the enrolled one.

The decision rule is a fixed Euclidean distance threshold:

    distance = sqrt(sum_i (enrolled[i] - probe[i])^2)
    success  = distance <= MATCH_THRESHOLD (0.6)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from faceauth.core.config import MATCH_THRESHOLD
from faceauth.core.errors import NoEnrollment, ProcessingFailure
from faceauth.core.interfaces import EmbeddingProvider
from faceauth.core.logging_config import get_logger
from faceauth.core.utils import euclidean_distance
from faceauth.services.descriptor_store import DescriptorStore
from faceauth.services.extraction import discard_upload, extract_from_file

logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of comparing a probe face with the enrolled face.

    Attributes:
        success: True if distance <= threshold
        distance: Raw Euclidean distance, returned even on success so the
                  caller can reason about confidence

    Example:
        >>> result = VerificationResult(success=True, distance=0.41)
        >>> result.to_dict()
        {'success': True, 'distance': 0.41}
    """

    success: bool
    distance: float

    def to_dict(self) -> dict:
        return {"success": self.success, "distance": self.distance}


class VerificationService:
    """Service that verifies an uploaded face against the enrolled descriptor.

    Preconditions are checked in order:
    1. A descriptor must be enrolled, else NoEnrollment (nothing is decoded)
    2. The image must decode and contain a face, else NoFaceDetected

    Attributes:
        provider: Embedding provider (external face model)
        store: Descriptor store holding the enrolled identity
        threshold: Maximum distance accepted as a match

    Example:
        >>> service = VerificationService(provider=provider, store=store)
        >>> result = service.verify("uploads/1700000000000-face.jpg")
        >>> print(result.success, f"{result.distance:.3f}")
        True 0.412
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        store: DescriptorStore,
        threshold: float = MATCH_THRESHOLD,
    ):
        """Initialize verification service.

        Args:
            provider: Embedding provider instance
            store: Descriptor store instance
            threshold: Distance threshold. Production code keeps the default.

        Raises:
            ValueError: If threshold is negative.
        """
        if threshold < 0.0:
            raise ValueError(f"Threshold must be >= 0, got {threshold}")

        self.provider = provider
        self.store = store
        self.threshold = threshold

    def verify(self, image_path: Union[str, Path]) -> VerificationResult:
        """Verify the face in an uploaded image against the enrolled face.

        Args:
            image_path: Uploaded image file. It is deleted before returning.

        Returns:
            VerificationResult with the match decision and raw distance.

        Raises:
            NoEnrollment: If nothing has been enrolled yet.
            NoFaceDetected: If the image is invalid or contains no face.
            ProcessingFailure: If decoding or the provider fails unexpectedly.
        """
        try:
            enrolled = self.store.current()
            if enrolled is None:
                logger.info("Verification requested with no enrolled face")
                raise NoEnrollment()

            probe = extract_from_file(self.provider, image_path)

            try:
                distance = euclidean_distance(enrolled, probe)
            except ValueError as e:
                raise ProcessingFailure(details=str(e)) from e

            result = VerificationResult(success=distance <= self.threshold, distance=distance)

            logger.info(
                f"Verification {'matched' if result.success else 'rejected'}: "
                f"distance={distance:.4f}, threshold={self.threshold}"
            )
            return result
        finally:
            discard_upload(image_path)

    def __repr__(self) -> str:
        """String representation."""
        return f"VerificationService(threshold={self.threshold}, store={self.store!r})"
