"""Enrollment service for registering the single enrolled face.

This module turns an uploaded image into the enrolled descriptor. Any single
detected face is accepted and unconditionally replaces the previous
enrollment; there are no quality, liveness or duplicate-identity checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from faceauth.core.errors import ProcessingFailure
from faceauth.core.interfaces import EmbeddingProvider
from faceauth.core.logging_config import get_logger
from faceauth.services.descriptor_store import DescriptorStore
from faceauth.services.extraction import discard_upload, extract_from_file

logger = get_logger(__name__)


@dataclass(frozen=True)
class EnrollmentOutcome:
    """Result of a successful enrollment."""

    enrolled: bool = True

    def to_dict(self) -> dict:
        return {"enrolled": self.enrolled}


class EnrollmentService:
    """Service that enrolls a face from an uploaded image.

    Workflow:
    1. Read and decode the uploaded file
    2. Extract one descriptor through the embedding provider
    3. Persist it in the descriptor store (overwriting any previous one)
    4. Delete the uploaded file, on success and on every failure path

    Attributes:
        provider: Embedding provider (external face model)
        store: Descriptor store holding the enrolled identity

    Example:
        >>> service = EnrollmentService(provider=provider, store=store)
        >>> service.enroll("uploads/1700000000000-face.jpg")
        EnrollmentOutcome(enrolled=True)
    """

    def __init__(self, provider: EmbeddingProvider, store: DescriptorStore):
        """Initialize enrollment service.

        Args:
            provider: Embedding provider instance
            store: Descriptor store instance
        """
        self.provider = provider
        self.store = store

    def enroll(self, image_path: Union[str, Path]) -> EnrollmentOutcome:
        """Enroll the face found in an uploaded image.

        Args:
            image_path: Uploaded image file. It is deleted before returning.

        Returns:
            EnrollmentOutcome with enrolled=True.

        Raises:
            NoFaceDetected: If the image is invalid or contains no face.
            ProcessingFailure: If decoding or the provider fails unexpectedly.
            PersistenceFailure: If the descriptor could not be written.
        """
        try:
            descriptor = extract_from_file(self.provider, image_path)

            try:
                self.store.save(descriptor)
            except ValueError as e:
                raise ProcessingFailure(details=f"Invalid descriptor: {e}") from e

            logger.info(f"Enrolled face from {Path(image_path).name}")
            return EnrollmentOutcome(enrolled=True)
        finally:
            discard_upload(image_path)

    def __repr__(self) -> str:
        """String representation."""
        return f"EnrollmentService(provider={self.provider!r}, store={self.store!r})"
