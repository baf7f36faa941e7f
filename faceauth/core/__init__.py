"""Core modules for the faceauth service.

This package contains configuration, logging, interfaces, errors and helpers
shared by the backends, services and the HTTP boundary.
"""

from faceauth.core.config import MATCH_THRESHOLD, Config, get_config
from faceauth.core.logging_config import setup_logging, get_logger
from faceauth.core.errors import (
    FaceAuthError,
    NoEnrollment,
    NoFaceDetected,
    NoFileUploaded,
    PersistenceFailure,
    ProcessingFailure,
)
from faceauth.core.interfaces import (
    BBox,
    Detection,
    DetectionResult,
    Detector,
    Embedder,
    EmbeddingProvider,
)
from faceauth.core.utils import as_descriptor, decode_image, euclidean_distance

__all__ = [
    # Config
    "MATCH_THRESHOLD",
    "Config",
    "get_config",
    # Logging
    "setup_logging",
    "get_logger",
    # Errors
    "FaceAuthError",
    "NoEnrollment",
    "NoFaceDetected",
    "NoFileUploaded",
    "PersistenceFailure",
    "ProcessingFailure",
    # Interfaces
    "BBox",
    "Detection",
    "DetectionResult",
    "Detector",
    "Embedder",
    "EmbeddingProvider",
    # Utils
    "as_descriptor",
    "decode_image",
    "euclidean_distance",
]
