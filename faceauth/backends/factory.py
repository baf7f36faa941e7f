"""Backend factory for the enrollment/verification pipeline.

This module is the composition root for the face model: it builds the
EmbeddingProvider the services use. dlib is imported lazily so the rest of
the package (and its tests) can run without model weights installed.

Usage:
    provider = create_provider(config)
    provider = create_provider(config, backend_type="dlib")
"""

from __future__ import annotations

from typing import Literal

from faceauth.core.config import Config
from faceauth.core.interfaces import EmbeddingProvider
from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)

# Backend type alias
BackendType = Literal["dlib"]

SUPPORTED_BACKENDS = ("dlib",)


def create_provider(
    config: Config | None = None,
    backend_type: BackendType = "dlib",
) -> EmbeddingProvider:
    """Create the embedding provider for the specified backend.

    Args:
        config: Configuration object. If None, loads from .env
        backend_type: Backend to use (only "dlib" is available)

    Returns:
        EmbeddingProvider ready to extract descriptors.

    Raises:
        ValueError: If the backend is unknown.

    Example:
        >>> from faceauth.core.config import get_config
        >>> provider = create_provider(get_config())
    """
    if config is None:
        from faceauth.core.config import get_config

        config = get_config()

    if backend_type == "dlib":
        return _create_dlib_provider(config)

    raise ValueError(
        f"Unknown backend: '{backend_type}'. "
        f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
    )


def _create_dlib_provider(config: Config) -> EmbeddingProvider:
    """Create dlib provider components.

    Uses:
    - dlib HOG or CNN detector (via face_recognition)
    - dlib ResNet-34 embedder (128-D descriptors)
    """
    logger.info(f"Creating dlib backend (detector={config.detector_model})...")

    from faceauth.backends.dlib import DlibDetector, DlibEmbedder, DlibEmbeddingProvider

    detector = DlibDetector(model=config.detector_model, upsample=config.upsample)
    embedder = DlibEmbedder(model=config.embedder_model, num_jitters=config.num_jitters)

    logger.info("dlib backend created successfully")

    return DlibEmbeddingProvider(detector=detector, embedder=embedder)
