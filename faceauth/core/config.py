"""Configuration management for the face enrollment/verification service.

This module loads configuration from environment variables (.env file) and
provides a centralized Config class for accessing application settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Euclidean distance at or below which two dlib descriptors are the same person.
# This is the single most important tunable in the system; change it only with
# evaluation data to back the new value.
MATCH_THRESHOLD = 0.6

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class Config:
    """Application configuration loaded from environment variables.

    Attributes:
        host: Bind address for the HTTP server
        port: Listen port for the HTTP server
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        data_dir: Root directory for persisted state
        descriptor_path: JSON record holding the enrolled descriptor
        upload_dir: Directory where uploaded images are written
        log_file: Optional file that receives a plain-text copy of the log
        detector_model: dlib face detector ("hog" or "cnn")
        embedder_model: dlib landmark model used for encoding ("large" or "small")
        upsample: Detector upsampling passes (higher = smaller faces)
        num_jitters: Re-sampling passes when computing the encoding
        cors_allow_origins: Origins allowed by the CORS middleware
    """

    host: str
    port: int
    log_level: str

    # Paths
    data_dir: Path
    descriptor_path: Path
    upload_dir: Path
    log_file: Optional[Path] = None

    # Backend
    detector_model: str = "hog"
    embedder_model: str = "large"
    upsample: int = 1
    num_jitters: int = 1

    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables.

        Returns:
            Config instance with values from environment or defaults.

        Raises:
            ValueError: If environment variables hold invalid values.
        """
        # Get project root (parent of faceauth/)
        project_root = Path(__file__).parent.parent.parent

        host = os.getenv("HOST", "0.0.0.0")

        port = int(os.getenv("PORT", "3000"))
        if not 0 < port < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {port}")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}, got {log_level}")

        # Backend configuration
        detector_model = os.getenv("DETECTOR_MODEL", "hog").lower()
        if detector_model not in ("hog", "cnn"):
            raise ValueError(f"DETECTOR_MODEL must be 'hog' or 'cnn', got {detector_model}")

        embedder_model = os.getenv("EMBEDDER_MODEL", "large").lower()
        if embedder_model not in ("large", "small"):
            raise ValueError(
                f"EMBEDDER_MODEL must be 'large' or 'small', got {embedder_model}"
            )

        upsample = int(os.getenv("UPSAMPLE", "1"))
        if upsample < 0:
            raise ValueError(f"UPSAMPLE must be >= 0, got {upsample}")

        num_jitters = int(os.getenv("NUM_JITTERS", "1"))
        if num_jitters < 1:
            raise ValueError(f"NUM_JITTERS must be >= 1, got {num_jitters}")

        # CORS is wide open by default; the mobile client calls over the LAN
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        cors_allow_origins = [o.strip() for o in origins.split(",") if o.strip()]

        # Paths
        data_dir = Path(os.getenv("DATA_DIR", str(project_root / "data")))
        descriptor_path = Path(
            os.getenv("DESCRIPTOR_PATH", str(data_dir / "descriptor.json"))
        )
        upload_dir = Path(os.getenv("UPLOAD_DIR", str(project_root / "uploads")))
        log_file = os.getenv("LOG_FILE")

        return cls(
            host=host,
            port=port,
            log_level=log_level,
            data_dir=data_dir,
            descriptor_path=descriptor_path,
            upload_dir=upload_dir,
            log_file=Path(log_file) if log_file else None,
            detector_model=detector_model,
            embedder_model=embedder_model,
            upsample=upsample,
            num_jitters=num_jitters,
            cors_allow_origins=cors_allow_origins,
        )

    def __repr__(self) -> str:
        """Return string representation of config."""
        return (
            f"Config(\n"
            f"  Listen: {self.host}:{self.port},\n"
            f"  Log Level: {self.log_level},\n"
            f"  Descriptor: {self.descriptor_path},\n"
            f"  Uploads: {self.upload_dir},\n"
            f"  Detector: {self.detector_model} (upsample={self.upsample}),\n"
            f"  Embedder: {self.embedder_model} (jitters={self.num_jitters}),\n"
            f"  Threshold: {MATCH_THRESHOLD}\n"
            f")"
        )


# Global config instance (lazy-loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get global config instance (singleton pattern).

    Returns:
        Config instance loaded from environment.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
