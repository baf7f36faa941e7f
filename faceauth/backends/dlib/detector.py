"""Dlib face detector using face_recognition library.

This module provides a face detector based on dlib's HOG or CNN models
via the face_recognition library.
"""

from __future__ import annotations

from typing import List, Literal

import cv2
import face_recognition
import numpy as np

from faceauth.core.interfaces import BBox, Detection
from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


class DlibDetector:
    """Face detector using dlib via the face_recognition library.

    Supports two detection models:
    - HOG: Faster, suitable for CPU, less accurate
    - CNN: More accurate, requires GPU for real-time performance

    Attributes:
        model: Detection model ("hog" or "cnn")
        upsample: Number of times to upsample image (higher = detect smaller faces)

    Example:
        >>> detector = DlibDetector(model="hog")
        >>> detections = detector.detect(frame)
        >>> print(f"Found {len(detections)} faces")
    """

    def __init__(
        self,
        model: Literal["hog", "cnn"] = "hog",
        upsample: int = 1,
    ):
        """Initialize dlib detector.

        Args:
            model: Detection model to use.
                   "hog" - Histogram of Oriented Gradients (faster, CPU-friendly)
                   "cnn" - Convolutional Neural Network (more accurate, GPU preferred)
            upsample: Number of times to upsample image before detection.
                      Higher values detect smaller faces but are slower.
        """
        if model not in ("hog", "cnn"):
            raise ValueError(f"model must be 'hog' or 'cnn', got '{model}'")
        if upsample < 0:
            raise ValueError(f"upsample must be >= 0, got {upsample}")

        self.model = model
        self.upsample = upsample

        logger.info(f"Initialized dlib detector (model={model}, upsample={upsample})")

    def detect(self, frame_bgr: np.ndarray) -> List[Detection]:
        """Detect faces in an image.

        Args:
            frame_bgr: Input image in BGR format (OpenCV convention), shape [H, W, 3]

        Returns:
            List of Detection objects, sorted by area (descending).
            Empty list if no faces are detected.

        Raises:
            RuntimeError: If the underlying library fails.

        Note:
            face_recognition doesn't expose confidence scores, so detected
            faces get a fixed score of 0.99.
        """
        if frame_bgr is None or frame_bgr.size == 0:
            logger.warning("Empty frame provided to detector")
            return []

        try:
            # face_recognition expects RGB
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

            # Returns list of tuples: (top, right, bottom, left)
            face_locations = face_recognition.face_locations(
                frame_rgb,
                number_of_times_to_upsample=self.upsample,
                model=self.model,
            )
        except Exception as e:
            logger.error(f"Error during face detection: {e}")
            raise RuntimeError(f"Face detection failed: {e}") from e

        h, w = frame_bgr.shape[:2]

        detections = []
        for top, right, bottom, left in face_locations:
            bbox = BBox(
                x1=max(0, min(left, w - 1)),
                y1=max(0, min(top, h - 1)),
                x2=max(0, min(right, w - 1)),
                y2=max(0, min(bottom, h - 1)),
            )
            detections.append(Detection(bbox=bbox, score=0.99))

        # Largest first since there are no confidence scores to rank by
        detections.sort(key=lambda d: d.bbox.area, reverse=True)

        if detections:
            logger.debug(f"Detected {len(detections)} faces (model={self.model})")

        return detections

    def __repr__(self) -> str:
        """String representation of detector."""
        return f"DlibDetector(model='{self.model}', upsample={self.upsample})"
