"""Shared fixtures: a fake embedding provider and tiny test images.

The fake provider keys descriptors on the first pixel value of the decoded
image, so tests can build "photos of Alice" without any face model.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

import cv2
import numpy as np
import pytest

from faceauth.core.interfaces import BBox, DetectionResult
from faceauth.services import DescriptorStore, EnrollmentService, VerificationService

ALICE = 10
ALICE_AGAIN = 11
BOB = 20
NO_FACE = 30
CRASH = 40


class FakeProvider:
    """EmbeddingProvider returning canned descriptors by pixel value."""

    def __init__(self, faces: Dict[int, np.ndarray]):
        self.faces = faces
        self.calls = 0

    def extract(self, image_bgr: np.ndarray) -> Optional[DetectionResult]:
        self.calls += 1
        key = int(image_bgr[0, 0, 0])
        if key == CRASH:
            raise RuntimeError("model exploded")
        descriptor = self.faces.get(key)
        if descriptor is None:
            return None
        return DetectionResult(descriptor=descriptor.copy(), bbox=BBox(0, 0, 8, 8))


@pytest.fixture
def descriptors() -> Dict[int, np.ndarray]:
    """128-D descriptors: Alice, Alice in another photo, and Bob."""
    rng = np.random.default_rng(42)
    alice = rng.normal(0.0, 0.1, 128)
    return {
        ALICE: alice,
        ALICE_AGAIN: alice + 0.02,  # distance ~0.23
        BOB: alice + 0.1,  # distance ~1.13
    }


@pytest.fixture
def provider(descriptors) -> FakeProvider:
    return FakeProvider(descriptors)


@pytest.fixture
def store(tmp_path) -> DescriptorStore:
    store = DescriptorStore(tmp_path / "data" / "descriptor.json")
    store.load()
    return store


@pytest.fixture
def enrollment(provider, store) -> EnrollmentService:
    return EnrollmentService(provider=provider, store=store)


@pytest.fixture
def verification(provider, store) -> VerificationService:
    return VerificationService(provider=provider, store=store)


def encode_png(value: int) -> bytes:
    """Encode a small solid-color PNG whose pixels all equal ``value``."""
    image = np.full((8, 8, 3), value, dtype=np.uint8)
    ok, buffer = cv2.imencode(".png", image)
    assert ok
    return buffer.tobytes()


@pytest.fixture
def make_upload(tmp_path) -> Callable[..., Path]:
    """Write an image into an uploads directory, as the API would."""
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    counter = iter(range(1_000_000))

    def _make(value: Optional[int] = None, raw: Optional[bytes] = None) -> Path:
        path = upload_dir / f"upload-{next(counter)}.png"
        path.write_bytes(raw if raw is not None else encode_png(value))
        return path

    return _make
