"""Tests for the dlib backend with the face_recognition calls patched out."""

from __future__ import annotations

import numpy as np
import pytest

face_recognition = pytest.importorskip("face_recognition")

from faceauth.backends.dlib import DlibDetector, DlibEmbedder, DlibEmbeddingProvider  # noqa: E402
from faceauth.backends.factory import create_provider  # noqa: E402
from faceauth.core.config import Config  # noqa: E402
from faceauth.core.interfaces import BBox, Detection, Detector, Embedder, EmbeddingProvider  # noqa: E402


@pytest.fixture
def frame():
    return np.zeros((200, 300, 3), dtype=np.uint8)


@pytest.fixture
def provider():
    return DlibEmbeddingProvider(DlibDetector(model="hog"), DlibEmbedder(model="large"))


def test_invalid_model_names():
    with pytest.raises(ValueError):
        DlibDetector(model="mtcnn")
    with pytest.raises(ValueError):
        DlibEmbedder(model="medium")
    with pytest.raises(ValueError):
        DlibEmbedder(num_jitters=0)


def test_components_satisfy_protocols(provider):
    assert isinstance(provider.detector, Detector)
    assert isinstance(provider.embedder, Embedder)
    assert isinstance(provider, EmbeddingProvider)


def test_provider_accepts_any_detector_and_embedder(frame):
    class OneFace:
        def detect(self, frame_bgr):
            return [Detection(bbox=BBox(5, 10, 45, 60), score=0.9)]

    class Constant:
        embedding_dim = 4

        def embed_from_frame(self, frame_bgr, face_location):
            assert face_location == (10, 45, 60, 5)
            return np.ones(4)

    provider = DlibEmbeddingProvider(OneFace(), Constant())
    result = provider.extract(frame)

    assert provider.embedding_dim == 4
    assert np.array_equal(result.descriptor, np.ones(4))
    assert result.bbox == BBox(5, 10, 45, 60)


def test_detect_sorts_by_area_and_clamps(monkeypatch, frame):
    # (top, right, bottom, left)
    locations = [(10, 60, 60, 10), (0, 400, 150, 100)]
    monkeypatch.setattr(face_recognition, "face_locations", lambda *a, **k: locations)

    detections = DlibDetector().detect(frame)

    assert len(detections) == 2
    assert detections[0].bbox.x1 == 100
    assert detections[0].bbox.x2 == 299  # clamped to width - 1
    assert detections[0].bbox.area > detections[1].bbox.area


def test_detect_empty_frame():
    assert DlibDetector().detect(np.zeros((0, 0, 3), dtype=np.uint8)) == []


def test_detect_library_failure(monkeypatch, frame):
    def boom(*args, **kwargs):
        raise RuntimeError("dlib crashed")

    monkeypatch.setattr(face_recognition, "face_locations", boom)

    with pytest.raises(RuntimeError, match="Face detection failed"):
        DlibDetector().detect(frame)


def test_extract_uses_largest_face(monkeypatch, provider, frame):
    locations = [(10, 60, 60, 10), (20, 250, 180, 100)]
    requested = []

    def fake_encodings(image, known_face_locations, num_jitters, model):
        requested.extend(known_face_locations)
        return [np.full(128, 0.05)]

    monkeypatch.setattr(face_recognition, "face_locations", lambda *a, **k: locations)
    monkeypatch.setattr(face_recognition, "face_encodings", fake_encodings)

    result = provider.extract(frame)

    assert requested == [(20, 250, 180, 100)]
    assert result.descriptor.shape == (128,)
    assert result.descriptor.dtype == np.float64
    # Raw dlib output, not normalized
    assert np.allclose(result.descriptor, 0.05)
    assert result.bbox.to_location() == (20, 250, 180, 100)


def test_extract_no_face(monkeypatch, provider, frame):
    monkeypatch.setattr(face_recognition, "face_locations", lambda *a, **k: [])

    assert provider.extract(frame) is None


def test_extract_unencodable_face(monkeypatch, provider, frame):
    monkeypatch.setattr(face_recognition, "face_locations", lambda *a, **k: [(10, 60, 60, 10)])
    monkeypatch.setattr(face_recognition, "face_encodings", lambda *a, **k: [])

    assert provider.extract(frame) is None


def test_factory_builds_dlib_provider(tmp_path):
    config = Config(
        host="127.0.0.1",
        port=3000,
        log_level="INFO",
        data_dir=tmp_path,
        descriptor_path=tmp_path / "descriptor.json",
        upload_dir=tmp_path / "uploads",
        detector_model="cnn",
        upsample=2,
        num_jitters=3,
    )

    provider = create_provider(config)

    assert isinstance(provider, EmbeddingProvider)
    assert provider.detector.model == "cnn"
    assert provider.detector.upsample == 2
    assert provider.embedder.num_jitters == 3
    assert provider.embedding_dim == 128


def test_factory_unknown_backend(tmp_path):
    with pytest.raises(ValueError, match="Unknown backend"):
        create_provider(Config.from_env(), backend_type="insightface")
