"""Tests for the HTTP client and its retry policy."""

from __future__ import annotations

import httpx
import pytest

from faceauth.client import (
    ClientConfig,
    EnrollmentFailed,
    FaceAuthClient,
    RetryPolicy,
    VerificationFailed,
)


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "face.jpg"
    path.write_bytes(b"\xff\xd8fake-jpeg")
    return path


def make_client(handler, retry=None):
    sleeps = []
    config = ClientConfig(base_url="http://faceauth.test", timeout=5.0, retry=retry or RetryPolicy())
    client = FaceAuthClient(config, transport=httpx.MockTransport(handler), sleep=sleeps.append)
    return client, sleeps


def test_enroll_posts_multipart_image(image):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        seen["path"] = request.url.path
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, json={"enrolled": True})

    client, _ = make_client(handler)

    assert client.enroll_face(image) == {"enrolled": True}
    assert seen["path"] == "/enroll"
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="image"' in seen["body"]
    assert b'filename="face.jpg"' in seen["body"]
    assert b"fake-jpeg" in seen["body"]


def test_verify_returns_result(image):
    def handler(request):
        return httpx.Response(200, json={"success": True, "distance": 0.31})

    client, _ = make_client(handler)

    assert client.verify_face(image) == {"success": True, "distance": 0.31}


def test_application_error_not_retried(image):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"error": "No enrolled face"})

    client, sleeps = make_client(handler)

    with pytest.raises(VerificationFailed) as exc_info:
        client.verify_face(image)

    assert len(calls) == 1
    assert sleeps == []
    # Generic message for the user, detail kept for logs
    assert str(exc_info.value) == "Verification Failed"
    assert exc_info.value.status_code == 400
    assert exc_info.value.server_error == "No enrolled face"


def test_server_error_details_kept(image):
    def handler(request):
        return httpx.Response(500, json={"error": "Processing failed", "details": "boom"})

    client, _ = make_client(handler)

    with pytest.raises(EnrollmentFailed) as exc_info:
        client.enroll_face(image)

    assert str(exc_info.value) == "Enrollment Failed"
    assert exc_info.value.server_error == "Processing failed: boom"


def test_network_error_retried_then_succeeds(image):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) <= 2:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"enrolled": True})

    client, sleeps = make_client(handler, RetryPolicy(max_retries=2, backoff=0.5, jitter=0.0))

    assert client.enroll_face(image) == {"enrolled": True}
    assert len(calls) == 3
    assert sleeps == [0.5, 1.0]


def test_network_error_gives_up_after_max_retries(image):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    client, sleeps = make_client(handler, RetryPolicy(max_retries=2, backoff=0.0, jitter=0.0))

    with pytest.raises(EnrollmentFailed) as exc_info:
        client.enroll_face(image)

    assert len(calls) == 3
    assert len(sleeps) == 2
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.TransportError)


def test_health():
    client, _ = make_client(lambda request: httpx.Response(200, json={"status": "ok"}))

    assert client.health() == {"status": "ok"}


def test_retry_delay_bounds():
    policy = RetryPolicy(max_retries=3, backoff=0.5, jitter=0.25)

    for attempt in range(3):
        base = 0.5 * 2**attempt
        assert base <= policy.delay(attempt) <= base + 0.25


@pytest.mark.parametrize(
    "kwargs", [{"max_retries": -1}, {"backoff": -0.1}, {"jitter": -1.0}]
)
def test_retry_policy_validation(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_client_config_from_env(monkeypatch):
    monkeypatch.setenv("FACEAUTH_API_URL", "http://192.168.1.20:3000/")
    monkeypatch.setenv("FACEAUTH_TIMEOUT", "90")
    monkeypatch.setenv("FACEAUTH_MAX_RETRIES", "4")
    monkeypatch.setenv("FACEAUTH_BACKOFF", "1.5")
    monkeypatch.setenv("FACEAUTH_JITTER", "0")

    config = ClientConfig.from_env()

    assert config.base_url == "http://192.168.1.20:3000"
    assert config.timeout == 90.0
    assert config.retry == RetryPolicy(max_retries=4, backoff=1.5, jitter=0.0)


def test_client_config_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("FACEAUTH_TIMEOUT", "0")

    with pytest.raises(ValueError):
        ClientConfig.from_env()
