"""HTTP client for the enroll and verify endpoints.

The base URL comes from the environment instead of being hardcoded. Network
failures are retried under a bounded backoff policy; application errors (any
HTTP error status) are never retried.
"""

from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import httpx
from dotenv import load_dotenv

from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


class ClientRequestError(RuntimeError):
    """Raised when a call to the faceauth API fails.

    ``message`` is safe to show to an end user. ``status_code`` and
    ``server_error`` hold the diagnostic detail for logs only.
    """

    user_message = "Request Failed"

    def __init__(
        self,
        status_code: Optional[int] = None,
        server_error: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.server_error = server_error
        super().__init__(self.user_message)


class EnrollmentFailed(ClientRequestError):
    user_message = "Enrollment Failed"


class VerificationFailed(ClientRequestError):
    user_message = "Verification Failed"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry for network-class failures.

    Attempt ``n`` (0-based) waits ``backoff * 2**n`` plus a uniform random
    jitter in ``[0, jitter]`` seconds before retrying.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        backoff: Base delay in seconds
        jitter: Maximum random delay added to each wait, in seconds
    """

    max_retries: int = 2
    backoff: float = 0.5
    jitter: float = 0.25

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.backoff < 0 or self.jitter < 0:
            raise ValueError("backoff and jitter must be >= 0")

    def delay(self, attempt: int) -> float:
        return self.backoff * (2**attempt) + random.uniform(0.0, self.jitter)


@dataclass(frozen=True)
class ClientConfig:
    """Client settings loaded from environment variables.

    Attributes:
        base_url: API root, e.g. http://192.168.1.20:3000
        timeout: Per-request timeout in seconds
        retry: Retry policy for network failures
    """

    base_url: str = "http://localhost:3000"
    timeout: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Load client configuration from environment variables.

        Raises:
            ValueError: If a value is invalid.
        """
        load_dotenv()

        timeout = float(os.getenv("FACEAUTH_TIMEOUT", "30"))
        if timeout <= 0:
            raise ValueError(f"FACEAUTH_TIMEOUT must be > 0, got {timeout}")

        return cls(
            base_url=os.getenv("FACEAUTH_API_URL", "http://localhost:3000").rstrip("/"),
            timeout=timeout,
            retry=RetryPolicy(
                max_retries=int(os.getenv("FACEAUTH_MAX_RETRIES", "2")),
                backoff=float(os.getenv("FACEAUTH_BACKOFF", "0.5")),
                jitter=float(os.getenv("FACEAUTH_JITTER", "0.25")),
            ),
        )


class FaceAuthClient:
    """Synchronous client for the faceauth HTTP API.

    Example:
        >>> with FaceAuthClient(ClientConfig.from_env()) as client:
        ...     client.enroll_face("me.jpg")
        ...     result = client.verify_face("selfie.jpg")
        ...     print(result["success"], result["distance"])
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration. If None, loads from .env
            transport: Optional httpx transport (used by tests)
            sleep: Function used to wait between retries
        """
        self.config = config or ClientConfig.from_env()
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> FaceAuthClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        policy = self.config.retry
        attempt = 0
        while True:
            try:
                return self._client.request(method, endpoint, **kwargs)
            except httpx.TransportError as e:
                if attempt >= policy.max_retries:
                    raise
                wait = policy.delay(attempt)
                attempt += 1
                logger.warning(
                    f"{method} {endpoint} network error ({e!r}); "
                    f"retry {attempt}/{policy.max_retries} in {wait:.2f}s"
                )
                self._sleep(wait)

    def _post_image(
        self,
        endpoint: str,
        image_path: Union[str, Path],
        error_cls: type[ClientRequestError],
    ) -> Dict[str, Any]:
        data = Path(image_path).read_bytes()

        try:
            # Re-sent as-is on retry; the body is plain bytes
            response = self._send(
                "POST",
                endpoint,
                files={"image": ("face.jpg", data, "image/jpeg")},
            )
        except httpx.TransportError as e:
            logger.error(f"{endpoint} failed: {e!r}")
            raise error_cls() from e

        if response.is_error:
            server_error = _error_message(response)
            logger.error(f"{endpoint} returned {response.status_code}: {server_error}")
            raise error_cls(status_code=response.status_code, server_error=server_error)

        return response.json()

    def health(self) -> Dict[str, Any]:
        """Call GET /health."""
        try:
            response = self._send("GET", "/health")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ClientRequestError(server_error=str(e)) from e
        return response.json()

    def enroll_face(self, image_path: Union[str, Path]) -> Dict[str, Any]:
        """Enroll the face in a local image file.

        Returns:
            Server response, ``{"enrolled": True}``.

        Raises:
            EnrollmentFailed: On network failure or any error response.
        """
        logger.info(f"Enrolling face from {image_path}")
        return self._post_image("/enroll", image_path, EnrollmentFailed)

    def verify_face(self, image_path: Union[str, Path]) -> Dict[str, Any]:
        """Verify the face in a local image file against the enrolled face.

        Returns:
            Server response, ``{"success": bool, "distance": float}``.

        Raises:
            VerificationFailed: On network failure or any error response.
        """
        logger.info(f"Verifying face from {image_path}")
        return self._post_image("/verify", image_path, VerificationFailed)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        details = body.get("details")
        return f"{body['error']}: {details}" if details else str(body["error"])
    return response.text
