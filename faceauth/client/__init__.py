"""Client for the faceauth HTTP API."""

from faceauth.client.api_client import (
    ClientConfig,
    ClientRequestError,
    EnrollmentFailed,
    FaceAuthClient,
    RetryPolicy,
    VerificationFailed,
)

__all__ = [
    "ClientConfig",
    "ClientRequestError",
    "EnrollmentFailed",
    "FaceAuthClient",
    "RetryPolicy",
    "VerificationFailed",
]
