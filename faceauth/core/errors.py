"""Error taxonomy shared by the services and the HTTP boundary.

Each error carries the HTTP status it maps to, so the API layer can translate
it without a lookup table. 4xx errors are expected client conditions; 5xx
errors carry diagnostic ``details`` for the server log and the (trusted)
caller.
"""

from __future__ import annotations

from typing import Optional


class FaceAuthError(Exception):
    """Base class for enrollment/verification errors."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize to the JSON error body returned by the API."""
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NoFileUploaded(FaceAuthError):
    """Request did not carry an ``image`` part."""

    status_code = 400
    default_message = "No image uploaded"


class NoFaceDetected(FaceAuthError):
    """Image could not be decoded or contained no detectable face."""

    status_code = 400
    default_message = "No face detected"


class NoEnrollment(FaceAuthError):
    """Verification was requested before any face was enrolled."""

    status_code = 400
    default_message = "No enrolled face"


class ProcessingFailure(FaceAuthError):
    """Image decoding or the embedding provider failed unexpectedly."""

    status_code = 500
    default_message = "Processing failed"


class PersistenceFailure(FaceAuthError):
    """The descriptor record could not be written or read."""

    status_code = 500
    default_message = "Failed to persist enrollment"
