"""High-level services for face enrollment and verification.

This package contains the descriptor store and the two services that
orchestrate decoding, descriptor extraction, persistence and matching.
"""

from faceauth.services.descriptor_store import DescriptorStore, EnrollmentState
from faceauth.services.enrollment import EnrollmentOutcome, EnrollmentService
from faceauth.services.verification import VerificationResult, VerificationService

__all__ = [
    "DescriptorStore",
    "EnrollmentState",
    "EnrollmentOutcome",
    "EnrollmentService",
    "VerificationResult",
    "VerificationService",
]
