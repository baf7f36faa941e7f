"""Unit tests for the verification service."""

from __future__ import annotations

import numpy as np
import pytest

from faceauth.core.config import MATCH_THRESHOLD
from faceauth.core.errors import NoEnrollment, NoFaceDetected, ProcessingFailure
from faceauth.services import EnrollmentState, VerificationResult, VerificationService
from tests.conftest import ALICE, ALICE_AGAIN, BOB, CRASH, NO_FACE


def test_threshold_is_fixed_policy():
    assert MATCH_THRESHOLD == 0.6


def test_verify_without_enrollment(verification, provider, make_upload):
    """Verify before enroll fails with NoEnrollment without touching the model."""
    upload = make_upload(ALICE)

    with pytest.raises(NoEnrollment):
        verification.verify(upload)

    assert provider.calls == 0
    assert not upload.exists()


def test_verify_without_enrollment_checked_before_image(verification, make_upload):
    """NoEnrollment wins over an invalid image."""
    with pytest.raises(NoEnrollment):
        verification.verify(make_upload(raw=b"garbage"))


def test_verify_same_image(enrollment, verification, make_upload):
    """The same face gives distance 0 and a match."""
    enrollment.enroll(make_upload(ALICE))

    result = verification.verify(make_upload(ALICE))

    assert result == VerificationResult(success=True, distance=0.0)


def test_verify_same_person_other_photo(enrollment, verification, make_upload):
    """A close descriptor matches and still reports its distance."""
    enrollment.enroll(make_upload(ALICE))

    result = verification.verify(make_upload(ALICE_AGAIN))

    assert result.success is True
    assert 0.0 < result.distance <= MATCH_THRESHOLD
    assert result.distance == pytest.approx(np.sqrt(128 * 0.02**2))


def test_verify_different_person(enrollment, verification, make_upload):
    """A clearly different face is rejected."""
    enrollment.enroll(make_upload(ALICE))

    result = verification.verify(make_upload(BOB))

    assert result.success is False
    assert result.distance > MATCH_THRESHOLD
    assert result.to_dict() == {"success": False, "distance": result.distance}


def test_verify_after_reenroll_uses_new_descriptor(enrollment, verification, make_upload):
    """After re-enrolling, only the new descriptor is compared."""
    enrollment.enroll(make_upload(ALICE))
    enrollment.enroll(make_upload(BOB))

    assert verification.verify(make_upload(BOB)).distance == 0.0
    assert verification.verify(make_upload(ALICE)).success is False


def test_verify_no_face(enrollment, verification, store, descriptors, make_upload):
    """No face raises NoFaceDetected and does not mutate the store."""
    enrollment.enroll(make_upload(ALICE))
    upload = make_upload(NO_FACE)

    with pytest.raises(NoFaceDetected):
        verification.verify(upload)

    assert store.state is EnrollmentState.ENROLLED
    assert np.array_equal(store.current(), descriptors[ALICE])
    assert not upload.exists()


def test_verify_provider_failure(enrollment, verification, make_upload):
    enrollment.enroll(make_upload(ALICE))
    upload = make_upload(CRASH)

    with pytest.raises(ProcessingFailure):
        verification.verify(upload)

    assert not upload.exists()


def test_verify_dimension_mismatch(provider, store, make_upload):
    """A stored descriptor from another model can't be compared."""
    store.save(np.zeros(64))
    service = VerificationService(provider=provider, store=store)

    with pytest.raises(ProcessingFailure, match="Processing failed"):
        service.verify(make_upload(ALICE))


def test_threshold_boundary_is_inclusive(provider, store, make_upload):
    """distance == threshold counts as a match."""
    probe = np.zeros(128)
    probe[0] = 0.5
    provider.faces[99] = probe
    store.save(np.zeros(128))
    service = VerificationService(provider=provider, store=store, threshold=0.5)

    result = service.verify(make_upload(99))

    assert result.distance == 0.5
    assert result.success is True


def test_negative_threshold_rejected(provider, store):
    with pytest.raises(ValueError):
        VerificationService(provider=provider, store=store, threshold=-0.1)


def test_verify_after_restart(provider, store, enrollment, make_upload):
    """A fresh store loaded from disk verifies against the saved enrollment."""
    enrollment.enroll(make_upload(ALICE))

    restarted = type(store)(store.path)
    restarted.load()
    service = VerificationService(provider=provider, store=restarted)

    assert service.verify(make_upload(ALICE)).distance == 0.0
