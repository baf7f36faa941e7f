"""Durable single-slot store for the enrolled face descriptor.

The store holds at most one descriptor for the whole process. It is written
to a JSON file as an array of numbers on every enrollment and read back once
at startup.

State machine:
    UNINITIALIZED --load() finds record--> ENROLLED
    UNINITIALIZED --load() finds nothing--> UNENROLLED
    UNENROLLED/ENROLLED --save() succeeds--> ENROLLED
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from faceauth.core.errors import PersistenceFailure
from faceauth.core.logging_config import get_logger
from faceauth.core.utils import as_descriptor

logger = get_logger(__name__)


class EnrollmentState(str, Enum):
    """Lifecycle of the enrolled identity."""

    UNINITIALIZED = "uninitialized"
    UNENROLLED = "unenrolled"
    ENROLLED = "enrolled"


class DescriptorStore:
    """Thread-safe store for the single enrolled descriptor.

    All access to the slot goes through one lock: writers are serialized and
    readers always see a fully written descriptor. The in-memory slot is only
    updated after the record is durably on disk, so a failed save leaves the
    previous enrollment in place.

    Attributes:
        path: JSON record holding the descriptor

    Example:
        >>> store = DescriptorStore("data/descriptor.json")
        >>> store.load()
        >>> store.save(descriptor)
        >>> store.current().shape
        (128,)
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the store. Nothing is read until load() is called.

        Args:
            path: Location of the JSON record
        """
        self.path = Path(path)
        self._lock = threading.Lock()
        self._descriptor: Optional[np.ndarray] = None
        self._state = EnrollmentState.UNINITIALIZED

    @property
    def state(self) -> EnrollmentState:
        with self._lock:
            return self._state

    @property
    def is_enrolled(self) -> bool:
        return self.state is EnrollmentState.ENROLLED

    def load(self) -> Optional[np.ndarray]:
        """Populate the slot from the durable record.

        A missing record is not an error. An unreadable or corrupt record is
        logged and treated as "no enrolled identity".

        Returns:
            The loaded descriptor, or None if the store is unenrolled.
        """
        with self._lock:
            self._descriptor = self._read_record()
            if self._descriptor is None:
                self._state = EnrollmentState.UNENROLLED
            else:
                self._state = EnrollmentState.ENROLLED
            return self._descriptor

    def _read_record(self) -> Optional[np.ndarray]:
        if not self.path.exists():
            logger.info(f"No enrolled descriptor at {self.path}")
            return None

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            descriptor = as_descriptor(payload)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable descriptor record {self.path}: {e}")
            return None

        logger.info(f"Loaded enrolled descriptor ({descriptor.size}-D) from {self.path}")
        return descriptor

    def save(self, descriptor: Union[np.ndarray, Sequence[float]]) -> np.ndarray:
        """Persist a descriptor, replacing any previous one.

        The record is written to a temp file, flushed and fsynced, then
        atomically moved over the old record before the slot is updated.

        Args:
            descriptor: New descriptor, 1-D numeric vector

        Returns:
            The stored (read-only, float64) descriptor.

        Raises:
            ValueError: If the descriptor is not a finite 1-D vector.
            PersistenceFailure: If the record could not be written.
        """
        stored = as_descriptor(descriptor)
        body = json.dumps(stored.tolist())

        with self._lock:
            try:
                self._write_record(body)
            except OSError as e:
                logger.error(f"Failed to persist descriptor to {self.path}: {e}")
                raise PersistenceFailure(details=str(e)) from e

            self._descriptor = stored
            self._state = EnrollmentState.ENROLLED

        logger.info(f"Saved enrolled descriptor ({stored.size}-D) to {self.path}")
        return stored

    def _write_record(self, body: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def current(self) -> Optional[np.ndarray]:
        """Return the enrolled descriptor, or None if nothing is enrolled."""
        with self._lock:
            return self._descriptor

    def __repr__(self) -> str:
        """String representation of store."""
        return f"DescriptorStore(path={self.path}, state={self.state.value})"
