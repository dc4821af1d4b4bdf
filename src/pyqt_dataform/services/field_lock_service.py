"""
Per-field lock state machine.

Two lock kinds protect a field from the builder's own write paths:

- SAVE (one-shot): the next watcher write for the field is suppressed and the
  lock is consumed. Used when a value comes from a server response and only
  the visual refresh is wanted.
- RESET (sticky): the field is skipped by ``reset_fields()`` until it is
  explicitly unlocked. Used to protect in-flight edits.

Each field moves ``IDLE -> LOCKED -> IDLE``; transitions happen only through
this service.

Pattern:
    Instead of:
        service.lock(LockKind.RESET, ["name"])
        try:
            builder.reset_fields()
        finally:
            service.unlock(LockKind.RESET, ["name"])

    Use:
        with service.locked(LockKind.RESET, ["name"]):
            builder.reset_fields()
"""

from contextlib import contextmanager
from enum import Enum
from typing import Dict, FrozenSet, Iterable
import logging

logger = logging.getLogger(__name__)


class LockKind(Enum):
    """Registry of lock kinds."""
    SAVE = "save"
    RESET = "reset"


class LockState(Enum):
    IDLE = "idle"
    LOCKED = "locked"


# Locks released by their first matching consume()
ONE_SHOT_KINDS: FrozenSet[LockKind] = frozenset({LockKind.SAVE})


class FieldLockService:
    """Holds the lock state of every field for one builder."""

    def __init__(self):
        self._states: Dict[LockKind, Dict[str, LockState]] = {kind: {} for kind in LockKind}

    def state(self, kind: LockKind, field: str) -> LockState:
        return self._states[kind].get(field, LockState.IDLE)

    def is_locked(self, kind: LockKind, field: str) -> bool:
        return self.state(kind, field) is LockState.LOCKED

    def lock(self, kind: LockKind, fields: Iterable[str]) -> None:
        for field in fields:
            self._states[kind][field] = LockState.LOCKED
            logger.debug(f"Lock {kind.value}: {field} -> locked")

    def unlock(self, kind: LockKind, fields: Iterable[str]) -> None:
        for field in fields:
            self._states[kind][field] = LockState.IDLE
            logger.debug(f"Lock {kind.value}: {field} -> idle")

    def consume(self, kind: LockKind, field: str) -> bool:
        """
        Release a one-shot lock if it is held.

        Returns:
            True if the field was locked (the caller must skip its write)

        Raises:
            ValueError: If ``kind`` is a sticky lock kind
        """
        if kind not in ONE_SHOT_KINDS:
            raise ValueError(
                f"Lock kind {kind.value!r} is sticky and cannot be consumed. "
                f"One-shot kinds: {[k.value for k in ONE_SHOT_KINDS]}"
            )
        if not self.is_locked(kind, field):
            return False
        self.unlock(kind, [field])
        return True

    @contextmanager
    def locked(self, kind: LockKind, fields: Iterable[str]):
        """Lock fields for the duration of a block, then restore their previous state."""
        fields = list(fields)
        previous = {field: self.state(kind, field) for field in fields}
        self.lock(kind, fields)
        try:
            yield
        finally:
            for field, state in previous.items():
                self._states[kind][field] = state
            logger.debug(f"Lock {kind.value}: restored {list(previous)}")
