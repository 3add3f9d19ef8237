"""Mutation guard and unit of work.

Every state-mutating ledger operation runs as::

    with guard.hold(operation):
        with UnitOfWork(state, registry, rail):
            ...

``MutationGuard`` is a single latch per ledger, not per listing.  Any
mutating call that arrives while another is in flight (typically from a
receive hook invoked by the registry or payment rail) is rejected with
``ReentrantCall``.

``UnitOfWork`` supplies the all-or-nothing behavior: it snapshots the ledger
state and every revertible collaborator on entry, and restores them all if
the block raises.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType
from typing import Any

from marketledger.bridge.registry import Revertible
from marketledger.core.errors import ReentrantCall

logger = logging.getLogger(__name__)


class MutationGuard:
    """Non-reentrant, non-blocking mutation-in-progress latch."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: str | None = None

    @property
    def active_operation(self) -> str | None:
        """Name of the operation currently holding the guard, if any."""
        return self._active

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """Hold the latch for the duration of *operation*.

        Raises
        ------
        ReentrantCall
            If another mutating operation already holds the latch.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning(
                "Rejected reentrant '%s' while '%s' is in progress.",
                operation,
                self._active,
            )
            raise ReentrantCall(
                f"Cannot start '{operation}': '{self._active}' is already in progress."
            )
        self._active = operation
        try:
            yield
        finally:
            self._active = None
            self._lock.release()


class UnitOfWork:
    """Snapshot-and-restore scope over ledger state and collaborators.

    Participants that do not satisfy ``Revertible`` are skipped; they are
    expected to provide their own transactional guarantees.
    """

    def __init__(self, *participants: Any) -> None:
        self._participants = [p for p in participants if isinstance(p, Revertible)]
        self._tokens: list[tuple[Revertible, Any]] = []

    def __enter__(self) -> UnitOfWork:
        self._tokens = [(p, p.snapshot()) for p in self._participants]
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is not None:
            for participant, token in reversed(self._tokens):
                participant.restore(token)
            logger.debug(
                "Rolled back %d participant(s) after %s.",
                len(self._tokens),
                exc_type.__name__,
            )
        self._tokens = []
        return False
