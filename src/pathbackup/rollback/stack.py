"""Rollback registry for compensating actions.

Operations register undo actions while they mutate the filesystem and
deferred actions that release resources afterwards. The caller later
decides the outcome: ``rollback()`` undoes and then releases, ``commit()``
only releases.
"""

from collections import deque
from collections.abc import Callable
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

import structlog

from pathbackup.core.errors import RollbackError

Action = Callable[[], None]


@runtime_checkable
class Rollbacker(Protocol):
    """Registration surface consumed by operations that need compensation."""

    def push_front(self, action: Action) -> None:
        """Register an undo action that runs before all earlier ones."""
        ...

    def push_defer(self, action: Action) -> None:
        """Register an action that runs whether or not rollback occurs."""
        ...


class RollbackStack:
    """In-process rollback registry with an undo sequence and a deferred sequence.

    Undo actions run in sequence order; ``push_front`` makes the most recent
    registration run first. Deferred actions always run after the undo
    sequence, in registration order. Every action runs at most once.

    Can be used as a context manager: a clean exit commits, an escaping
    exception triggers rollback and is re-raised.
    """

    def __init__(self, logger: Any = None) -> None:
        """Initialize an empty rollback stack.

        Args:
            logger: Optional structlog logger instance
        """
        self._undo: deque[Action] = deque()
        self._deferred: list[Action] = []
        self._logger = logger or structlog.get_logger()

    def push_front(self, action: Action) -> None:
        self._undo.appendleft(action)

    def push_back(self, action: Action) -> None:
        self._undo.append(action)

    def push_defer(self, action: Action) -> None:
        self._deferred.append(action)

    @property
    def pending(self) -> tuple[int, int]:
        """Number of (undo, deferred) actions not yet executed."""
        return len(self._undo), len(self._deferred)

    def rollback(self) -> None:
        """Run every undo action, then every deferred action.

        Raises:
            RollbackError: If any action raised; all actions are still attempted
        """
        undo = list(self._undo)
        self._undo.clear()
        errors = self._run(undo, "rollback.undo")
        errors.extend(self._run_deferred())
        self._raise_if_failed(errors)

    def commit(self) -> None:
        """Discard undo actions and run every deferred action.

        Raises:
            RollbackError: If any deferred action raised
        """
        self._undo.clear()
        self._raise_if_failed(self._run_deferred())

    def _run_deferred(self) -> list[Exception]:
        deferred = self._deferred
        self._deferred = []
        return self._run(deferred, "rollback.defer")

    def _run(self, actions: list[Action], event: str) -> list[Exception]:
        errors: list[Exception] = []
        for index, action in enumerate(actions):
            try:
                action()
            except Exception as e:
                self._logger.error(
                    "rollback.failed", phase=event, index=index, error=str(e)
                )
                errors.append(e)
            else:
                self._logger.debug(event, index=index)
        return errors

    def _raise_if_failed(self, errors: list[Exception]) -> None:
        if errors:
            raise RollbackError(errors) from errors[0]

    def __enter__(self) -> "RollbackStack":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Commit on success, roll back when an exception escapes."""
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
