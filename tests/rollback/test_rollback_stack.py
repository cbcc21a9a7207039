"""Tests for the in-process rollback registry."""

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from pathbackup.core.errors import RollbackError
from pathbackup.rollback import Rollbacker, RollbackStack


def _recorder(log: list[str], name: str) -> Callable[[], None]:
    return lambda: log.append(name)


class TestRollbackStack:
    """Test undo and deferred sequencing."""

    def test_implements_rollbacker(self) -> None:
        """RollbackStack satisfies the registration protocol."""
        assert isinstance(RollbackStack(), Rollbacker)

    def test_rollback_runs_undo_lifo_then_deferred(self) -> None:
        """push_front actions run newest first, deferred actions run last."""
        log: list[str] = []
        rb = RollbackStack()
        rb.push_front(_recorder(log, "undo-1"))
        rb.push_defer(_recorder(log, "defer-1"))
        rb.push_front(_recorder(log, "undo-2"))
        rb.push_defer(_recorder(log, "defer-2"))
        rb.push_back(_recorder(log, "undo-last"))

        rb.rollback()

        assert log == ["undo-2", "undo-1", "undo-last", "defer-1", "defer-2"]

    def test_commit_runs_only_deferred(self) -> None:
        """Commit discards undo actions."""
        log: list[str] = []
        rb = RollbackStack()
        rb.push_front(_recorder(log, "undo"))
        rb.push_defer(_recorder(log, "defer"))

        rb.commit()

        assert log == ["defer"]
        assert rb.pending == (0, 0)

    def test_actions_run_once(self) -> None:
        """A second rollback or commit does nothing."""
        log: list[str] = []
        rb = RollbackStack()
        rb.push_front(_recorder(log, "undo"))
        rb.push_defer(_recorder(log, "defer"))

        rb.rollback()
        rb.rollback()
        rb.commit()

        assert log == ["undo", "defer"]

    def test_failures_collected_and_all_actions_attempted(self) -> None:
        """Every action runs even when earlier ones fail."""
        log: list[str] = []
        rb = RollbackStack()

        def broken() -> None:
            raise OSError("undo failed")

        rb.push_front(_recorder(log, "undo-ok"))
        rb.push_front(broken)
        rb.push_defer(_recorder(log, "defer-ok"))

        with pytest.raises(RollbackError) as exc_info:
            rb.rollback()

        assert log == ["undo-ok", "defer-ok"]
        assert len(exc_info.value.errors) == 1
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_failures_are_logged(self) -> None:
        """Failed actions emit a structured error event."""
        mock_logger = Mock()
        rb = RollbackStack(logger=mock_logger)

        def broken() -> None:
            raise OSError("busy")

        rb.push_defer(broken)

        with pytest.raises(RollbackError):
            rb.commit()

        mock_logger.error.assert_called_once_with(
            "rollback.failed", phase="rollback.defer", index=0, error="busy"
        )


class TestRollbackStackContext:
    """Test context manager behaviour."""

    def test_clean_exit_commits(self) -> None:
        """Leaving the block normally runs deferred actions only."""
        log: list[str] = []

        with RollbackStack() as rb:
            rb.push_front(_recorder(log, "undo"))
            rb.push_defer(_recorder(log, "defer"))

        assert log == ["defer"]

    def test_exception_rolls_back_and_propagates(self) -> None:
        """An escaping exception triggers rollback and is not suppressed."""
        log: list[str] = []

        with pytest.raises(ValueError, match="boom"):
            with RollbackStack() as rb:
                rb.push_front(_recorder(log, "undo"))
                rb.push_defer(_recorder(log, "defer"))
                raise ValueError("boom")

        assert log == ["undo", "defer"]
