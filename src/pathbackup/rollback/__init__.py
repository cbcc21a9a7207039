"""Rollback registry interface and in-process implementation."""

from pathbackup.rollback.stack import Action, Rollbacker, RollbackStack

__all__ = ["Action", "RollbackStack", "Rollbacker"]
