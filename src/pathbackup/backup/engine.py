"""Backup engine with rollback registration.

This module moves or copies a path aside before a caller mutates it, and
registers compensating actions so the caller can later restore the original
(rollback) or drop the backup (commit).
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog
from pydantic import BaseModel, Field, field_validator

from pathbackup.core.constants import DEFAULT_SUFFIX_FORMAT
from pathbackup.core.errors import (
    BackupCleanupError,
    BackupWriteError,
    PathBackupError,
    RestoreError,
    SourceNotFoundError,
    StaleBackupCleanupError,
)
from pathbackup.core.types import StrPath
from pathbackup.fs.paths import generate_backup_path
from pathbackup.rollback import Rollbacker


def default_suffix() -> str:
    """Return a timestamped backup suffix for the current second."""
    return datetime.now().strftime(DEFAULT_SUFFIX_FORMAT)


class BackupOptions(BaseModel):
    """Options for a single backup call.

    Attributes:
        suffix: Text appended to the source's base name to form the backup
            path; defaults to a timestamp evaluated when the options are built
        skip_if_not_exist: Treat a missing source as a no-op instead of an error
        keep_source: Rename the source onto the backup path instead of copying
            it; the source path is vacated
    """

    suffix: str = Field(default_factory=default_suffix)
    skip_if_not_exist: bool = True
    keep_source: bool = False

    model_config = {"frozen": True}

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, value: str) -> str:
        if not value:
            raise ValueError("suffix cannot be empty")
        if "/" in value or "\\" in value:
            raise ValueError("suffix cannot contain a path separator")
        return value


@dataclass(frozen=True)
class BackupOutcome:
    """Result of a backup call.

    ``performed`` is False only when the source was missing and skipping was
    allowed; ``backup_path`` is None in that case.
    """

    backup_path: Path | None
    performed: bool


@runtime_checkable
class Backuper(Protocol):
    """Storage operations the backup engine depends on.

    Implementations raise on failure. ``remove_all`` must treat a missing
    path as success and remove a symlink itself, never its target.
    """

    def path_exists(self, path: StrPath) -> bool: ...

    def copy(self, src: StrPath, dst: StrPath) -> None: ...

    def rename(self, src: StrPath, dst: StrPath) -> None: ...

    def remove_all(self, path: StrPath) -> None: ...


def backup(
    registry: Rollbacker | None,
    backuper: Backuper,
    src_path: StrPath,
    options: BackupOptions | None = None,
    *,
    logger: Any = None,
) -> BackupOutcome:
    """Back up a path and register its compensating actions.

    Nothing is touched until the source is known to exist. Any previous
    backup at the computed path is removed before the new one is written.
    Compensations are registered only after the backup succeeded; the
    engine never runs them.

    Args:
        registry: Rollback registry to register with; None skips registration
        backuper: Storage backend performing the filesystem work
        src_path: Path to back up
        options: Backup options; defaults are used when omitted
        logger: Optional structlog logger instance

    Returns:
        BackupOutcome with the backup path and whether a backup was made

    Raises:
        SourceNotFoundError: Source missing and ``skip_if_not_exist`` is False
        StaleBackupCleanupError: A previous backup could not be removed
        BackupWriteError: The rename or copy to the backup path failed
    """
    opts = options or BackupOptions()
    log = (logger or structlog.get_logger()).bind(
        src_path=str(src_path), keep_source=opts.keep_source
    )

    if not backuper.path_exists(src_path):
        if opts.skip_if_not_exist:
            log.info("backup.skipped", reason="source_missing")
            return BackupOutcome(backup_path=None, performed=False)
        raise SourceNotFoundError(src_path)

    backup_path = generate_backup_path(src_path, opts.suffix)
    log = log.bind(backup_path=str(backup_path))

    # Runs even when path_exists is False: a dangling symlink stats as absent
    stale = backuper.path_exists(backup_path)
    try:
        backuper.remove_all(backup_path)
    except (OSError, PathBackupError) as e:
        raise StaleBackupCleanupError(backup_path) from e
    if stale:
        log.info("backup.stale_removed")

    try:
        if opts.keep_source:
            backuper.rename(src_path, backup_path)
        else:
            backuper.copy(src_path, backup_path)
    except (OSError, PathBackupError) as e:
        raise BackupWriteError(src_path, backup_path) from e

    if registry is not None:
        _register_compensations(
            registry, backuper, Path(src_path), backup_path, opts.keep_source
        )

    log.info("backup.performed")
    return BackupOutcome(backup_path=backup_path, performed=True)


def _register_compensations(
    registry: Rollbacker,
    backuper: Backuper,
    src_path: Path,
    backup_path: Path,
    keep_source: bool,
) -> None:
    if not keep_source:
        registry.push_front(_restore_action(backuper, src_path, backup_path))
    registry.push_defer(_cleanup_action(backuper, backup_path))


def _restore_action(
    backuper: Backuper, src_path: Path, backup_path: Path
) -> Callable[[], None]:
    def restore() -> None:
        try:
            backuper.remove_all(src_path)
            backuper.rename(backup_path, src_path)
        except (OSError, PathBackupError) as e:
            raise RestoreError(backup_path, src_path) from e

    return restore


def _cleanup_action(backuper: Backuper, backup_path: Path) -> Callable[[], None]:
    def cleanup() -> None:
        if not backuper.path_exists(backup_path):
            return
        try:
            backuper.remove_all(backup_path)
        except (OSError, PathBackupError) as e:
            raise BackupCleanupError(backup_path) from e

    return cleanup
