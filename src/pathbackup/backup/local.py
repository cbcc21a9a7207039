"""Local-disk implementation of the Backuper protocol."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Any

from pathbackup.backup.engine import BackupOptions, BackupOutcome, backup
from pathbackup.core.errors import FileStatError, PathBackupError
from pathbackup.core.settings import resolve_copy_concurrency
from pathbackup.core.types import StrPath
from pathbackup.fs.copier import copy_file, copy_tree
from pathbackup.fs.paths import path_exists, remove_path
from pathbackup.rollback import Rollbacker
from pathbackup.utils.debug import debug

__all__ = ["LocalBackuper", "local_backup"]


class LocalBackuper:
    """Backuper backed by the local filesystem.

    Attributes:
        concurrency: Maximum concurrent file copies per directory level;
            0 means one worker per sibling file
    """

    def __init__(self, concurrency: int | None = None) -> None:
        self.concurrency = resolve_copy_concurrency(concurrency)

    def path_exists(self, path: StrPath) -> bool:
        return path_exists(path)

    def rename(self, src: StrPath, dst: StrPath) -> None:
        os.rename(src, dst)

    def remove_all(self, path: StrPath) -> None:
        remove_path(path)

    def copy(self, src: StrPath, dst: StrPath) -> None:
        """Copy a file or directory tree, removing the destination on failure.

        Raises:
            CopyError: The copy failed; the partial destination has been removed
                where possible
        """
        try:
            src_stat = os.stat(src)
        except OSError as e:
            raise FileStatError(src, dst, "Failed to stat source") from e

        try:
            if stat.S_ISDIR(src_stat.st_mode):
                copy_tree(src, dst, concurrency=self.concurrency)
            else:
                copy_file(src, dst)
        except (OSError, PathBackupError):
            self._discard(Path(dst))
            raise

    def _discard(self, dst: Path) -> None:
        try:
            remove_path(dst)
        except OSError as e:
            # Best effort; the copy error is what the caller needs to see
            debug(f"Failed to remove partial copy {dst}: {e}")

    def __repr__(self) -> str:
        return f"LocalBackuper(concurrency={self.concurrency})"


def local_backup(
    registry: Rollbacker | None,
    path: StrPath,
    options: BackupOptions | None = None,
    *,
    concurrency: int | None = None,
    logger: Any = None,
) -> BackupOutcome:
    """Back up a local path; see :func:`pathbackup.backup.engine.backup`.

    Args:
        registry: Rollback registry to register compensations with
        path: Local file or directory to back up
        options: Backup options; defaults are used when omitted
        concurrency: Per-directory copy concurrency; resolved from the
            environment when omitted
        logger: Optional structlog logger instance

    Returns:
        BackupOutcome describing the backup
    """
    return backup(
        registry,
        LocalBackuper(concurrency=concurrency),
        path,
        options,
        logger=logger,
    )
