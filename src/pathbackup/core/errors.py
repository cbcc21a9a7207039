"""Custom exceptions for pathbackup.

This module defines typed exceptions raised by the backup engine, the
filesystem copiers and the rollback stack. Every failure carries the paths
involved so it can be diagnosed without a traceback.
"""

from typing import Any

from pathbackup.core.types import StrPath


class PathBackupError(Exception):
    """Base exception for all pathbackup errors.

    All custom exceptions should inherit from this base class to allow
    for broad exception handling when needed.
    """

    pass


class SourceNotFoundError(PathBackupError):
    """Raised when the backup source is missing and skipping is disabled.

    Attributes:
        path: The source path that does not exist
    """

    def __init__(self, path: StrPath) -> None:
        self.path = str(path)
        super().__init__(f"Source path does not exist: {self.path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {"error": "source_not_found", "path": self.path}

    def __repr__(self) -> str:
        return f"SourceNotFoundError(path={self.path!r})"


class StaleBackupCleanupError(PathBackupError):
    """Raised when a previous backup at the target path cannot be removed.

    Attributes:
        path: The stale backup path
    """

    def __init__(self, path: StrPath) -> None:
        self.path = str(path)
        super().__init__(f"Failed to remove stale backup: {self.path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {"error": "stale_backup_cleanup_failed", "path": self.path}

    def __repr__(self) -> str:
        return f"StaleBackupCleanupError(path={self.path!r})"


class _TwoPathError(PathBackupError):
    """Shared shape for errors that involve a source and a destination."""

    code = "error"
    message = "Operation failed"

    def __init__(self, src: StrPath, dst: StrPath) -> None:
        self.src = str(src)
        self.dst = str(dst)
        super().__init__(f"{self.message}: {self.src} -> {self.dst}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {"error": self.code, "src": self.src, "dst": self.dst}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(src={self.src!r}, dst={self.dst!r})"


class BackupWriteError(_TwoPathError):
    """Raised when the source could not be renamed or copied to the backup."""

    code = "backup_write_failed"
    message = "Failed to back up"


class RestoreError(_TwoPathError):
    """Raised by the undo action when the backup cannot be moved back.

    ``src`` is the backup path and ``dst`` the original location.
    """

    code = "restore_failed"
    message = "Failed to restore backup"


class BackupCleanupError(PathBackupError):
    """Raised by the deferred cleanup when the backup cannot be deleted."""

    def __init__(self, path: StrPath) -> None:
        self.path = str(path)
        super().__init__(f"Failed to remove backup: {self.path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {"error": "backup_cleanup_failed", "path": self.path}

    def __repr__(self) -> str:
        return f"BackupCleanupError(path={self.path!r})"


class CopyError(PathBackupError):
    """Base exception for failures on the copy path.

    Attributes:
        src: Source node being copied
        dst: Destination node being written
        reason: Short description of the step that failed
    """

    code = "copy_failed"

    def __init__(self, src: StrPath, dst: StrPath, reason: str) -> None:
        self.src = str(src)
        self.dst = str(dst)
        self.reason = reason
        super().__init__(f"{reason}: {self.src} -> {self.dst}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        result: dict[str, Any] = {
            "error": self.code,
            "src": self.src,
            "dst": self.dst,
            "reason": self.reason,
        }
        if self.__cause__ is not None:
            result["cause"] = str(self.__cause__)
        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(src={self.src!r}, "
            f"dst={self.dst!r}, reason={self.reason!r})"
        )


class DirectoryCreateError(CopyError):
    code = "directory_create_failed"


class DirectoryReadError(CopyError):
    code = "directory_read_failed"


class FileStatError(CopyError):
    code = "file_stat_failed"


class FileOpenError(CopyError):
    code = "file_open_failed"


class FileWriteError(CopyError):
    code = "file_write_failed"


class MetadataApplyError(CopyError):
    code = "metadata_apply_failed"


class ConcurrentCopyError(CopyError):
    """Raised when at least one task in a directory's fan-out group failed.

    The first failure observed is chained as ``__cause__``. Which sibling's
    error is chosen depends on scheduling and must not be relied upon.
    """

    code = "concurrent_copy_failed"


class CopyCancelled(CopyError):
    """Raised by a copy task that was skipped because cancellation was signalled."""

    code = "copy_cancelled"

    def __init__(self, src: StrPath, dst: StrPath) -> None:
        super().__init__(src, dst, "Copy cancelled")


class RollbackError(PathBackupError):
    """Raised when one or more registered rollback actions failed.

    Attributes:
        errors: Every exception raised by an action, in execution order
    """

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = list(errors)
        message = f"{len(self.errors)} rollback action(s) failed"
        if self.errors:
            message += f": {self.errors[0]}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {
            "error": "rollback_failed",
            "errors": [str(err) for err in self.errors],
        }

    def __repr__(self) -> str:
        return f"RollbackError(errors={len(self.errors)})"
