"""Transactional backup of files and directory trees.

This module moves or copies a path aside before it is mutated and registers
undo and cleanup actions with a rollback registry.
"""

from pathbackup.backup.engine import (
    Backuper,
    BackupOptions,
    BackupOutcome,
    backup,
    default_suffix,
)
from pathbackup.backup.local import LocalBackuper, local_backup

__all__ = [
    "BackupOptions",
    "BackupOutcome",
    "Backuper",
    "LocalBackuper",
    "backup",
    "default_suffix",
    "local_backup",
]
