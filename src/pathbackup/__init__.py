"""pathbackup: reversible backup of filesystem paths.

Back up a file or directory before mutating it, then either commit (drop the
backup) or roll back (restore the original) through a rollback registry.

Example:
    from pathbackup import BackupOptions, RollbackStack, local_backup

    with RollbackStack() as rb:
        local_backup(rb, "config.yaml", BackupOptions(suffix=".bak"))
        rewrite_config("config.yaml")
"""

from pathbackup.backup import (
    Backuper,
    BackupOptions,
    BackupOutcome,
    LocalBackuper,
    backup,
    local_backup,
)
from pathbackup.core.errors import PathBackupError
from pathbackup.rollback import Rollbacker, RollbackStack

__version__ = "0.1.0"

__all__ = [
    "BackupOptions",
    "BackupOutcome",
    "Backuper",
    "LocalBackuper",
    "PathBackupError",
    "RollbackStack",
    "Rollbacker",
    "backup",
    "local_backup",
]
