"""Path utilities for backup operations.

This module answers existence queries, derives backup locations next to a
source, and removes file or directory nodes recursively.
"""

import os
import shutil
from pathlib import Path

from pathbackup.core.types import StrPath
from pathbackup.utils.debug import debug


def path_exists(path: StrPath | None) -> bool:
    """Check whether a file or directory exists at a path.

    Only a missing node counts as absent. Other stat failures (permission
    denied, symlink loops) report True so an inaccessible path is never
    mistaken for free space and clobbered.

    Args:
        path: Path to check; empty or None is never looked up

    Returns:
        False if nothing exists at the path, True otherwise
    """
    if path is None or os.fspath(path) == "":
        return False

    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        debug(f"Treating {path} as existing after stat error: {e}")
        return True
    return True


def generate_backup_path(src_path: StrPath, suffix: str) -> Path:
    """Generate the backup location for a source path.

    The backup always sits in the source's parent directory and is named
    after the source's base name with the suffix appended.

    Args:
        src_path: Path being backed up
        suffix: Text appended to the base name

    Returns:
        Path for the backup node

    Examples:
        >>> generate_backup_path("/data/file.txt", ".bak")
        PosixPath('/data/file.txt.bak')
        >>> generate_backup_path("/tmp/config", "_backup")
        PosixPath('/tmp/config_backup')
    """
    src = Path(src_path)
    return src.parent / f"{src.name}{suffix}"


def remove_path(path: StrPath) -> None:
    """Remove a file, symlink or directory tree.

    A missing path is not an error. Symlinks are unlinked, never followed.

    Args:
        path: Node to remove

    Raises:
        OSError: If the node exists but cannot be removed
    """
    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        try:
            target.unlink()
        except FileNotFoundError:
            return
    debug(f"Removed: {target}")
