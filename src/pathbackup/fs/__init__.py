"""Filesystem primitives for backup operations.

This module provides existence checks, backup path generation, recursive
removal, metadata preservation, and durable file and directory-tree copies.
"""

from pathbackup.fs.copier import copy_file, copy_tree
from pathbackup.fs.metadata import preserve_metadata
from pathbackup.fs.paths import generate_backup_path, path_exists, remove_path

__all__ = [
    "copy_file",
    "copy_tree",
    "generate_backup_path",
    "path_exists",
    "preserve_metadata",
    "remove_path",
]
