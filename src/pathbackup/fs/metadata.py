"""Metadata preservation for copied nodes."""

import os

from pathbackup.core.constants import PERMISSION_BITS
from pathbackup.core.errors import MetadataApplyError
from pathbackup.core.types import StrPath


def permission_bits(source_stat: os.stat_result) -> int:
    """Return the rwx bits of a stat result, without setuid, setgid or sticky."""
    return source_stat.st_mode & PERMISSION_BITS


def preserve_metadata(
    source_stat: os.stat_result,
    target: StrPath,
    *,
    source: StrPath | None = None,
) -> None:
    """Apply a source node's modification time and permission bits to a target.

    Must only be called once the target's content is complete. The
    modification time is applied first, then the permission bits; access
    time is set equal to the modification time. Only the 0o777 bits are
    copied, so a backup never gains setuid, setgid or sticky.

    Args:
        source_stat: Stat result captured from the source node
        target: Path whose metadata should be updated
        source: Source path, used only for error context

    Raises:
        MetadataApplyError: If either update fails
    """
    mtime_ns = source_stat.st_mtime_ns
    try:
        os.utime(target, ns=(mtime_ns, mtime_ns))
        os.chmod(target, permission_bits(source_stat))
    except OSError as e:
        raise MetadataApplyError(
            source if source is not None else target,
            target,
            "Failed to apply metadata",
        ) from e
