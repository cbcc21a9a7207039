"""File and directory-tree copying with metadata preservation.

This module provides the copy primitives behind the local backuper:
- copy_file: durable single-file copy (content synced before metadata)
- copy_tree: recursive directory copy that fans sibling files out to a
  bounded thread pool while recursing into subdirectories synchronously

A failed copy leaves the destination partially written. Callers must treat
any error as "destination unusable" and discard it.
"""

import os
import shutil
import stat
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from pathbackup.core.constants import COPY_CHUNK_SIZE
from pathbackup.core.errors import (
    ConcurrentCopyError,
    CopyCancelled,
    DirectoryCreateError,
    DirectoryReadError,
    FileOpenError,
    FileStatError,
    FileWriteError,
    PathBackupError,
)
from pathbackup.core.types import StrPath
from pathbackup.fs.metadata import permission_bits, preserve_metadata
from pathbackup.fs.paths import remove_path
from pathbackup.utils.debug import debug


def copy_file(src: StrPath, dst: StrPath) -> None:
    """Copy one regular file's content, permission bits and modification time.

    An existing destination, including a dangling symlink, is removed first
    rather than overwritten or written through. Content is flushed and
    fsynced before metadata is applied.

    Args:
        src: Regular file to copy; symlinks to regular files are followed
        dst: Destination path

    Raises:
        FileStatError: If the source cannot be stat'ed
        FileOpenError: If the source is not a regular file, either file cannot
            be opened or the old destination cannot be removed
        FileWriteError: If streaming or syncing the content fails
        MetadataApplyError: If metadata cannot be applied
    """
    src = Path(src)
    dst = Path(dst)

    if os.path.lexists(dst):
        try:
            remove_path(dst)
        except OSError as e:
            raise FileOpenError(
                src, dst, "Failed to remove existing destination"
            ) from e

    try:
        src_stat = os.stat(src)
    except OSError as e:
        raise FileStatError(src, dst, "Failed to stat source file") from e

    # FIFOs and device nodes would block or stream forever
    if not stat.S_ISREG(src_stat.st_mode):
        raise FileOpenError(src, dst, "Not a regular file")

    try:
        fsrc = open(src, "rb")
    except OSError as e:
        raise FileOpenError(src, dst, "Failed to open source file") from e

    with fsrc:
        try:
            fd = os.open(
                dst,
                os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                permission_bits(src_stat),
            )
        except OSError as e:
            raise FileOpenError(src, dst, "Failed to create destination file") from e

        with open(fd, "wb") as fdst:
            try:
                shutil.copyfileobj(fsrc, fdst, COPY_CHUNK_SIZE)
                fdst.flush()
                os.fsync(fdst.fileno())
            except OSError as e:
                raise FileWriteError(src, dst, "Failed to write file content") from e

    preserve_metadata(src_stat, dst, source=src)
    debug(f"Copied file: {src} -> {dst}")


def copy_tree(
    src: StrPath,
    dst: StrPath,
    *,
    concurrency: int = 0,
    cancel: threading.Event | None = None,
) -> None:
    """Recursively copy a directory, copying sibling files concurrently.

    Subdirectories are copied depth-first on the calling thread. Plain files
    at each level are submitted to a thread pool of at most ``concurrency``
    workers (0 means one worker per file). Once a task in a level fails,
    tasks that have not started yet skip their copy. The directory's own
    metadata is applied only after every child succeeded.

    Args:
        src: Directory to copy
        dst: Destination directory; replaced if it already exists
        concurrency: Maximum concurrent file copies per directory level
        cancel: Optional external cancellation signal, checked before each
            child is scheduled and before each file task starts

    Raises:
        FileStatError: If the source directory cannot be stat'ed
        DirectoryCreateError: If the destination cannot be cleared or created
        DirectoryReadError: If the source directory cannot be listed
        ConcurrentCopyError: If any file task failed (first failure chained)
        CopyCancelled: If ``cancel`` was set before the copy finished
        CopyError: Any failure raised from a subdirectory, unchanged
    """
    src = Path(src)
    dst = Path(dst)
    if concurrency < 0:
        raise ValueError(f"concurrency must be >= 0, got {concurrency}")

    try:
        src_stat = os.stat(src)
    except OSError as e:
        raise FileStatError(src, dst, "Failed to stat source directory") from e

    if os.path.lexists(dst):
        try:
            remove_path(dst)
        except OSError as e:
            raise DirectoryCreateError(
                src, dst, "Failed to remove existing destination"
            ) from e

    try:
        # Owner keeps rwx until the children are written; exact bits come last
        os.mkdir(dst, permission_bits(src_stat) | stat.S_IRWXU)
    except OSError as e:
        raise DirectoryCreateError(
            src, dst, "Failed to create destination directory"
        ) from e

    try:
        with os.scandir(src) as it:
            children = sorted(
                (entry.name, entry.is_dir(follow_symlinks=False)) for entry in it
            )
    except OSError as e:
        raise DirectoryReadError(src, dst, "Failed to read source directory") from e

    file_count = sum(1 for _, is_dir in children if not is_dir)
    workers = concurrency if concurrency > 0 else max(file_count, 1)
    group_cancel = threading.Event()
    futures: list[Future[None]] = []
    abort_error: PathBackupError | None = None

    def copy_task(child_src: Path, child_dst: Path) -> None:
        if group_cancel.is_set() or (cancel is not None and cancel.is_set()):
            raise CopyCancelled(child_src, child_dst)
        try:
            copy_file(child_src, child_dst)
        except Exception:
            group_cancel.set()
            raise

    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="pathbackup-copy"
    ) as pool:
        for name, is_dir in children:
            child_src = src / name
            child_dst = dst / name

            if cancel is not None and cancel.is_set():
                group_cancel.set()
                abort_error = CopyCancelled(child_src, child_dst)
                break
            if group_cancel.is_set():
                break

            if is_dir:
                try:
                    copy_tree(
                        child_src, child_dst, concurrency=concurrency, cancel=cancel
                    )
                except PathBackupError as e:
                    group_cancel.set()
                    abort_error = e
                    break
            else:
                futures.append(pool.submit(copy_task, child_src, child_dst))

    if abort_error is not None:
        raise abort_error

    failure = _first_failure(futures)
    if failure is not None:
        raise ConcurrentCopyError(src, dst, "Concurrent copy failed") from failure

    preserve_metadata(src_stat, dst, source=src)
    debug(f"Copied directory: {src} -> {dst} ({file_count} files)")


def _first_failure(futures: list[Future[None]]) -> BaseException | None:
    """Return the first real task failure, falling back to a cancellation."""
    cancelled: BaseException | None = None
    for future in futures:
        exc = future.exception()
        if exc is None:
            continue
        if isinstance(exc, CopyCancelled):
            if cancelled is None:
                cancelled = exc
            continue
        return exc
    return cancelled
