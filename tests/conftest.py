"""Pytest configuration and fixtures for pathbackup tests."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pathbackup.core.types import StrPath

#: Fixed modification time (2020-09-13T12:26:40Z) applied to fixture nodes
FIXTURE_MTIME_NS = 1_600_000_000 * 1_000_000_000

TreeSpec = dict[str, Any]
Snapshot = dict[str, tuple[bool, int, int, bytes | None]]


def _set_times(path: Path, offset: int) -> None:
    mtime = FIXTURE_MTIME_NS + offset * 1_000_000_000
    os.utime(path, ns=(mtime, mtime))


def _build(root: Path, spec: TreeSpec, counter: list[int]) -> None:
    root.mkdir()
    for name, value in spec.items():
        node = root / name
        if isinstance(value, dict):
            _build(node, value, counter)
        else:
            data = value.encode() if isinstance(value, str) else value
            node.write_bytes(data)
            node.chmod(0o640 if counter[0] % 2 else 0o600)
            counter[0] += 1
            _set_times(node, counter[0])
    root.chmod(0o750)
    counter[0] += 1
    _set_times(root, counter[0])


@pytest.fixture
def build_tree() -> Callable[[Path, TreeSpec], Path]:
    """Factory creating a directory tree from a nested dict.

    Dict values become subdirectories; str/bytes values become files. Every
    node gets a distinct, fixed modification time and non-default mode.
    """

    def factory(root: Path, spec: TreeSpec) -> Path:
        _build(root, spec, [0])
        return root

    return factory


@pytest.fixture
def sample_spec() -> TreeSpec:
    """Small tree with nested directories, binary data and an empty directory."""
    return {
        "a.txt": "alpha",
        "b.bin": bytes(range(256)) * 64,
        "sub": {
            "c.txt": "charlie",
            "deeper": {"d.txt": "delta"},
        },
        "empty": {},
    }


def take_snapshot(root: Path) -> Snapshot:
    """Map each relative path under root to (is_dir, mode, mtime_ns, content)."""
    result: Snapshot = {}
    for path in [root, *sorted(root.rglob("*"))]:
        st = path.stat()
        is_dir = path.is_dir()
        result[str(path.relative_to(root))] = (
            is_dir,
            st.st_mode & 0o7777,
            st.st_mtime_ns,
            None if is_dir else path.read_bytes(),
        )
    return result


@pytest.fixture
def snapshot() -> Callable[[Path], Snapshot]:
    """Return the tree snapshot helper."""
    return take_snapshot


class FakeBackuper:
    """In-memory Backuper: paths map to content, directories are prefixes.

    ``failures`` maps a method name to the exception it should raise.
    """

    def __init__(self, nodes: dict[str, str] | None = None) -> None:
        self.nodes: dict[str, str] = dict(nodes or {})
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, ...]] = []

    def _check(self, method: str, *args: StrPath) -> None:
        self.calls.append((method, *(str(arg) for arg in args)))
        if method in self.failures:
            raise self.failures[method]

    def _under(self, path: str) -> list[str]:
        return [key for key in self.nodes if key == path or key.startswith(path + "/")]

    def path_exists(self, path: StrPath) -> bool:
        self.calls.append(("path_exists", str(path)))
        return bool(str(path)) and bool(self._under(str(path)))

    def copy(self, src: StrPath, dst: StrPath) -> None:
        self._check("copy", src, dst)
        for key in self._under(str(src)):
            self.nodes[str(dst) + key[len(str(src)) :]] = self.nodes[key]

    def rename(self, src: StrPath, dst: StrPath) -> None:
        self._check("rename", src, dst)
        for key in self._under(str(src)):
            self.nodes[str(dst) + key[len(str(src)) :]] = self.nodes.pop(key)

    def remove_all(self, path: StrPath) -> None:
        self._check("remove_all", path)
        for key in self._under(str(path)):
            del self.nodes[key]


@pytest.fixture
def fake_backuper() -> Callable[..., FakeBackuper]:
    """Factory for in-memory backupers seeded with nodes."""

    def factory(nodes: dict[str, str] | None = None) -> FakeBackuper:
        return FakeBackuper(nodes)

    return factory
