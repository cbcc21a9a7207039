"""Shared type aliases."""

from os import PathLike

#: Anything accepted where a filesystem path is expected
StrPath = str | PathLike[str]
