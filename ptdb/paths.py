from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from .errors import InvalidPathError

ROOT = "."
SEPARATOR = "."
FILE_EXTENSION = ".ptsb"


@dataclass(frozen=True)
class RootPath:
    """The whole record set."""

    def __str__(self) -> str:
        return ROOT


@dataclass(frozen=True)
class SegmentPath:
    segments: tuple[str, ...]

    @property
    def parents(self) -> tuple[str, ...]:
        return self.segments[:-1]

    @property
    def leaf(self) -> str:
        return self.segments[-1]

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)


ResolvedPath = Union[RootPath, SegmentPath]
PathLike = Union[str, Sequence[str], RootPath, SegmentPath]


def resolve(path: PathLike) -> ResolvedPath:
    """
    Turn a dotted string (or a pre-split sequence of keys) into a resolved path.

    "." is the root. Empty segments are rejected rather than filtered:
    "a..b", ".a" and "a." are all malformed.
    """
    if isinstance(path, (RootPath, SegmentPath)):
        return path

    if isinstance(path, str):
        if path.strip() == ROOT:
            return RootPath()
        segments = path.split(SEPARATOR)
    elif isinstance(path, Sequence):
        segments = list(path)
        if not segments:
            raise InvalidPathError(path, "no segments")
    else:
        raise InvalidPathError(path, "expected a dotted string or a sequence of keys")

    for seg in segments:
        if not isinstance(seg, str):
            raise InvalidPathError(path, f"segment {seg!r} is not a string")
        if not seg:
            raise InvalidPathError(path, "empty segment")
    return SegmentPath(tuple(segments))


def backing_file(path: Path | str) -> Path:
    """<path>.ptsb, the one file a database lives in."""
    return Path(f"{path}{FILE_EXTENSION}")
