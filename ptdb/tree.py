"""
Path-addressed operations over the nested record mapping.

Everything here is synchronous and touches only memory; persistence is the
engine's job. Values are JSON-normalized on the way in, so the tree holds
only dicts, lists and scalars that serialize back to themselves.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from .errors import InvalidValueError, NotArraySemanticsError, NotTraversableError
from .json_store import dumps_json
from .paths import ResolvedPath, RootPath, SegmentPath

_MISSING = object()


def normalize(value: Any, path: ResolvedPath) -> Any:
    """Return a detached, JSON-normalized copy of value."""
    try:
        return json.loads(dumps_json(value, indent=None))
    except (TypeError, ValueError) as e:
        raise InvalidValueError(str(path), str(e)) from e


def _descend(records: dict[str, Any], path: SegmentPath, *, create: bool) -> dict[str, Any] | None:
    """
    Walk to the mapping that holds path's last segment.

    Returns None when an intermediate mapping is absent and create is False.
    """
    if create:
        return _ensure_parent(records, path)
    item = records
    for seg in path.parents:
        if seg not in item:
            return None
        if not isinstance(item[seg], dict):
            raise NotTraversableError(seg, str(path))
        item = item[seg]
    return item


def _ensure_parent(records: dict[str, Any], path: SegmentPath) -> dict[str, Any]:
    item = records
    for seg in path.parents:
        if seg not in item:
            item[seg] = {}
        elif not isinstance(item[seg], dict):
            raise NotTraversableError(seg, str(path))
        item = item[seg]
    return item


def walk(records: dict[str, Any], path: ResolvedPath, default: Any = _MISSING, *, create: bool = False) -> Any:
    """
    Return the live value at path.

    A missing leaf is set to default when one is given; otherwise None is returned
    and nothing is created.
    """
    if isinstance(path, RootPath):
        return records
    parent = _descend(records, path, create=create)
    if parent is None:
        return None
    if path.leaf not in parent:
        if default is _MISSING:
            return None
        parent[path.leaf] = default
    return parent[path.leaf]


def read(records: dict[str, Any], path: ResolvedPath) -> Any:
    return copy.deepcopy(walk(records, path))


def read_lenient(records: dict[str, Any], path: ResolvedPath) -> Any:
    """Like read, but a path that crosses a non-mapping reads as absent."""
    try:
        return read(records, path)
    except NotTraversableError:
        return None


def write(records: dict[str, Any], path: SegmentPath, value: Any) -> Any:
    """Set path to value, creating intermediate mappings. Always overwrites the leaf."""
    stored = normalize(value, path)
    parent = _ensure_parent(records, path)
    parent[path.leaf] = stored
    return copy.deepcopy(stored)


def _sequence_at(records: dict[str, Any], path: ResolvedPath, *, create: bool) -> list[Any]:
    item = walk(records, path, [] if create else _MISSING, create=create)
    if not isinstance(item, list):
        raise NotArraySemanticsError(str(path))
    return item


def push(records: dict[str, Any], path: ResolvedPath, value: Any) -> list[Any]:
    stored = normalize(value, path)
    seq = _sequence_at(records, path, create=True)
    seq.append(stored)
    return copy.deepcopy(seq)


def unshift(records: dict[str, Any], path: ResolvedPath, value: Any) -> list[Any]:
    stored = normalize(value, path)
    seq = _sequence_at(records, path, create=True)
    seq.insert(0, stored)
    return copy.deepcopy(seq)


def pop(records: dict[str, Any], path: ResolvedPath) -> Any:
    seq = _sequence_at(records, path, create=False)
    return seq.pop() if seq else None


def shift(records: dict[str, Any], path: ResolvedPath) -> Any:
    seq = _sequence_at(records, path, create=False)
    return seq.pop(0) if seq else None


def unset(records: dict[str, Any], path: SegmentPath) -> bool:
    """Remove the leaf at path. Returns whether anything was removed."""
    parent = _descend(records, path, create=False)
    if parent is None or path.leaf not in parent:
        return False
    del parent[path.leaf]
    return True
