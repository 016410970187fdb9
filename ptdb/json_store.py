from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any


def dumps_json(payload: Any, *, indent: int | None = 2, sort_keys: bool = True) -> str:
    """
    Serialize to the on-disk text form.

    Output is deterministic for equal content so its digest can gate writes.
    """
    return json.dumps(payload, indent=indent, sort_keys=sort_keys, allow_nan=False) + "\n"


def content_hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def read_text(path: Path) -> str | None:
    """
    Read a file from disk.

    Returns None for missing or blank files. Other I/O errors propagate.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return raw


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
    tmp_path.replace(path)
