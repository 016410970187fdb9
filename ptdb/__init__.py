from __future__ import annotations

from .document import Document, DocumentInfo
from .engine import DocumentDB
from .errors import (
    AlreadyOpenError,
    CorruptedStoreError,
    InvalidPathError,
    InvalidValueError,
    NotArrayError,
    NotArraySemanticsError,
    NotLoadedError,
    NotTraversableError,
    StoreError,
    WriteFailureError,
)
from .locks import GLOBAL_OPEN_REGISTRY, OpenInstanceRegistry
from .notifications import Event
from .paths import RootPath, SegmentPath, resolve
from .settings import Settings, get_settings

__all__ = [
    "DocumentDB",
    "Document",
    "DocumentInfo",
    "Event",
    "OpenInstanceRegistry",
    "GLOBAL_OPEN_REGISTRY",
    "RootPath",
    "SegmentPath",
    "resolve",
    "Settings",
    "get_settings",
    "StoreError",
    "AlreadyOpenError",
    "NotLoadedError",
    "CorruptedStoreError",
    "WriteFailureError",
    "InvalidPathError",
    "NotTraversableError",
    "NotArraySemanticsError",
    "NotArrayError",
    "InvalidValueError",
]
