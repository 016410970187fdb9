from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure raised by the document store."""


class AlreadyOpenError(StoreError):
    def __init__(self, filename: str):
        super().__init__(f"DB is already open: {filename}")
        self.filename = filename


class NotLoadedError(StoreError):
    def __init__(self, filename: str):
        super().__init__(f"DB has not been loaded: {filename}")
        self.filename = filename


class CorruptedStoreError(StoreError):
    def __init__(self, filename: str, reason: str = ""):
        msg = f"Your db appears to have corrupted: {filename}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.filename = filename


class WriteFailureError(StoreError):
    def __init__(self, filename: str):
        super().__init__(f"Could not open {filename} for writing")
        self.filename = filename


class InvalidPathError(StoreError):
    def __init__(self, path: object, reason: str):
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path


class NotTraversableError(StoreError):
    def __init__(self, segment: str, path: str):
        super().__init__(f"{segment} of {path} is not an object, cannot go further")
        self.segment = segment
        self.path = path


class NotArraySemanticsError(StoreError):
    def __init__(self, path: str):
        super().__init__(f"{path} is not an array")
        self.path = path


NotArrayError = NotArraySemanticsError


class InvalidValueError(StoreError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot store value at {path}: {reason}")
        self.path = path
