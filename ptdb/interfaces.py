from __future__ import annotations

from pathlib import Path
from typing import Protocol


class DocumentFileStore(Protocol):
    """
    Minimal file-facing interface: one serialized document persisted under a path.
    """

    @property
    def path(self) -> Path:
        ...

    def read_text(self) -> str | None:
        """Return the stored text, or None if there is nothing stored yet."""
        ...

    def write_text(self, text: str) -> None:
        """Replace the stored text in full."""
        ...
