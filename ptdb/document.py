from __future__ import annotations

import json
import time
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from .json_store import content_hash, dumps_json


def now_ms() -> int:
    return int(time.time() * 1000)


class DocumentInfo(BaseModel):
    created: int = Field(default_factory=now_ms)
    modified: int = Field(default_factory=now_ms)


class Document(BaseModel):
    """
    Mirrors the on-disk <path>.ptsb schema:
      {
        "records": { ...nested values... },
        "info": { "created": <ms>, "modified": <ms> }
      }
    """

    records: dict[str, Any] = Field(default_factory=dict)
    info: DocumentInfo = Field(default_factory=DocumentInfo)

    @classmethod
    def from_disk_doc(cls, doc: Any) -> "Document":
        """
        Raises ValueError when the content cannot be a document.
        """
        if not isinstance(doc, Mapping):
            raise ValueError(f"expected a JSON object, got {type(doc).__name__}")
        # Minimal layout: the file holds the bare record mapping.
        if "records" not in doc:
            return cls(records=dict(doc))
        try:
            return cls.model_validate(doc)
        except ValidationError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def parse(cls, text: str) -> "Document":
        return cls.from_disk_doc(json.loads(text))

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def serialize(self) -> str:
        return dumps_json(self.to_disk_doc())

    def touch(self) -> None:
        self.info.modified = now_ms()


def hash_value(value: Any) -> str:
    """Digest of a single value, used for watch comparisons."""
    return content_hash(dumps_json(value))
