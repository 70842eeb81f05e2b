"""
DocBundle — Typed file models.

Raw uploads arrive as CandidateFile and leave ingestion as AcceptedFile.
No raw dicts leak across boundaries.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class OutputMode(str, enum.Enum):
    DOCUMENT = "document"
    ARCHIVE = "archive"


class CandidateFile(BaseModel):
    """A dropped or selected file before type validation and renaming."""

    name: str = Field(min_length=1)
    mime_type: str = ""
    data: bytes = Field(default=b"", repr=False)


class AcceptedFile(BaseModel):
    """
    An ingested image with a session-unique name.

    Immutable once created; only a full session reset removes it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    original_name: str
    mime_type: str
    data: bytes = Field(repr=False)

    @property
    def renamed(self) -> bool:
        return self.name != self.original_name

    @property
    def size_bytes(self) -> int:
        return len(self.data)
