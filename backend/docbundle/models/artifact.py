"""
DocBundle — Generated artifact contract.

Every generation returns a GeneratedArtifact with the binary payload,
a suggested download filename, and traceability metadata.
"""

from __future__ import annotations

import enum
import hashlib
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from docbundle.models.files import OutputMode


class ArtifactKind(str, enum.Enum):
    DOCUMENT = "document"
    ARCHIVE = "archive"

    @property
    def extension(self) -> str:
        return "pdf" if self is ArtifactKind.DOCUMENT else "zip"

    @property
    def media_type(self) -> str:
        return "application/pdf" if self is ArtifactKind.DOCUMENT else "application/zip"

    @classmethod
    def for_mode(cls, mode: OutputMode) -> "ArtifactKind":
        return cls.DOCUMENT if mode is OutputMode.DOCUMENT else cls.ARCHIVE


class GeneratedArtifact(BaseModel):
    """Complete output contract for every generation request."""

    model_config = ConfigDict(frozen=True)

    kind: ArtifactKind
    data: bytes = Field(repr=False)
    suggested_filename: str
    item_count: int = 0  # pages for a document, entries for an archive
    content_hash: str = ""  # SHA-256 of data

    @property
    def media_type(self) -> str:
        return self.kind.media_type

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @classmethod
    def build(cls, kind: ArtifactKind, data: bytes, customer_id: str,
              item_count: int, now: datetime | None = None) -> "GeneratedArtifact":
        return cls(
            kind=kind,
            data=data,
            suggested_filename=artifact_filename(customer_id, kind, now),
            item_count=item_count,
            content_hash=hashlib.sha256(data).hexdigest(),
        )


def filename_timestamp(now: datetime | None = None) -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision, made filename-safe.

    2026-10-19T11:32:05.123Z becomes 2026-10-19T11-32-05-123Z.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def artifact_filename(customer_id: str, kind: ArtifactKind, now: datetime | None = None) -> str:
    # Path separators would turn the download name into a directory path
    safe_id = customer_id.strip().replace("/", "-").replace("\\", "-")
    return f"{safe_id}_{filename_timestamp(now)}.{kind.extension}"
