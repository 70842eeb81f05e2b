"""
DocBundle — Session view contracts.

The controller owns the mutable session; the presentation layer only
ever sees these read-only snapshots.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

from docbundle.models.artifact import ArtifactKind
from docbundle.models.files import OutputMode


class SessionState(str, enum.Enum):
    IDLE = "IDLE"
    POPULATED = "POPULATED"
    GENERATING = "GENERATING"
    READY = "READY"


class MessageKind(str, enum.Enum):
    INFO = "info"
    ERROR = "error"


class TransientMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MessageKind
    text: str
    code: str | None = None  # error code when kind is ERROR


class UploadSummary(BaseModel):
    accepted: int = 0
    renamed: int = 0
    rejected: int = 0
    accepted_names: list[str] = Field(default_factory=list)
    rejected_names: list[str] = Field(default_factory=list)

    def to_message(self) -> TransientMessage | None:
        """Human-readable upload feedback, or None when nothing happened."""
        parts: list[str] = []
        if self.accepted:
            parts.append(f"{self.accepted} image(s) uploaded successfully.")
            if self.renamed:
                parts.append(f"{self.renamed} file(s) were renamed to avoid duplicates.")
        if self.rejected:
            parts.append(
                f"{self.rejected} file(s) rejected (only JPEG, PNG, GIF, WebP, SVG, BMP allowed)."
            )
        if not parts:
            return None
        if self.rejected:
            return TransientMessage(kind=MessageKind.ERROR, text=" ".join(parts), code="REJECTED_FILE_TYPE")
        return TransientMessage(kind=MessageKind.INFO, text=" ".join(parts))


class ArtifactView(BaseModel):
    kind: ArtifactKind
    filename: str
    handle: str
    size_bytes: int


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_id: str = ""
    file_names: list[str] = Field(default_factory=list)
    output_mode: OutputMode = OutputMode.DOCUMENT
    state: SessionState = SessionState.IDLE
    upload_message: TransientMessage | None = None
    error_message: TransientMessage | None = None
    artifact: ArtifactView | None = None

    @property
    def file_count(self) -> int:
        return len(self.file_names)
