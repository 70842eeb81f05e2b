"""DocBundle data models — typed contracts for the entire pipeline."""

from docbundle.models.files import (
    OutputMode,
    CandidateFile,
    AcceptedFile,
)
from docbundle.models.artifact import (
    ArtifactKind,
    GeneratedArtifact,
    artifact_filename,
    filename_timestamp,
)
from docbundle.models.session import (
    SessionState,
    MessageKind,
    TransientMessage,
    UploadSummary,
    ArtifactView,
    SessionSnapshot,
)

__all__ = [
    "OutputMode",
    "CandidateFile",
    "AcceptedFile",
    "ArtifactKind",
    "GeneratedArtifact",
    "artifact_filename",
    "filename_timestamp",
    "SessionState",
    "MessageKind",
    "TransientMessage",
    "UploadSummary",
    "ArtifactView",
    "SessionSnapshot",
]
