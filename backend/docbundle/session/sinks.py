"""
DocBundle — Artifact sinks.

A sink takes a finished artifact, hands back an opaque handle the
presentation layer can link to, and frees the backing resource on
release. At most one handle per session is live at any time.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Protocol

from docbundle.core.config import settings
from docbundle.models.artifact import GeneratedArtifact
from docbundle.utils.logging import logger


class ArtifactSink(Protocol):
    def publish(self, artifact: GeneratedArtifact) -> str: ...

    def release(self, handle: str) -> None: ...

    def open(self, handle: str) -> bytes: ...


class InMemoryArtifactSink:
    """Keeps blobs in memory under ``blob:<uuid>`` handles."""

    def __init__(self):
        self._blobs: dict[str, bytes] = {}

    @property
    def live_handles(self) -> list[str]:
        return list(self._blobs)

    def publish(self, artifact: GeneratedArtifact) -> str:
        handle = f"blob:{uuid.uuid4()}"
        self._blobs[handle] = artifact.data
        return handle

    def release(self, handle: str) -> None:
        if self._blobs.pop(handle, None) is not None:
            logger.info("  Released %s", handle)

    def open(self, handle: str) -> bytes:
        try:
            return self._blobs[handle]
        except KeyError:
            raise KeyError(f"Artifact handle is not live: {handle}") from None


class DirectoryArtifactSink:
    """Writes each artifact to ``<directory>/<suggested filename>``."""

    def __init__(self, directory: Path | str | None = None):
        self.directory = Path(directory if directory is not None else settings.output_dir)

    @property
    def live_handles(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(str(p.resolve()) for p in self.directory.iterdir() if p.is_file())

    def publish(self, artifact: GeneratedArtifact) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = (self.directory / artifact.suggested_filename).resolve()
        path.write_bytes(artifact.data)
        logger.info("  Wrote %s (%d bytes)", path, artifact.size_bytes)
        return str(path)

    def release(self, handle: str) -> None:
        path = Path(handle)
        if path.exists():
            path.unlink()
            logger.info("  Released %s", handle)

    def open(self, handle: str) -> bytes:
        return Path(handle).read_bytes()
