"""
DocBundle — ZIP archive packager.

Bundles the original image bytes, unmodified, under their session-unique
names. Entries follow list order so the same session yields the same
entry layout.
"""

from __future__ import annotations

import asyncio
import io
import zipfile
from collections.abc import Sequence
from datetime import datetime

from docbundle.errors import ArchiveCompressionError, NoFilesError
from docbundle.models.artifact import ArtifactKind, GeneratedArtifact
from docbundle.models.files import AcceptedFile
from docbundle.utils.logging import logger, step_timer


def build_zip(entries: Sequence[tuple[str, bytes]]) -> bytes:
    mem = io.BytesIO()
    with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
            logger.info("  Added %s (%d bytes)", name, len(data))
    return mem.getvalue()


async def package_archive(
    files: Sequence[AcceptedFile],
    customer_id: str,
    *,
    now: datetime | None = None,
) -> GeneratedArtifact:
    """Produce the archive artifact for *files*."""
    if not files:
        raise NoFilesError()

    with step_timer("Package ZIP"):
        entries = [(f.name, f.data) for f in files]
        try:
            zip_bytes = await asyncio.to_thread(build_zip, entries)
        except (zipfile.LargeZipFile, OSError, ValueError) as exc:
            raise ArchiveCompressionError(str(exc) or type(exc).__name__) from exc

        logger.info("  Created ZIP with %d entries (%d bytes)", len(entries), len(zip_bytes))
        return GeneratedArtifact.build(
            ArtifactKind.ARCHIVE, zip_bytes, customer_id, item_count=len(entries), now=now,
        )
