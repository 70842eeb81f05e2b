"""
DocBundle — Ingestion step.

Filters a dropped batch against the image type allowlist, gives every
accepted file a session-unique name, and summarises the outcome for
user feedback. An empty or fully rejected batch is a normal outcome.

Allowlist (exact declared MIME match):
  image/jpeg, image/jpg, image/png, image/gif,
  image/webp, image/svg+xml, image/bmp
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from docbundle.errors import RejectedFileTypeError
from docbundle.models.files import AcceptedFile, CandidateFile
from docbundle.models.session import UploadSummary
from docbundle.pipeline.naming import normalize_name
from docbundle.utils.logging import logger, step_timer

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "image/bmp",
})


def check_type(candidate: CandidateFile) -> None:
    """Raise RejectedFileTypeError unless the declared MIME type is allow-listed."""
    if candidate.mime_type not in ALLOWED_MIME_TYPES:
        raise RejectedFileTypeError(candidate.name, candidate.mime_type)


def ingest_batch(
    existing_names: Iterable[str],
    batch: Sequence[CandidateFile],
    externally_rejected: Sequence[CandidateFile] = (),
) -> tuple[list[AcceptedFile], UploadSummary]:
    """
    Partition *batch* by type and rename the survivors.

    Names assigned earlier in the same batch count as taken, so internal
    duplicates are resolved too. Returns the new AcceptedFiles in batch
    order (to be appended by the caller) and the upload summary.
    """
    with step_timer("Ingest batch"):
        taken = set(existing_names)
        accepted: list[AcceptedFile] = []
        rejected_names = [c.name for c in externally_rejected]

        for candidate in batch:
            try:
                check_type(candidate)
            except RejectedFileTypeError as exc:
                logger.info("  Rejected %s (%s)", candidate.name, exc.mime_type or "no type")
                rejected_names.append(candidate.name)
                continue

            final_name = normalize_name(candidate.name, taken)
            taken.add(final_name)
            accepted.append(AcceptedFile(
                name=final_name,
                original_name=candidate.name,
                mime_type=candidate.mime_type,
                data=candidate.data,
            ))
            if final_name != candidate.name:
                logger.info("  Accepted %s as %s (%d bytes)", candidate.name, final_name, len(candidate.data))
            else:
                logger.info("  Accepted %s (%d bytes)", final_name, len(candidate.data))

        summary = UploadSummary(
            accepted=len(accepted),
            renamed=sum(1 for f in accepted if f.renamed),
            rejected=len(rejected_names),
            accepted_names=[f.name for f in accepted],
            rejected_names=rejected_names,
        )
        logger.info(
            "  %d accepted, %d renamed, %d rejected",
            summary.accepted, summary.renamed, summary.rejected,
        )
        return accepted, summary
