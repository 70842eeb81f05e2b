"""
DocBundle — Image to PDF assembler.

Turns the session's ordered file list into a single PDF: one page per
image, first image on the first page, pages in upload order.

Files are processed strictly one at a time (decode, then place) so the
page order always matches the upload order, whatever each decode costs.
Any failure aborts the whole document; no partial PDF is returned.
"""

from __future__ import annotations

import io
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime

import fitz
from PIL import Image

from docbundle.core.config import MM_TO_PT, PageSpec, settings
from docbundle.errors import ImageDecodeError, NoFilesError
from docbundle.models.artifact import ArtifactKind, GeneratedArtifact
from docbundle.models.files import AcceptedFile
from docbundle.pdf.geometry import (
    DecodedImage,
    Placement,
    PrintableArea,
    decode_image,
    place_image,
)
from docbundle.utils.logging import logger, step_timer

Decoder = Callable[[AcceptedFile], Awaitable[DecodedImage]]

# Tags the PDF encoder embeds directly; other rasters are transcoded to PNG
_NATIVE_TAGS = {"PNG", "JPEG"}


def _to_png(data: bytes) -> bytes:
    """Transcode the first frame of a GIF/WebP/BMP to PNG."""
    with Image.open(io.BytesIO(data)) as img:
        img.seek(0)
        frame = img if img.mode in ("RGB", "RGBA", "L", "LA") else img.convert("RGBA")
        out = io.BytesIO()
        frame.save(out, format="PNG")
        return out.getvalue()


def _to_rect(placement: Placement) -> fitz.Rect:
    return fitz.Rect(
        placement.offset_x * MM_TO_PT,
        placement.offset_y * MM_TO_PT,
        placement.x1 * MM_TO_PT,
        placement.y1 * MM_TO_PT,
    )


def _embed(page: fitz.Page, rect: fitz.Rect, file: AcceptedFile,
           decoded: DecodedImage, placement: Placement) -> None:
    if decoded.vector:
        with fitz.open(stream=file.data, filetype="svg") as svg:
            vector_pdf = svg.convert_to_pdf()
        with fitz.open("pdf", vector_pdf) as src:
            page.show_pdf_page(rect, src, 0, keep_proportion=False)
    elif placement.format_tag in _NATIVE_TAGS:
        page.insert_image(rect, stream=file.data, keep_proportion=False)
    else:
        page.insert_image(rect, stream=_to_png(file.data), keep_proportion=False)


class DocumentAssembler:
    """Sequential decode-and-place over an ordered file list."""

    def __init__(self, page: PageSpec | None = None, decoder: Decoder = decode_image):
        self.page = page or settings.page
        self.area = PrintableArea.from_page(self.page)
        self.decoder = decoder

    async def assemble(self, files: Sequence[AcceptedFile]) -> bytes:
        """Build the PDF and return its bytes."""
        if not files:
            raise NoFilesError()

        doc = fitz.open()
        try:
            for index, file in enumerate(files):
                decoded = await self.decoder(file)
                placement = place_image(decoded, file.mime_type, self.area)

                page = doc.new_page(width=self.page.width_pt, height=self.page.height_pt)
                try:
                    _embed(page, _to_rect(placement), file, decoded, placement)
                except (RuntimeError, ValueError, OSError) as exc:
                    raise ImageDecodeError(file.name, str(exc)) from exc

                logger.info(
                    "  Page %d: %s placed at %.1fx%.1f mm (%s)",
                    index + 1, file.name, placement.width, placement.height, placement.format_tag,
                )

            pdf_bytes = doc.tobytes(deflate=True)
        finally:
            doc.close()

        logger.info("  Created %d-page PDF (%d bytes)", len(files), len(pdf_bytes))
        return pdf_bytes


async def assemble_document(
    files: Sequence[AcceptedFile],
    customer_id: str,
    *,
    page: PageSpec | None = None,
    decoder: Decoder = decode_image,
    now: datetime | None = None,
) -> GeneratedArtifact:
    """Produce the document artifact for *files*."""
    with step_timer("Assemble PDF"):
        assembler = DocumentAssembler(page=page, decoder=decoder)
        pdf_bytes = await assembler.assemble(files)
        return GeneratedArtifact.build(
            ArtifactKind.DOCUMENT, pdf_bytes, customer_id, item_count=len(files), now=now,
        )
