"""
DocBundle — Image geometry resolution.

Decodes intrinsic pixel dimensions and fits each image inside the
printable area of a page:

  1. Width-constrained: width = max_width, height = max_width / aspect
  2. If that overflows, height-constrained: height = max_height,
     width = max_height * aspect

The image is anchored at the margin offset (top-left), never centered,
never cropped. Raster formats are decoded with Pillow, SVG with pymupdf.
"""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass

import fitz
from PIL import Image, UnidentifiedImageError

from docbundle.core.config import PageSpec
from docbundle.errors import ImageDecodeError
from docbundle.models.files import AcceptedFile

VECTOR_MIME_TYPES = frozenset({"image/svg+xml"})

FORMAT_TAGS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
    "image/bmp": "BMP",
}
FALLBACK_FORMAT_TAG = "JPEG"


@dataclass(frozen=True)
class PrintableArea:
    max_width: float
    max_height: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def from_page(cls, page: PageSpec) -> "PrintableArea":
        return cls(
            max_width=page.printable_width,
            max_height=page.printable_height,
            offset_x=page.margin,
            offset_y=page.margin,
        )


@dataclass(frozen=True)
class DecodedImage:
    width: float
    height: float
    vector: bool = False


@dataclass(frozen=True)
class Placement:
    width: float
    height: float
    offset_x: float
    offset_y: float
    format_tag: str

    @property
    def x1(self) -> float:
        return self.offset_x + self.width

    @property
    def y1(self) -> float:
        return self.offset_y + self.height


def resolve_format_tag(mime_type: str) -> str:
    """Map a declared MIME type to an embedding tag; unmapped types (e.g. SVG) get JPEG."""
    return FORMAT_TAGS.get(mime_type, FALLBACK_FORMAT_TAG)


def fit_within(img_width: float, img_height: float, area: PrintableArea) -> tuple[float, float]:
    """Aspect-preserving fit, width-constrained first."""
    aspect = img_width / img_height
    width = area.max_width
    height = area.max_width / aspect
    if height > area.max_height:
        height = area.max_height
        width = area.max_height * aspect
    return width, height


def decode_dimensions(data: bytes, mime_type: str) -> DecodedImage:
    """
    Decode intrinsic dimensions synchronously.

    Raises ValueError when the bytes cannot be decoded as the declared kind.
    """
    if mime_type in VECTOR_MIME_TYPES:
        try:
            with fitz.open(stream=data, filetype="svg") as doc:
                rect = doc[0].rect
        except (RuntimeError, ValueError, IndexError) as exc:
            raise ValueError(f"svg: {exc}") from exc
        width, height = rect.width, rect.height
        vector = True
    else:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError,
                OSError, SyntaxError, ValueError) as exc:
            raise ValueError(str(exc) or type(exc).__name__) from exc
        vector = False

    if width <= 0 or height <= 0:
        raise ValueError(f"degenerate dimensions {width}x{height}")
    return DecodedImage(width=width, height=height, vector=vector)


async def decode_image(file: AcceptedFile) -> DecodedImage:
    """Decode off the event loop; failures surface as ImageDecodeError naming the file."""
    try:
        return await asyncio.to_thread(decode_dimensions, file.data, file.mime_type)
    except ValueError as exc:
        raise ImageDecodeError(file.name, str(exc)) from exc


def place_image(decoded: DecodedImage, mime_type: str, area: PrintableArea) -> Placement:
    width, height = fit_within(decoded.width, decoded.height, area)
    return Placement(
        width=width,
        height=height,
        offset_x=area.offset_x,
        offset_y=area.offset_y,
        format_tag=resolve_format_tag(mime_type),
    )


async def resolve_geometry(file: AcceptedFile, area: PrintableArea) -> Placement:
    """Decode *file* and compute where it lands inside *area*."""
    decoded = await decode_image(file)
    return place_image(decoded, file.mime_type, area)
