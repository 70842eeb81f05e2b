"""Shared test configuration and fixtures for DocBundle test suite."""

import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add backend to Python path so imports work without an install
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from docbundle.models.files import AcceptedFile, CandidateFile  # noqa: E402

MIME_BY_FORMAT = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
}

SVG_100x50 = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="100" height="50">'
    b'<rect width="100" height="50" fill="red"/></svg>'
)


def _image_bytes(width: int = 100, height: int = 100, fmt: str = "PNG",
                 color: tuple[int, int, int] = (255, 0, 0)) -> bytes:
    img = Image.new("RGB", (width, height), color)
    out = io.BytesIO()
    img.save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def image_bytes():
    """Factory: encoded image bytes of the given size and format."""
    return _image_bytes


@pytest.fixture
def accepted_file():
    """Factory: AcceptedFile holding a real encoded image."""
    def _make(name: str, width: int = 100, height: int = 100, fmt: str = "PNG") -> AcceptedFile:
        return AcceptedFile(
            name=name,
            original_name=name,
            mime_type=MIME_BY_FORMAT[fmt],
            data=_image_bytes(width, height, fmt),
        )
    return _make


@pytest.fixture
def candidate():
    """Factory: CandidateFile with a real PNG unless told otherwise."""
    def _make(name: str, mime_type: str = "image/png", data: bytes | None = None) -> CandidateFile:
        return CandidateFile(
            name=name,
            mime_type=mime_type,
            data=data if data is not None else _image_bytes(20, 10),
        )
    return _make


@pytest.fixture
def svg_bytes():
    return SVG_100x50
