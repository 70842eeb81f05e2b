"""
DocBundle — Structured error catalog.

Every error has a code, human message, and suggested fix.
Library exceptions (Pillow, pymupdf, zipfile) are wrapped before they
reach the presentation layer.
"""

from __future__ import annotations

from typing import Any


class DocBundleError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ConfigError(DocBundleError):
    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid configuration: {'; '.join(problems)}",
            suggestion="Check the DOCBUNDLE_* environment variables or your .env file.",
            detail=problems,
        )


class RejectedFileTypeError(DocBundleError):
    def __init__(self, filename: str, mime_type: str):
        self.filename = filename
        self.mime_type = mime_type
        super().__init__(
            code="REJECTED_FILE_TYPE",
            message=f"File type not allowed: {mime_type or 'unknown'} ({filename})",
            suggestion="Allowed types: JPEG, PNG, GIF, WebP, SVG, BMP.",
        )


class MissingCustomerIdError(DocBundleError):
    def __init__(self):
        super().__init__(
            code="MISSING_CUSTOMER_ID",
            message="Please enter a Customer Identification No.",
            suggestion="Fill in the customer identifier before generating.",
        )


class NoFilesError(DocBundleError):
    def __init__(self):
        super().__init__(
            code="NO_FILES",
            message="Please upload at least one image.",
            suggestion="Drop or select one or more images first.",
        )


class ImageDecodeError(DocBundleError):
    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        super().__init__(
            code="IMAGE_DECODE_FAILED",
            message=f"Could not decode image: {filename}",
            suggestion="The file may be corrupt or use an unsupported encoding. Remove it and try again.",
            detail=reason or None,
        )


class ArchiveCompressionError(DocBundleError):
    def __init__(self, reason: str):
        super().__init__(
            code="ARCHIVE_COMPRESSION_FAILED",
            message=f"Could not build the ZIP archive: {reason}",
            suggestion="Retry the generation. If it keeps failing, reset and upload the images again.",
        )


class GenerationInProgressError(DocBundleError):
    def __init__(self):
        super().__init__(
            code="GENERATION_IN_PROGRESS",
            message="A download is already being generated.",
            suggestion="Wait for the current generation to finish.",
        )


class GenerationFailedError(DocBundleError):
    def __init__(self, reason: str):
        super().__init__(
            code="GENERATION_FAILED",
            message=f"Could not generate the download: {reason}",
            suggestion="Retry the generation. If it keeps failing, reset and upload the images again.",
        )
