"""Unit tests for the structured error catalog."""

from docbundle.errors import (
    DocBundleError, ConfigError, RejectedFileTypeError,
    MissingCustomerIdError, NoFilesError, ImageDecodeError,
    ArchiveCompressionError, GenerationFailedError, GenerationInProgressError,
)


class TestErrorCatalog:
    def test_base_error(self):
        e = DocBundleError(code="TEST", message="test msg", suggestion="try this")
        d = e.to_dict()
        assert d["error_code"] == "TEST"
        assert d["message"] == "test msg"
        assert d["suggestion"] == "try this"
        assert "detail" not in d

    def test_config_error(self):
        e = ConfigError(["page margin leaves no printable area"])
        assert e.code == "CONFIG_INVALID"
        assert e.to_dict()["detail"] == ["page margin leaves no printable area"]

    def test_rejected_file_type(self):
        e = RejectedFileTypeError("notes.txt", "text/plain")
        assert e.code == "REJECTED_FILE_TYPE"
        assert "text/plain" in e.message
        assert "notes.txt" in e.message

    def test_guard_errors(self):
        assert MissingCustomerIdError().code == "MISSING_CUSTOMER_ID"
        assert NoFilesError().code == "NO_FILES"

    def test_image_decode_error_carries_filename(self):
        e = ImageDecodeError("cat.webp", "cannot identify image file")
        assert e.code == "IMAGE_DECODE_FAILED"
        assert e.filename == "cat.webp"
        assert e.to_dict()["detail"] == "cannot identify image file"

    def test_archive_compression_error(self):
        e = ArchiveCompressionError("disk full")
        assert e.code == "ARCHIVE_COMPRESSION_FAILED"
        assert "disk full" in e.message

    def test_generation_in_progress(self):
        assert GenerationInProgressError().code == "GENERATION_IN_PROGRESS"

    def test_generation_failed(self):
        e = GenerationFailedError("boom")
        assert e.code == "GENERATION_FAILED"
        assert "boom" in e.message

    def test_all_errors_are_exceptions(self):
        """Every error in the catalog must be a subclass of DocBundleError."""
        error_classes = [
            ConfigError, RejectedFileTypeError, MissingCustomerIdError,
            NoFilesError, ImageDecodeError, ArchiveCompressionError,
            GenerationFailedError, GenerationInProgressError,
        ]
        for cls in error_classes:
            assert issubclass(cls, DocBundleError)
            assert issubclass(cls, Exception)
