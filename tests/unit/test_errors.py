"""Unit tests for the structured error catalog."""

import pytest
from rasterpdf.errors import (
    RasterPDFError, DecodeError, UnsupportedImageError, IoError,
    InputTooLargeError, ConfigError, VerificationFailedError,
)


class TestErrorCatalog:
    def test_base_error(self):
        e = RasterPDFError(code="TEST", message="test msg", suggestion="try this")
        d = e.to_dict()
        assert d["error_code"] == "TEST"
        assert d["message"] == "test msg"
        assert d["suggestion"] == "try this"
        assert "detail" not in d

    def test_decode_error(self):
        e = DecodeError("bad huffman table")
        assert e.code == "IMAGE_DECODE_FAILED"
        assert "bad huffman table" in str(e)

    def test_unsupported_image(self):
        e = UnsupportedImageError("GIF")
        assert e.code == "IMAGE_UNSUPPORTED"
        assert "GIF" in e.message
        assert "JPEG or PNG" in e.suggestion

    def test_io_error(self):
        e = IoError("/tmp/out.pdf", "Permission denied")
        assert e.code == "FILE_IO_FAILED"
        assert e.path == "/tmp/out.pdf"
        assert "Permission denied" in e.message

    def test_input_too_large(self):
        e = InputTooLargeError(72.4, 50)
        assert e.code == "INPUT_TOO_LARGE"
        assert "50MB" in e.message
        assert "72.4" in e.message

    def test_config_error(self):
        e = ConfigError(["RASTERPDF_DPI must be positive"])
        assert e.code == "CONFIG_INVALID"
        assert e.to_dict()["detail"] == ["RASTERPDF_DPI must be positive"]

    def test_verification_failed(self):
        e = VerificationFailedError(6, 8, ["xref_offsets_match", "single_image"])
        assert e.code == "VERIFICATION_FAILED"
        assert "6/8" in e.message

    @pytest.mark.parametrize("cls", [
        DecodeError, UnsupportedImageError, IoError,
        InputTooLargeError, ConfigError, VerificationFailedError,
    ])
    def test_all_errors_are_catalog_errors(self, cls):
        assert issubclass(cls, RasterPDFError)
        assert issubclass(cls, Exception)

    def test_io_error_does_not_shadow_builtin(self):
        assert not issubclass(IoError, OSError)
