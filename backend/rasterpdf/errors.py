"""
rasterpdf — Structured error catalog.

Every error has a code, human message, and suggested fix.
The CLI prints the message; the HTTP layer returns to_dict().
"""

from __future__ import annotations

from typing import Any


class RasterPDFError(Exception):
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


class DecodeError(RasterPDFError):
    def __init__(self, message: str, detail: Any = None):
        super().__init__(
            code="IMAGE_DECODE_FAILED",
            message=f"Could not decode image: {message}",
            suggestion="Check that the input is a complete, uncorrupted JPEG or PNG file.",
            detail=detail,
        )


class UnsupportedImageError(DecodeError):
    def __init__(self, image_format: str):
        super().__init__(f"unsupported image format: {image_format}")
        self.code = "IMAGE_UNSUPPORTED"
        self.suggestion = "Convert the image to JPEG or PNG first."


class IoError(RasterPDFError):
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="FILE_IO_FAILED",
            message=f"I/O failure on {path}: {reason}",
            suggestion="Check that the path exists and is readable/writable.",
        )
        self.path = path


class InputTooLargeError(RasterPDFError):
    def __init__(self, size_mb: float, limit_mb: float):
        super().__init__(
            code="INPUT_TOO_LARGE",
            message=f"Input exceeds {limit_mb:g}MB limit ({size_mb:.1f}MB)",
            suggestion="Compress or resize the image before uploading.",
        )


class ConfigError(RasterPDFError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid configuration: {'; '.join(errors)}",
            suggestion="Fix the RASTERPDF_* environment variables or your .env file.",
            detail=errors,
        )


class VerificationFailedError(RasterPDFError):
    def __init__(self, checks_passed: int, checks_total: int, failures: list[str]):
        super().__init__(
            code="VERIFICATION_FAILED",
            message=f"PDF verification: {checks_passed}/{checks_total} checks passed",
            suggestion="The writer produced a non-conforming file; report the input image.",
            detail=failures,
        )
