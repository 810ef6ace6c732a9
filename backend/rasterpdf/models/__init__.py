"""rasterpdf data models — typed contracts between decoder, assembler and callers."""

from rasterpdf.models.image import (
    ColorSpace,
    StreamFilter,
    DecodedImage,
)
from rasterpdf.models.report import (
    StepTiming,
    ConversionReport,
    VerificationResult,
)

__all__ = [
    "ColorSpace",
    "StreamFilter",
    "DecodedImage",
    "StepTiming",
    "ConversionReport",
    "VerificationResult",
]
