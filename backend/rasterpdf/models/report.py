"""
rasterpdf — Conversion report and verification contracts.

Every conversion can return a ConversionReport with full traceability:
timings, hashes, and the layout that was written.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | failed


class ConversionReport(BaseModel):
    """Output contract for a single image → PDF conversion."""

    source_format: str = ""
    width_px: int
    height_px: int
    page_width_pt: float
    page_height_pt: float
    color_space: str
    filter: str
    bits_per_component: int = 8
    has_soft_mask: bool = False
    object_count: int = 0
    input_size: int = 0
    output_size: int = 0
    input_hash: str = ""  # SHA-256 of the image bytes
    content_hash: str = ""  # SHA-256 of the PDF bytes
    timings: list[StepTiming] = Field(default_factory=list)


class VerificationResult(BaseModel):
    page_count: int = 0
    page_width_pt: float = 0.0
    page_height_pt: float = 0.0
    image_count: int = 0
    has_soft_mask: bool = False
    file_size: int = 0
    content_hash: str = ""
    checks: dict[str, bool] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    checks_passed: int = 0
    checks_total: int = 0
    passed: bool = False

    @property
    def failures(self) -> list[str]:
        return [name for name, ok in self.checks.items() if not ok]

    model_config = {
        "json_schema_extra": {
            "example": {
                "page_count": 1,
                "page_width_pt": 640.0,
                "page_height_pt": 480.0,
                "image_count": 1,
                "has_soft_mask": False,
                "checks_passed": 8,
                "checks_total": 8,
                "passed": True,
            }
        }
    }
