"""
rasterpdf — Decoded image contract.

The decoder produces exactly one DecodedImage per input; the assembler
consumes it without touching Pillow again.
"""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ColorSpace(str, enum.Enum):
    RGB = "DeviceRGB"
    GRAY = "DeviceGray"
    CMYK = "DeviceCMYK"


class StreamFilter(str, enum.Enum):
    DCT = "DCTDecode"  # JPEG passthrough
    FLATE = "FlateDecode"  # zlib-compressed raw samples


class DecodedImage(BaseModel):
    """Pixel data ready to be embedded as an Image XObject."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    bits_per_component: Literal[1, 8, 16] = 8
    color_space: ColorSpace
    filter: StreamFilter
    data: bytes
    alpha: bytes | None = None  # Flate-compressed 8-bit gray samples
    decode: tuple[float, ...] | None = None
    dpi: tuple[float, float] | None = None
    source_format: str = ""

    @property
    def has_alpha(self) -> bool:
        return self.alpha is not None
