"""
rasterpdf — Image decoding via Pillow.

Turns image bytes into a DecodedImage:
  - JPEG (Gray/RGB/CMYK) is passed through untouched as DCTDecode
  - everything else is flattened to raw samples and zlib-compressed
  - an alpha channel or PNG transparency key, when present, is split
    off into its own 8-bit gray plane for the soft mask

Pillow is the only place pixels are touched.
"""

from __future__ import annotations

import io
import math
import zlib

from PIL import Image, UnidentifiedImageError

from rasterpdf.errors import DecodeError, UnsupportedImageError
from rasterpdf.models.image import ColorSpace, DecodedImage, StreamFilter
from rasterpdf.utils.logging import logger, step_timer

# Pillow reports multi-picture camera JPEGs as MPO; the first frame is plain JPEG.
JPEG_FORMATS = frozenset({"JPEG", "MPO"})
SUPPORTED_FORMATS = JPEG_FORMATS | {"PNG"}

_SIXTEEN_BIT_MODES = ("I;16", "I;16L", "I;16B")
_KEYED_MODES = ("1", "I") + _SIXTEEN_BIT_MODES

_PASSTHROUGH_MODES = {
    "L": ColorSpace.GRAY,
    "RGB": ColorSpace.RGB,
    "CMYK": ColorSpace.CMYK,
}

# Adobe CMYK JPEGs store inverted ink values.
_INVERTED_CMYK_DECODE = (1, 0, 1, 0, 1, 0, 1, 0)


def _open(image_bytes: bytes) -> Image.Image:
    if not image_bytes:
        raise DecodeError("input is empty")
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()  # truncated files fail here, not halfway through assembly
    except Image.DecompressionBombError as exc:
        raise DecodeError("image exceeds Pillow's pixel limit", detail=str(exc)) from exc
    except UnidentifiedImageError as exc:
        raise DecodeError("not a recognised image format") from exc
    except (OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(str(exc) or type(exc).__name__) from exc
    return img


def _read_dpi(img: Image.Image) -> tuple[float, float] | None:
    dpi = img.info.get("dpi")
    if not dpi:
        return None
    try:
        x_dpi, y_dpi = float(dpi[0]), float(dpi[1])
    except (TypeError, ValueError, IndexError):
        return None
    if not (math.isfinite(x_dpi) and math.isfinite(y_dpi)) or x_dpi <= 0 or y_dpi <= 0:
        return None
    return x_dpi, y_dpi


def _primary_frame(img: Image.Image, image_bytes: bytes) -> bytes:
    """
    JPEG stream to embed. An MPO file is several JPEGs back to back and
    only the first one belongs on the page; its length is the first
    entry of the MP index. Plain JPEGs come back whole.
    """
    data = bytes(image_bytes)
    if img.format != "MPO":
        return data
    try:
        size = int(img.mpinfo[0xB002][0]["Size"])
    except (AttributeError, KeyError, IndexError, TypeError, ValueError):
        logger.warning("  MPO index unreadable, embedding every frame")
        return data
    if 0 < size <= len(data) and data[size - 2:size] == b"\xff\xd9":
        return data[:size]
    logger.warning("  MPO index gives a bad first-frame size (%d), embedding every frame", size)
    return data


def _normalise_mode(img: Image.Image) -> Image.Image:
    """Convert to one of 1, L, LA, I;16, I;16L, I;16B, RGB, RGBA, CMYK."""
    mode = img.mode
    has_transparency = "transparency" in img.info

    if mode == "P":
        return img.convert("RGBA" if has_transparency else "RGB")
    if mode in ("PA", "RGBa"):
        return img.convert("RGBA")
    if mode == "La" or (mode == "L" and has_transparency):
        return img.convert("LA")
    if mode == "RGB" and has_transparency:
        return img.convert("RGBA")
    if mode in ("1", "L", "LA", "RGB", "RGBA", "CMYK") or mode in _SIXTEEN_BIT_MODES:
        return img
    if mode.startswith("I") or mode == "F":
        return img.convert("L")
    return img.convert("RGB")


def _big_endian_16(img: Image.Image) -> bytes:
    """PDF wants 16-bit samples most significant byte first."""
    raw = img.tobytes()
    if img.mode == "I;16B":
        return raw
    swapped = bytearray(len(raw))
    swapped[0::2] = raw[1::2]
    swapped[1::2] = raw[0::2]
    return bytes(swapped)


def _keyed_alpha(img: Image.Image) -> bytes | None:
    """Alpha plane for a gray image whose PNG tRNS chunk names one transparent sample value."""
    key = img.info.get("transparency")
    if not isinstance(key, int):
        return None
    if img.mode == "1":
        # tRNS holds 0 or 1; Pillow reports bilevel pixels as 0 or 255.
        key = 255 if key else 0
    return bytes(0 if v == key else 255 for v in img.getdata())


def _flate(raw: bytes, level: int) -> bytes:
    return zlib.compress(raw, level)


def _reencode(img: Image.Image, compression_level: int) -> dict:
    """Raw samples for the image stream plus an optional alpha plane."""
    # tRNS keys refer to the original samples, so read them before any conversion.
    keyed = _keyed_alpha(img) if img.mode in _KEYED_MODES else None
    img = _normalise_mode(img)
    mode = img.mode
    alpha = None

    if mode == "1":
        # Pillow packs rows MSB-first and pads each row to a byte, as PDF does.
        fields = dict(color_space=ColorSpace.GRAY, bits_per_component=1, raw=img.tobytes())
    elif mode in _SIXTEEN_BIT_MODES:
        fields = dict(color_space=ColorSpace.GRAY, bits_per_component=16, raw=_big_endian_16(img))
    elif mode == "L":
        fields = dict(color_space=ColorSpace.GRAY, bits_per_component=8, raw=img.tobytes())
    elif mode == "LA":
        fields = dict(color_space=ColorSpace.GRAY, bits_per_component=8,
                      raw=img.getchannel("L").tobytes())
        alpha = img.getchannel("A").tobytes()
    elif mode == "RGBA":
        fields = dict(color_space=ColorSpace.RGB, bits_per_component=8,
                      raw=img.convert("RGB").tobytes())
        alpha = img.getchannel("A").tobytes()
    elif mode == "CMYK":
        fields = dict(color_space=ColorSpace.CMYK, bits_per_component=8, raw=img.tobytes())
    else:
        fields = dict(color_space=ColorSpace.RGB, bits_per_component=8, raw=img.tobytes())

    if alpha is None:
        alpha = keyed

    raw = fields.pop("raw")
    fields["data"] = _flate(raw, compression_level)
    fields["alpha"] = _flate(alpha, compression_level) if alpha is not None else None
    return fields


def decode_image(
    image_bytes: bytes,
    *,
    jpeg_passthrough: bool = True,
    compression_level: int = 9,
    allowed_formats: frozenset[str] | None = SUPPORTED_FORMATS,
) -> DecodedImage:
    """
    Decode `image_bytes` into a DecodedImage.

    Raises DecodeError for empty, corrupt or truncated input, and
    UnsupportedImageError for formats outside `allowed_formats`
    (pass None to accept anything Pillow can read).
    """
    with step_timer("Decode image"):
        img = _open(image_bytes)
        fmt = img.format or "UNKNOWN"
        if allowed_formats is not None and fmt not in allowed_formats:
            raise UnsupportedImageError(fmt)

        width, height = img.size
        dpi = _read_dpi(img)

        if jpeg_passthrough and fmt in JPEG_FORMATS and img.mode in _PASSTHROUGH_MODES:
            color_space = _PASSTHROUGH_MODES[img.mode]
            decode = None
            if color_space is ColorSpace.CMYK and "adobe" in img.info:
                decode = _INVERTED_CMYK_DECODE
            decoded = DecodedImage(
                width=width,
                height=height,
                color_space=color_space,
                filter=StreamFilter.DCT,
                data=_primary_frame(img, image_bytes),
                decode=decode,
                dpi=dpi,
                source_format=fmt,
            )
        else:
            decoded = DecodedImage(
                width=width,
                height=height,
                filter=StreamFilter.FLATE,
                dpi=dpi,
                source_format=fmt,
                **_reencode(img, compression_level),
            )

        logger.info(
            "  Decoded %s %dx%d (%s, %s%s)",
            fmt, width, height, img.mode, decoded.filter.value,
            ", alpha" if decoded.has_alpha else "",
        )
        return decoded
