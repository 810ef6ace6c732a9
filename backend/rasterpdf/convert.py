"""
rasterpdf — Library entry points.

  convert_bytes(image_bytes)            → PDF bytes
  convert_with_report(image_bytes)      → (PDF bytes, ConversionReport)
  convert_file(input_path, output_path) → writes the PDF, returns its path

Decode failures raise DecodeError, file failures raise IoError.
Nothing is written to disk unless the whole PDF was assembled.
"""

from __future__ import annotations

import hashlib
import math
import os
import time
from pathlib import Path

from rasterpdf.core.config import settings
from rasterpdf.errors import IoError
from rasterpdf.models.image import DecodedImage
from rasterpdf.models.report import ConversionReport, StepTiming
from rasterpdf.pdf.assemble import PageGeometry, assemble_pdf, plan_objects
from rasterpdf.pdf.decode import decode_image
from rasterpdf.utils.logging import logger, step_timer


def resolve_dpi(image: DecodedImage, dpi: float | None = None) -> tuple[float, float]:
    """
    Pick the page resolution: explicit argument, then the image's own
    resolution (when RASTERPDF_USE_IMAGE_DPI is set), then RASTERPDF_DPI.
    """
    if dpi is not None:
        if not math.isfinite(dpi) or dpi <= 0:
            raise ValueError(f"dpi must be finite and positive, got {dpi}")
        return float(dpi), float(dpi)
    if settings.conversion.use_image_dpi and image.dpi is not None:
        return image.dpi
    return settings.conversion.dpi, settings.conversion.dpi


def _timed(timings: list[StepTiming], name: str, start: float) -> None:
    ms = int((time.perf_counter() - start) * 1000)
    timings.append(StepTiming(step=name, duration_ms=ms))


def convert_with_report(image_bytes: bytes, dpi: float | None = None) -> tuple[bytes, ConversionReport]:
    """Convert one image to a single-page PDF and describe what was written."""
    timings: list[StepTiming] = []

    start = time.perf_counter()
    image = decode_image(
        image_bytes,
        jpeg_passthrough=settings.conversion.jpeg_passthrough,
        compression_level=settings.conversion.compression_level,
    )
    _timed(timings, "decode", start)

    page_dpi = resolve_dpi(image, dpi)
    geometry = PageGeometry.for_image(image.width, image.height, page_dpi)

    start = time.perf_counter()
    with step_timer("Assemble PDF"):
        pdf_bytes = assemble_pdf(image, page_dpi)
    _timed(timings, "assemble", start)

    report = ConversionReport(
        source_format=image.source_format,
        width_px=image.width,
        height_px=image.height,
        page_width_pt=geometry.width_pt,
        page_height_pt=geometry.height_pt,
        color_space=image.color_space.value,
        filter=image.filter.value,
        bits_per_component=image.bits_per_component,
        has_soft_mask=image.has_alpha,
        object_count=len(plan_objects(image)),
        input_size=len(image_bytes),
        output_size=len(pdf_bytes),
        input_hash=hashlib.sha256(image_bytes).hexdigest(),
        content_hash=hashlib.sha256(pdf_bytes).hexdigest(),
        timings=timings,
    )
    return pdf_bytes, report


def convert_bytes(image_bytes: bytes, dpi: float | None = None) -> bytes:
    """Image bytes in, PDF bytes out."""
    pdf_bytes, _ = convert_with_report(image_bytes, dpi)
    return pdf_bytes


def read_input(input_path: str | os.PathLike) -> bytes:
    path = Path(input_path)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise IoError(str(path), exc.strerror or str(exc)) from exc


def write_output(output_path: str | os.PathLike, pdf_bytes: bytes) -> Path:
    path = Path(output_path)
    try:
        path.write_bytes(pdf_bytes)
    except OSError as exc:
        raise IoError(str(path), exc.strerror or str(exc)) from exc
    return path


def convert_file(
    input_path: str | os.PathLike,
    output_path: str | os.PathLike,
    dpi: float | None = None,
) -> Path:
    """Read an image file, convert it, and write the PDF to `output_path`."""
    image_bytes = read_input(input_path)
    pdf_bytes = convert_bytes(image_bytes, dpi)
    with step_timer("Write PDF"):
        path = write_output(output_path, pdf_bytes)
    logger.info("  Wrote %s (%d bytes)", path, len(pdf_bytes))
    return path
