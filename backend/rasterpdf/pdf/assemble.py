"""
rasterpdf — Single-page PDF assembler.

Wraps one DecodedImage in the minimal object graph a reader needs:

  1 Catalog → 2 Pages → 3 Page ─┬→ 4 Contents  (q W 0 0 H 0 0 cm /Im0 Do Q)
                                └→ 5 Image XObject ─→ 6 SMask (alpha only)

The image stream is embedded exactly as decoded: JPEG bytes keep their
DCTDecode filter, everything else is already Flate-compressed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from rasterpdf.models.image import ColorSpace, DecodedImage
from rasterpdf.pdf.writer import Name, PdfWriter, Ref, format_number
from rasterpdf.utils.logging import logger

POINTS_PER_INCH = 72.0
IMAGE_RESOURCE = "Im0"


@dataclass(frozen=True)
class PageGeometry:
    width_pt: float
    height_pt: float

    @classmethod
    def for_image(cls, width_px: int, height_px: int, dpi: tuple[float, float]) -> "PageGeometry":
        x_dpi, y_dpi = dpi
        if not all(math.isfinite(d) and d > 0 for d in dpi):
            raise ValueError(f"dpi must be finite and positive, got {dpi}")
        width_pt = round(width_px * POINTS_PER_INCH / x_dpi, 4)
        height_pt = round(height_px * POINTS_PER_INCH / y_dpi, 4)
        if not all(math.isfinite(v) and v > 0 for v in (width_pt, height_pt)):
            raise ValueError(f"dpi {dpi} gives an unusable {width_pt}x{height_pt} pt page")
        return cls(width_pt=width_pt, height_pt=height_pt)


def plan_objects(image: DecodedImage) -> dict[str, int]:
    """Object numbers in the order they are written."""
    names = ["catalog", "pages", "page", "contents", "image"]
    if image.has_alpha:
        names.append("smask")
    return {name: num for num, name in enumerate(names, start=1)}


def content_stream(geometry: PageGeometry) -> bytes:
    """Scale the unit-square image to cover the whole page."""
    w = format_number(geometry.width_pt)
    h = format_number(geometry.height_pt)
    return f"q\n{w} 0 0 {h} 0 0 cm\n/{IMAGE_RESOURCE} Do\nQ\n".encode("ascii")


def _image_dict(image: DecodedImage, smask: int | None) -> dict:
    d = {
        "Type": Name("XObject"),
        "Subtype": Name("Image"),
        "Width": image.width,
        "Height": image.height,
        "ColorSpace": Name(image.color_space.value),
        "BitsPerComponent": image.bits_per_component,
        "Filter": Name(image.filter.value),
    }
    if image.decode:
        d["Decode"] = list(image.decode)
    if smask is not None:
        d["SMask"] = Ref(smask)
    return d


def assemble_pdf(image: DecodedImage, dpi: tuple[float, float] = (72.0, 72.0)) -> bytes:
    """
    Build a complete single-page PDF around `image`.

    The page is sized to the image at the given resolution; at 72 DPI
    one pixel maps to one point. Output is deterministic.
    """
    geometry = PageGeometry.for_image(image.width, image.height, dpi)
    nums = plan_objects(image)

    writer = PdfWriter()
    for _ in nums:
        writer.reserve()

    writer.write_object(nums["catalog"], {
        "Type": Name("Catalog"),
        "Pages": Ref(nums["pages"]),
    })
    writer.write_object(nums["pages"], {
        "Type": Name("Pages"),
        "Kids": [Ref(nums["page"])],
        "Count": 1,
    })
    writer.write_object(nums["page"], {
        "Type": Name("Page"),
        "Parent": Ref(nums["pages"]),
        "MediaBox": [0, 0, geometry.width_pt, geometry.height_pt],
        "Resources": {
            "ProcSet": [Name("PDF"), Name("ImageB" if image.color_space is ColorSpace.GRAY else "ImageC")],
            "XObject": {IMAGE_RESOURCE: Ref(nums["image"])},
        },
        "Contents": Ref(nums["contents"]),
    })
    writer.write_object(nums["contents"], {}, stream=content_stream(geometry))
    writer.write_object(
        nums["image"],
        _image_dict(image, nums.get("smask")),
        stream=image.data,
    )
    if image.alpha is not None:
        writer.write_object(nums["smask"], {
            "Type": Name("XObject"),
            "Subtype": Name("Image"),
            "Width": image.width,
            "Height": image.height,
            "ColorSpace": Name(ColorSpace.GRAY.value),
            "BitsPerComponent": 8,
            "Filter": Name("FlateDecode"),
        }, stream=image.alpha)

    pdf = writer.finish(root=nums["catalog"])
    logger.info(
        "  Assembled %d objects: %dx%d px → %sx%s pt, %s%s (%d bytes)",
        len(nums), image.width, image.height,
        format_number(geometry.width_pt), format_number(geometry.height_pt),
        image.filter.value, " + SMask" if image.has_alpha else "", len(pdf),
    )
    return pdf
