"""
rasterpdf — PDF verification module.

Inspects PDFs produced by the assembler. The byte-level checks read
only what the writer emits (classic xref table, single trailer); the
render-level checks open the file with pymupdf (fitz).

Checks:
  1. Header starts with %PDF-
  2. File ends with %%EOF
  3. startxref points at the xref table
  4. Every xref offset lands on its "N 0 obj" line
  5. PDF opens with pymupdf and has exactly one page
  6. Page size matches expectation
  7. Exactly one image is placed on the page
  8. Soft mask presence matches expectation
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Any

import fitz

from rasterpdf.errors import VerificationFailedError
from rasterpdf.models.report import VerificationResult
from rasterpdf.utils.logging import logger, step_timer

_STARTXREF_RE = re.compile(rb"startxref\s+(\d+)\s+%%EOF\s*$")
_SUBSECTION_RE = re.compile(rb"(\d+) (\d+)\r?\n")

# Page sizes are written with four decimals.
_SIZE_TOLERANCE = 0.01


@dataclass
class VerifyExpectations:
    page_size: tuple[float, float] | None = None
    expect_soft_mask: bool | None = None


def find_startxref(pdf_bytes: bytes) -> int | None:
    match = _STARTXREF_RE.search(pdf_bytes[-64:])
    return int(match.group(1)) if match else None


def parse_xref_table(pdf_bytes: bytes, xref_offset: int) -> dict[int, int]:
    """Return {object number: offset} for in-use entries of a classic xref table."""
    if not pdf_bytes.startswith(b"xref", xref_offset):
        raise ValueError(f"no xref keyword at offset {xref_offset}")
    pos = xref_offset + len(b"xref")
    while pdf_bytes[pos:pos + 1] in (b"\r", b"\n", b" "):
        pos += 1

    entries: dict[int, int] = {}
    while True:
        match = _SUBSECTION_RE.match(pdf_bytes, pos)
        if not match:
            break
        first, count = int(match.group(1)), int(match.group(2))
        pos = match.end()
        for i in range(count):
            entry = pdf_bytes[pos:pos + 20]
            if len(entry) != 20:
                raise ValueError("xref table truncated")
            offset, kind = int(entry[0:10]), entry[17:18]
            if kind == b"n":
                entries[first + i] = offset
            pos += 20
    return entries


def xref_mismatches(pdf_bytes: bytes) -> list[str]:
    """Describe every xref entry that does not point at its object header."""
    xref_offset = find_startxref(pdf_bytes)
    if xref_offset is None:
        return ["startxref not found"]
    try:
        entries = parse_xref_table(pdf_bytes, xref_offset)
    except ValueError as exc:
        return [str(exc)]
    problems = []
    for num, offset in sorted(entries.items()):
        if not pdf_bytes.startswith(f"{num} 0 obj".encode("ascii"), offset):
            problems.append(f"object {num}: xref offset {offset} does not start the object")
    if not entries:
        problems.append("xref table has no in-use entries")
    return problems


class PDFVerifier:
    """Local structural check of single-page image PDFs."""

    def verify(self, pdf_bytes: bytes, expectations: VerifyExpectations | None = None) -> VerificationResult:
        expectations = expectations or VerifyExpectations()

        with step_timer("Verify PDF"):
            checks: dict[str, bool] = {}

            # 1-2. Framing
            checks["header"] = pdf_bytes.startswith(b"%PDF-")
            checks["eof_marker"] = pdf_bytes.rstrip().endswith(b"%%EOF")

            # 3-4. Cross-reference table
            xref_offset = find_startxref(pdf_bytes)
            checks["startxref_valid"] = (
                xref_offset is not None and pdf_bytes.startswith(b"xref", xref_offset)
            )
            xref_problems = xref_mismatches(pdf_bytes)
            checks["xref_offsets_match"] = not xref_problems
            for problem in xref_problems:
                logger.warning("  xref: %s", problem)

            # 5-8. Render-level
            page_count = 0
            page_w = page_h = 0.0
            image_count = 0
            has_smask = False
            metadata: dict[str, Any] = {}
            try:
                doc = fitz.open(stream=pdf_bytes, filetype="pdf")
            except (RuntimeError, ValueError) as exc:
                logger.warning("  pymupdf could not open PDF: %s", exc)
                doc = None

            if doc is not None:
                page_count = len(doc)
                if page_count:
                    page = doc[0]
                    page_w, page_h = page.rect.width, page.rect.height
                    images = page.get_images(full=True)
                    image_count = len(images)
                    # (xref, smask, width, height, bpc, colorspace, ...)
                    has_smask = any(img[1] > 0 for img in images)
                metadata = {k: v for k, v in (doc.metadata or {}).items() if v}
                doc.close()

            checks["opens_single_page"] = page_count == 1

            if expectations.page_size is not None:
                exp_w, exp_h = expectations.page_size
                checks["page_size_matches"] = (
                    abs(page_w - exp_w) <= _SIZE_TOLERANCE and abs(page_h - exp_h) <= _SIZE_TOLERANCE
                )
            else:
                checks["page_size_matches"] = page_count == 1

            checks["single_image"] = image_count == 1

            if expectations.expect_soft_mask is not None:
                checks["soft_mask_matches"] = has_smask == expectations.expect_soft_mask
            else:
                checks["soft_mask_matches"] = True

            passed_count = sum(checks.values())
            total_count = len(checks)

            result = VerificationResult(
                page_count=page_count,
                page_width_pt=round(page_w, 4),
                page_height_pt=round(page_h, 4),
                image_count=image_count,
                has_soft_mask=has_smask,
                file_size=len(pdf_bytes),
                content_hash=hashlib.sha256(pdf_bytes).hexdigest(),
                checks=checks,
                metadata=metadata,
                checks_passed=passed_count,
                checks_total=total_count,
                passed=passed_count == total_count,
            )

            logger.info(
                "  Verification: %d/%d checks passed %s",
                passed_count, total_count,
                "✓" if result.passed else "✗",
            )
            return result

    def require(self, pdf_bytes: bytes, expectations: VerifyExpectations | None = None) -> VerificationResult:
        """Like verify(), but raise VerificationFailedError unless every check passes."""
        result = self.verify(pdf_bytes, expectations)
        if not result.passed:
            raise VerificationFailedError(result.checks_passed, result.checks_total, result.failures)
        return result
