"""
rasterpdf — FastAPI service

Endpoints:
  POST /v1/image-to-pdf   — JPEG/PNG → single-page PDF
  POST /v1/verify         — Structural verification of an existing PDF
  GET  /health            — Health check
"""

import base64
import re
import time
import uuid
from urllib.parse import quote

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from rasterpdf import __version__
from rasterpdf.core.config import settings
from rasterpdf.errors import DecodeError, InputTooLargeError
from rasterpdf.utils.logging import logger


app = FastAPI(
    title="rasterpdf API",
    description="Wrap a single raster image in a minimal, valid one-page PDF.",
    version=__version__,
)


async def _read_upload(file: UploadFile, request_id: str) -> bytes:
    content = await file.read()
    limit = settings.max_upload_mb * 1024 * 1024
    if len(content) > limit:
        exc = InputTooLargeError(len(content) / (1024 * 1024), settings.max_upload_mb)
        logger.warning("[%s] %s", request_id, exc.message)
        raise HTTPException(status_code=413, detail=exc.to_dict())
    return content


def _content_disposition(filename: str | None) -> str:
    """Attachment header: an ASCII fallback name plus the full name in RFC 5987 form."""
    stem = (filename or "image").rsplit(".", 1)[0] or "image"
    fallback = re.sub(r"[^A-Za-z0-9._ -]", "_", stem).strip() or "image"
    return f"attachment; filename=\"{fallback}.pdf\"; filename*=UTF-8''{quote(stem + '.pdf', safe='')}"


# ──────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok", "service": "rasterpdf-api", "version": __version__}


@app.post(
    "/v1/image-to-pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Generated PDF"},
        413: {"description": "Upload too large"},
        422: {"description": "Image could not be decoded"},
    },
)
async def image_to_pdf(
    file: UploadFile = File(..., description="JPEG or PNG image"),
    dpi: float | None = Query(default=None, gt=0, allow_inf_nan=False, description="Page resolution; 72 = one point per pixel"),
):
    """
    Convert one uploaded image into a single-page PDF.

    The X-RasterPDF-Report header carries the ConversionReport as
    base64-encoded JSON.
    """
    from rasterpdf.convert import convert_with_report

    request_id = uuid.uuid4().hex[:12]
    start = time.perf_counter()
    logger.info("[%s] POST /v1/image-to-pdf — %s", request_id, file.filename)

    content = await _read_upload(file, request_id)

    try:
        pdf_bytes, report = convert_with_report(content, dpi)
    except DecodeError as exc:
        logger.warning("[%s] Decode error: %s", request_id, exc.code)
        raise HTTPException(status_code=422, detail=exc.to_dict())
    except ValueError as exc:
        logger.warning("[%s] Unusable page size: %s", request_id, exc)
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.exception("[%s] Conversion failed", request_id)
        raise HTTPException(status_code=500, detail=str(exc))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("[%s] Complete — %d bytes in %.0f ms", request_id, len(pdf_bytes), elapsed_ms)

    report_b64 = base64.b64encode(report.model_dump_json().encode()).decode("ascii")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": _content_disposition(file.filename),
            "X-Request-Id": request_id,
            "X-RasterPDF-Report": report_b64,
        },
    )


@app.post("/v1/verify")
async def verify_pdf(
    file: UploadFile = File(..., description="PDF file to verify"),
    page_width: float | None = None,
    page_height: float | None = None,
    expect_soft_mask: bool | None = None,
):
    """
    Run structural checks on an uploaded PDF.
    Returns detailed check results and content hash.
    """
    from rasterpdf.pdf.verify import PDFVerifier, VerifyExpectations

    request_id = uuid.uuid4().hex[:12]
    logger.info("[%s] POST /v1/verify — %s", request_id, file.filename)

    content = await _read_upload(file, request_id)

    page_size = None
    if page_width is not None and page_height is not None:
        page_size = (page_width, page_height)

    try:
        result = PDFVerifier().verify(content, VerifyExpectations(
            page_size=page_size,
            expect_soft_mask=expect_soft_mask,
        ))
    except Exception as exc:
        logger.exception("[%s] Verification failed", request_id)
        raise HTTPException(status_code=500, detail=str(exc))

    return result.model_dump()
