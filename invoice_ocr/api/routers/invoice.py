import base64
import binascii
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Request, UploadFile
from loguru import logger

from ..deps import AnalyzeInvoiceRequest, ParseTextRequest, get_pipeline
from ...core.config import settings
from ...core.errors import InvalidLlmJson
from ...models.invoice import InvoiceRecord
from ...services.pipeline import InvoicePipeline, ParserMode
from ...services.schema_normalizer import normalize_from_raw_json, parse_invoice_text

# Unprefixed path used by the invoice upload panel.
analyze_router = APIRouter(tags=["invoices"])
router = APIRouter(prefix="/invoices", tags=["invoices"])


def _check_size(content: bytes):
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes} bytes",
        )


@analyze_router.post("/analyze-invoice", response_model=InvoiceRecord)
async def analyze_invoice(
    req: AnalyzeInvoiceRequest,
    mode: ParserMode | None = None,
    pipeline: InvoicePipeline = Depends(get_pipeline),
):
    """
    OCR a base64-encoded invoice and return the canonical record.

    Example request:
    {
        "fileName": "acme-1002.pdf",
        "fileType": "application/pdf",
        "fileContentBase64": "JVBERi0xLjQK..."
    }
    """
    logger.info(
        f"Received analyze request for {req.file_name or 'unknown file'} "
        f"({req.file_type or 'unknown type'})"
    )

    if not req.file_content_base64:
        raise HTTPException(status_code=400, detail="fileContentBase64 is required")

    try:
        content = base64.b64decode(req.file_content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="fileContentBase64 is not valid base64")

    _check_size(content)
    return await pipeline.analyze_bytes(content, mode)


@router.post("/analyze", response_model=InvoiceRecord)
async def analyze_upload(
    request: Request,
    file: UploadFile = File(None),
    mode: ParserMode | None = None,
    pipeline: InvoicePipeline = Depends(get_pipeline),
):
    """
    OCR an uploaded invoice and return the canonical record.

    Accepts either:
    - multipart/form-data (file upload via form)
    - application/pdf or application/octet-stream (raw binary body)
    """
    if file:
        content = await file.read()
    else:
        content = await request.body()
    if not content:
        raise HTTPException(status_code=422, detail="No file provided (either multipart or raw body)")

    _check_size(content)
    return await pipeline.analyze_bytes(content, mode)


@router.post("/parse-text", response_model=InvoiceRecord)
async def parse_text(req: ParseTextRequest):
    """Run the rule-based parser over OCR text that is already available"""
    return parse_invoice_text(req.text)


@router.post("/normalize", response_model=InvoiceRecord)
async def normalize(payload: Any = Body(...)):
    """
    Coerce generative-parser JSON into the canonical record.

    The body may be the JSON object itself or a JSON string holding it.
    """
    try:
        return normalize_from_raw_json(payload)
    except InvalidLlmJson as e:
        raise HTTPException(status_code=422, detail=str(e))
