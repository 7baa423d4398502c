"""
Request-level orchestration: bytes -> OCR text -> canonical record.

OCR always finishes before either parser runs. The rule-based parser is
local and synchronous; the generative parser is an awaited HTTP call whose
output goes through the same schema normalizer.
"""

import asyncio
from typing import Literal

from loguru import logger

from ..core.config import settings
from ..core.errors import OcrError
from ..models.invoice import InvoiceRecord
from .generative import GenerativeParser
from .ocr import extract_text
from .schema_normalizer import normalize_from_raw_json, parse_invoice_text

ParserMode = Literal["rules", "llm", "auto"]


class InvoicePipeline:
    def __init__(self, generative: GenerativeParser | None = None, default_mode: ParserMode | None = None):
        self.generative = generative or GenerativeParser()
        self.default_mode = default_mode or settings.parser_mode

    def resolve_mode(self, mode: ParserMode | None) -> ParserMode:
        """
        Pick the parser for a request.

        "auto" means the generative parser when it is configured, else the
        rules. An explicit "llm" is passed through even when unconfigured so
        the caller sees BackendUnavailable.
        """
        mode = mode or self.default_mode
        if mode == "auto":
            if self.generative.available:
                return "llm"
            logger.warning(
                "Generative backend unavailable, using rule-based parser",
                reason=self.generative.unavailable_reason,
            )
            return "rules"
        return mode

    async def analyze_text(self, text: str, mode: ParserMode | None = None) -> InvoiceRecord:
        resolved = self.resolve_mode(mode)
        logger.info("Parsing invoice text", mode=resolved, chars=len(text or ""))

        if resolved == "llm":
            raw = await self.generative.parse(text)
            return normalize_from_raw_json(raw)
        return parse_invoice_text(text)

    async def ocr(self, file_bytes: bytes) -> str:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(extract_text, file_bytes),
                timeout=settings.ocr_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error("OCR timed out", timeout_seconds=settings.ocr_timeout_seconds)
            raise OcrError(f"OCR timed out after {settings.ocr_timeout_seconds}s") from e

    async def analyze_bytes(self, file_bytes: bytes, mode: ParserMode | None = None) -> InvoiceRecord:
        text = await self.ocr(file_bytes)
        record = await self.analyze_text(text, mode)
        logger.info(
            "Invoice analyzed",
            vendor=record.vendor,
            invoice_number=record.invoice_number,
            total=record.total,
            line_items=len(record.line_items),
        )
        return record
