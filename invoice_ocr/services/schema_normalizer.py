"""
Single point of truth for the shape of an ``InvoiceRecord``.

Both parsing paths end here: semi-trusted JSON from a generative parser goes
through ``normalize_from_raw_json``, rule-based extractor output through
``normalize_fields``. Either way every numeric field comes out finite, the
date is ISO or None, blank strings are None and there is at least one line
item.
"""

from loguru import logger

from ..models.invoice import InvoiceRecord, LineItem, PartialInvoiceFields
from .field_extractor import extract_fields, split_lines
from .line_items import fallback_line_item, reconstruct_line_items
from .llm_json import load_llm_payload
from .normalizers import safe_date, safe_number_or_zero, safe_string


def _pick(data: dict, *keys):
    """First present key wins, so camelCase and snake_case both work"""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _normalize_item(raw_item, position: int) -> LineItem:
    if not isinstance(raw_item, dict):
        raw_item = {}
    return LineItem(
        description=safe_string(raw_item.get("description")) or f"Line Item {position}",
        quantity=safe_number_or_zero(raw_item.get("quantity")),
        unit_price=safe_number_or_zero(_pick(raw_item, "unitPrice", "unit_price")),
        line_total=safe_number_or_zero(_pick(raw_item, "lineTotal", "line_total")),
    )


def _build_record(vendor, invoice_number, invoice_date, subtotal, tax, total, items) -> InvoiceRecord:
    total = safe_number_or_zero(total)
    items = list(items) or [fallback_line_item(total)]
    return InvoiceRecord(
        vendor=safe_string(vendor),
        invoice_number=safe_string(invoice_number),
        invoice_date=safe_date(invoice_date),
        subtotal=safe_number_or_zero(subtotal),
        tax=safe_number_or_zero(tax),
        total=total,
        line_items=tuple(items),
    )


def normalize_from_raw_json(raw) -> InvoiceRecord:
    """
    Coerce generative-parser output into the canonical record.

    Args:
        raw: a dict, or a string holding a JSON object

    Raises:
        InvalidLlmJson: when ``raw`` is neither
    """
    data = load_llm_payload(raw)

    raw_items = _pick(data, "lineItems", "line_items")
    if not isinstance(raw_items, list):
        raw_items = []

    record = _build_record(
        vendor=data.get("vendor"),
        invoice_number=_pick(data, "invoiceNumber", "invoice_number"),
        invoice_date=_pick(data, "invoiceDate", "invoice_date"),
        subtotal=data.get("subtotal"),
        tax=data.get("tax"),
        total=data.get("total"),
        items=[_normalize_item(item, i) for i, item in enumerate(raw_items, start=1)],
    )
    logger.debug(
        "Normalized generative payload",
        declared_items=len(raw_items),
        line_items=len(record.line_items),
    )
    return record


def normalize_fields(fields: PartialInvoiceFields) -> InvoiceRecord:
    """Apply the same defaulting pass to rule-based extractor output"""
    items = [
        LineItem(
            description=safe_string(item.description) or f"Line Item {i}",
            quantity=safe_number_or_zero(item.quantity),
            unit_price=safe_number_or_zero(item.unit_price),
            line_total=safe_number_or_zero(item.line_total),
        )
        for i, item in enumerate(fields.line_items, start=1)
    ]
    return _build_record(
        vendor=fields.vendor,
        invoice_number=fields.invoice_number,
        invoice_date=fields.invoice_date,
        subtotal=fields.subtotal,
        tax=fields.tax,
        total=fields.total,
        items=items,
    )


def parse_invoice_text(text: str | None) -> InvoiceRecord:
    """Rule-based path: OCR text in, canonical record out"""
    fields = extract_fields(text)
    items = reconstruct_line_items(split_lines(text), fields.total)
    return normalize_fields(fields.model_copy(update={"line_items": items}))
