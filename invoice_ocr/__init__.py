"""Invoice OCR text to structured invoice record extraction."""

from .core.errors import InvalidLlmJson
from .models.invoice import InvoiceRecord, LineItem, PartialInvoiceFields
from .services.field_extractor import extract_fields
from .services.line_items import reconstruct_line_items
from .services.schema_normalizer import normalize_fields, normalize_from_raw_json, parse_invoice_text

__version__ = "0.1.0"

__all__ = [
    "InvalidLlmJson",
    "InvoiceRecord",
    "LineItem",
    "PartialInvoiceFields",
    "extract_fields",
    "reconstruct_line_items",
    "normalize_fields",
    "normalize_from_raw_json",
    "parse_invoice_text",
]
