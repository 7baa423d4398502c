"""
Rule-based field extraction from raw OCR text.

Each field is located by an ordered list of independent rules. A rule is a
label pattern, the capture group holding the value, and a canonicalizer that
turns the captured text into the field's primitive type. For every field the
first rule that yields a value wins; nothing here raises on a miss.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from ..models.invoice import PartialInvoiceFields
from .normalizers import normalize_date, parse_currency

_DATE_TOKEN = r"(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})"
_AMOUNT_TOKEN = r"(\d+[\d.,]*)"


def _strip_token(value: str) -> Optional[str]:
    return value.strip() or None


@dataclass(frozen=True)
class ExtractionRule:
    field: str
    pattern: re.Pattern
    group: int = 1
    canonicalize: Callable[[str], object] = _strip_token

    def apply(self, text: str):
        match = self.pattern.search(text)
        if not match or not match.group(self.group):
            return None
        return self.canonicalize(match.group(self.group).strip())


def _rule(field: str, pattern: str, group: int = 1, canonicalize=_strip_token) -> ExtractionRule:
    return ExtractionRule(field, re.compile(pattern, re.IGNORECASE), group, canonicalize)


# Order matters within a field: "invoice date" is tried before a bare "date".
DEFAULT_RULES: tuple[ExtractionRule, ...] = (
    _rule("invoice_number", r"invoice\s*(number|no\.?)[^\w]?\s*([A-Za-z0-9-]+)", group=2),
    _rule("invoice_date", r"invoice\s*date[^\d]*" + _DATE_TOKEN, canonicalize=normalize_date),
    _rule("invoice_date", r"date[^\d]*" + _DATE_TOKEN, canonicalize=normalize_date),
    _rule("subtotal", r"sub\s*-?\s*total[^\d]*" + _AMOUNT_TOKEN, canonicalize=parse_currency),
    _rule("tax", r"\btax[^\d]*" + _AMOUNT_TOKEN, canonicalize=parse_currency),
    # Whole word, so a "Subtotal" line can't satisfy it.
    _rule("total", r"\btotal\b[^\d]*" + _AMOUNT_TOKEN, canonicalize=parse_currency),
)


def normalize_newlines(text: str | None) -> str:
    return (text or "").replace("\r\n", "\n")


def split_lines(text: str | None) -> list[str]:
    """Trimmed, non-empty lines of the OCR text"""
    lines = (line.strip() for line in normalize_newlines(text).split("\n"))
    return [line for line in lines if line]


def extract_fields(text: str | None, rules: tuple[ExtractionRule, ...] = DEFAULT_RULES) -> PartialInvoiceFields:
    """
    Locate vendor, invoice number, date and totals in OCR text.

    The vendor is assumed to be the first non-empty line (letterhead). Line
    items are not touched here; see ``line_items.reconstruct_line_items``.
    """
    normalized = normalize_newlines(text)
    lines = split_lines(normalized)

    found: dict[str, object] = {}
    for rule in rules:
        if found.get(rule.field) is not None:
            continue
        value = rule.apply(normalized)
        if value is not None:
            found[rule.field] = value

    fields = PartialInvoiceFields(vendor=lines[0] if lines else None, **found)

    logger.debug(
        "Extracted invoice fields from text",
        line_count=len(lines),
        matched=sorted(found),
    )
    return fields
