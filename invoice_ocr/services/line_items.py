"""
Best-effort recovery of line items from flattened OCR text.

Only rows shaped like ``<description><2+ spaces or tab><qty> x <unit price>``
are recognised. Real invoice layouts vary far more than that, so the result
is an approximation for a human to review, not a faithful table.
"""

import re
from typing import Iterable

from loguru import logger

from ..models.invoice import LineItem
from .normalizers import safe_number_or_zero

FALLBACK_DESCRIPTION = "See OCR output for detailed line items"

LINE_ITEM_RE = re.compile(r"(.*?)(?:\s{2,}|\t)(\d+(?:\.\d+)?)\s+x\s+(\d+(?:\.\d+)?)", re.IGNORECASE)


def fallback_line_item(total) -> LineItem:
    """Single summary row used when no item rows could be recovered"""
    amount = safe_number_or_zero(total)
    return LineItem(
        description=FALLBACK_DESCRIPTION,
        quantity=1,
        unit_price=amount,
        line_total=amount,
    )


def match_line_item(line: str, position: int = 1) -> LineItem | None:
    match = LINE_ITEM_RE.search(line)
    if not match:
        return None

    quantity = safe_number_or_zero(match.group(2))
    unit_price = safe_number_or_zero(match.group(3))
    # Printed line totals are unreliable OCR column artifacts; recompute.
    return LineItem(
        description=match.group(1).strip() or f"Line Item {position}",
        quantity=quantity,
        unit_price=unit_price,
        line_total=safe_number_or_zero(quantity * unit_price),
    )


def reconstruct_line_items(lines: Iterable[str], fallback_total=None) -> list[LineItem]:
    """
    Scan trimmed OCR lines for item rows.

    Never returns an empty list: when nothing matches, one fallback row
    carrying ``fallback_total`` (0 if missing) is returned instead.
    """
    items: list[LineItem] = []
    for line in lines:
        item = match_line_item(line, position=len(items) + 1)
        if item is not None:
            items.append(item)

    if not items:
        logger.debug("No line item rows recognised, using fallback row", fallback_total=fallback_total)
        return [fallback_line_item(fallback_total)]

    logger.debug("Reconstructed line items", count=len(items))
    return items
