"""
Unit tests for line item reconstruction.
"""

from invoice_ocr.services.line_items import (
    FALLBACK_DESCRIPTION,
    reconstruct_line_items,
)


def test_column_rows_are_recognised():
    lines = [
        "Acme Supplies",
        "Widget A    2 x 10.00",
        "Gadget B\t3 x 4.50",
        "Total 33.50",
    ]
    items = reconstruct_line_items(lines, fallback_total=33.5)
    assert [i.description for i in items] == ["Widget A", "Gadget B"]
    assert items[0].quantity == 2
    assert items[0].unit_price == 10
    assert items[0].line_total == 20
    assert items[1].line_total == 13.5


def test_line_total_is_recomputed_not_read():
    items = reconstruct_line_items(["Bolts    4 x 2.50    99.99"], fallback_total=None)
    assert items[0].line_total == 10.0


def test_single_space_is_not_a_column_break():
    items = reconstruct_line_items(["Widget A 2 x 10.00"], fallback_total=7)
    assert len(items) == 1
    assert items[0].description == FALLBACK_DESCRIPTION


def test_fallback_uses_total():
    items = reconstruct_line_items(["Acme Supplies", "Thank you"], fallback_total=250)
    assert len(items) == 1
    assert items[0].model_dump() == {
        "description": FALLBACK_DESCRIPTION,
        "quantity": 1,
        "unit_price": 250,
        "line_total": 250,
    }


def test_fallback_with_missing_or_bad_total_is_zero():
    for bad in (None, float("nan"), float("inf"), "n/a"):
        items = reconstruct_line_items([], fallback_total=bad)
        assert len(items) == 1
        assert items[0].unit_price == 0
        assert items[0].line_total == 0
        assert items[0].quantity == 1


def test_uppercase_x_separator():
    items = reconstruct_line_items(["Cable 2m    5 X 3"], fallback_total=0)
    assert items[0].description == "Cable 2m"
    assert items[0].line_total == 15
