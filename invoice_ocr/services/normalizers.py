"""
Primitive normalizers shared by the text extractor and the JSON normalizer.

Every function here is total: bad input degrades to ``None`` or ``0.0``,
never to an exception.
"""

import math
import re

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_CURRENCY_JUNK_RE = re.compile(r"[^0-9.\-]")
_LEADING_DECIMAL_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_DATE_SEPARATOR_RE = re.compile(r"[/\-]")


def safe_number_or_zero(value) -> float:
    """Coerce ``value`` to a finite float, or return 0.0"""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def safe_string(value) -> str | None:
    """
    Null-when-blank policy for every string field of the canonical record.

    Strings are stripped; blank strings and non-strings become None. Plain
    numbers are kept as text since generative parsers often emit invoice
    numbers as JSON numbers.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            value = str(value)
        except ValueError:
            # int too long for str() conversion
            return None
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def safe_date(value) -> str | None:
    """Accept only strings that are exactly YYYY-MM-DD"""
    if isinstance(value, str) and ISO_DATE_RE.fullmatch(value):
        return value
    return None


def parse_currency(value) -> float | None:
    """
    Parse an amount such as ``"$1,234.56"``.

    Everything but digits, dots and minus signs is dropped, then the leading
    decimal is read. Returns None when nothing finite remains so callers can
    apply their own default.
    """
    if not value:
        return None
    cleaned = _CURRENCY_JUNK_RE.sub("", str(value))
    match = _LEADING_DECIMAL_RE.match(cleaned)
    if not match:
        return None
    try:
        number = float(match.group(0))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def normalize_date(raw: str | None) -> str | None:
    """
    Turn a ``month/day/year`` token into ``YYYY-MM-DD``.

    US ordering is assumed, and two-digit years are read as 20xx. Tokens
    that don't split into three parts come back unchanged.
    """
    if not raw:
        return None
    parts = [part.rjust(2, "0") for part in _DATE_SEPARATOR_RE.split(raw)]
    if len(parts) != 3:
        return raw
    month, day, year = parts
    if len(year) == 2:
        year = f"20{year}"
    return f"{year}-{month}-{day}"
