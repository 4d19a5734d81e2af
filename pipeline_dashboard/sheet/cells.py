from __future__ import annotations

import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from ..models.config_models import DEFAULT_CURRENCY_CODES

"""Cell normalizer for free-text spreadsheet cells.

Both functions are best-effort and total: a malformed cell degrades to a safe
default (0 for money, None for probability) instead of raising, so one bad
cell never aborts a whole load.
"""

__all__ = [
    "parse_currency",
    "parse_percent",
]

# Leading numeric prefix, the way a lenient spreadsheet parser reads "50 likely"
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
# Symbols, thousands separators, accounting parentheses, whitespace
_CURRENCY_NOISE = re.compile(r"[$€£¥,()\s]")

_ZERO = Decimal(0)

# Orders of magnitude beyond +-12 ("1e13", "1e-13") count as unparseable
_MAX_EXPONENT = 12


def _leading_decimal(text: str) -> Decimal | None:
    m = _LEADING_NUMBER.match(text)
    if m is None:
        return None
    try:
        value = Decimal(m.group(0))
    except InvalidOperation:
        return None
    if value and abs(value.adjusted()) > _MAX_EXPONENT:
        return None
    return value


def _strip_currency_codes(text: str, codes: Iterable[str]) -> str:
    # 長いコードから除去 (CAD を CA より先に)
    for code in sorted({c for c in codes if c}, key=len, reverse=True):
        text = re.sub(re.escape(code), "", text, flags=re.IGNORECASE)
    return text


def parse_currency(text: str | None, codes: Iterable[str] = DEFAULT_CURRENCY_CODES) -> Decimal:
    """Normalize a money cell to a non-negative Decimal.

    Examples:
        >>> parse_currency("$10,000")
        Decimal('10000')
        >>> parse_currency("CAD 1,250.50")
        Decimal('1250.50')
        >>> parse_currency("-$500")
        Decimal('500')
        >>> parse_currency("TBD")
        Decimal('0')
    """
    if not text:
        return _ZERO
    cleaned = _CURRENCY_NOISE.sub("", str(text))
    cleaned = _strip_currency_codes(cleaned, codes)
    value = _leading_decimal(cleaned)
    if value is None:
        return _ZERO
    # sign carries no meaning for pipeline amounts
    return abs(value)


def parse_percent(text: str | None) -> Decimal | None:
    """Normalize a probability cell.

    Returns None ("unknown") for empty or unparseable input; "0%" stays a
    known Decimal('0'). Values outside 0..100 are passed through unchanged.
    """
    if not text:
        return None
    cleaned = str(text).strip().replace("%", "", 1).strip()
    return _leading_decimal(cleaned)
