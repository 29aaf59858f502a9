from __future__ import annotations

import math
import re
from typing import Any

"""Failure-tolerant value parsing.

Every parser returns None for a blank or unparseable value instead of
raising; callers decide whether None means "missing measurement" or
"drop the row".
"""

__all__ = [
    "parse_float",
    "parse_int",
    "parse_year",
    "is_blank",
]

_NON_DIGITS = re.compile(r"\D")
_INT_TEXT = re.compile(r"^[+-]?\d+$")
# 1,234,567 形式 (桁区切り)
_GROUPED_INT_TEXT = re.compile(r"^[+-]?\d{1,3}(,\d{3})+$")
_GROUPED_FLOAT_TEXT = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def parse_int(value: Any) -> int | None:
    """Parse an integer cell.

    Accepts ints, integral floats (7.0 from spreadsheet readers) and digit
    strings, optionally with thousands separators or a trailing ".0".
    Returns None for anything else, including non-integral numbers.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isinf(value) or not value.is_integer():
            return None
        return int(value)
    if hasattr(value, "item"):  # numpy scalar
        return parse_int(value.item())
    text = str(value).strip()
    if text.endswith(".0"):
        text = text[:-2]
    if _GROUPED_INT_TEXT.match(text):
        text = text.replace(",", "")
    if _INT_TEXT.match(text):
        return int(text)
    return None


def parse_float(value: Any) -> float | None:
    """Parse a real-valued cell.

    Commas are only accepted as thousands separators ("1,234.5"); any other
    comma (decimal comma "39,95", "1,5") makes the value unparseable.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif hasattr(value, "item"):
        return parse_float(value.item())
    else:
        text = str(value).strip()
        if "," in text:
            if not _GROUPED_FLOAT_TEXT.match(text):
                return None
            text = text.replace(",", "")
        try:
            result = float(text)
        except ValueError:
            return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def parse_year(value: Any) -> int | None:
    """Strip every non-digit and read the rest as a year.

    "1961 Census" -> 1961, "1971 (Census)" -> 1971. Returns None when no
    digits remain; callers must treat that as a defect for non-blank input.
    Plain integers are read directly so 1961.0 does not become 19610.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    number = parse_int(value)
    if number is not None:
        return number
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return None
    return int(digits)
