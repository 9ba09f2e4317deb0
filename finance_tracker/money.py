"""Currency parsing and formatting helpers.

Amounts are typed into the forms as cents: every keystroke is reduced to
its digits, read as an integer number of cents and re-rendered with the
configured currency layout (``R$ 1.234,56`` by default).  None of the
helpers here raise on malformed input; anything unreadable becomes zero.
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from typing import Any, Callable, Optional

import pandas as pd

from . import config

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D+")
_PHONE_PATTERN = re.compile(r"(\d{2})(\d{5})(\d{4})")


def to_number_or_zero(value: Any) -> float:
    """Coerce a stored or typed value into a float, degrading to ``0.0``.

    Accepts ints, floats, ``Decimal`` and numeric strings such as ``"1100.00"``.
    ``None``, NaN/NA, infinities, booleans and unparseable text all yield zero.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            logger.debug("Coercing non-numeric value %r to zero", value)
            return 0.0
    elif isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        try:
            if pd.isna(value):
                return 0.0
            number = float(value)
        except (TypeError, ValueError):
            logger.debug("Coercing unsupported value %r to zero", value)
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_currency_text(text: Any) -> float:
    """Read ``text`` as a count of cents, ignoring every non-digit character.

    >>> parse_currency_text("R$ 1.234,56")
    1234.56
    >>> parse_currency_text("abc")
    0.0

    A digit run too long to be read as a float also gives ``0.0``.
    """
    if text is None:
        return 0.0
    digits = _NON_DIGITS.sub("", str(text))
    if not digits:
        return 0.0
    try:
        return int(digits) / 100
    except (ValueError, OverflowError):
        logger.debug("Digit run of length %d is too long for an amount", len(digits))
        return 0.0


def format_currency(amount: Any) -> str:
    """Render an amount with the configured symbol and two fraction digits.

    Numeric strings are accepted; ``None`` and anything non-numeric render as
    zero.

    >>> format_currency(1234.5)
    'R$ 1.234,50'
    >>> format_currency(-3)
    '-R$ 3,00'
    """
    number = to_number_or_zero(amount)
    formatted = f"{abs(number):,.2f}"
    # swap the en-US separators for the configured ones
    formatted = (
        formatted.replace(",", "\0")
        .replace(".", config.DECIMAL_SEPARATOR)
        .replace("\0", config.THOUSANDS_SEPARATOR)
    )
    sign = "-" if number < 0 and formatted.strip("0,. ") else ""
    return f"{sign}{config.CURRENCY_SYMBOL} {formatted}"


def apply_currency_mask(raw_input: Any, emit: Optional[Callable[[str], None]] = None) -> str:
    """Re-mask live input as cents-as-typed and hand it back for redisplay.

    The formatted string is returned and, when ``emit`` is given, also passed
    to it so an input widget can update its displayed value.
    """
    masked = format_currency(parse_currency_text(raw_input))
    if emit is not None:
        emit(masked)
    return masked


def masked_text_to_number(masked: Any) -> float:
    """Inverse of :func:`apply_currency_mask`; empty input gives ``0.0``."""
    if not masked:
        return 0.0
    return parse_currency_text(masked)


def round_cents(value: Any) -> float:
    """Round a coerced amount to two decimal places."""
    return round(to_number_or_zero(value), 2)


def format_phone(phone: Optional[str]) -> str:
    """Format an 11 digit mobile number as ``(11) 98765-4321``.

    Text that does not contain such a run of digits is returned unchanged.
    """
    if not phone:
        return ""
    return _PHONE_PATTERN.sub(r"(\1) \2-\3", str(phone), count=1)
