"""Utility helpers for parsing monetary input and converting currency units."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

MINOR_UNITS_PER_UNIT = 100
# Largest value a 32-bit INTEGER column holds, in minor units.
MAX_MINOR_UNITS = 2**31 - 1
MAX_AMOUNT = Decimal(MAX_MINOR_UNITS) / MINOR_UNITS_PER_UNIT

_CURRENCY_SYMBOLS = "$€£¥₽₩₹₺"


class AmountParsingError(ValueError):
    """Raised when a submitted amount cannot be read as a number."""


def normalise_amount_text(text: str) -> Optional[str]:
    """Return a plain numeric string for formatted monetary input.

    Users frequently enter values such as ``"1,234.50"`` or ``"$1 234,50"``.
    Those values are intuitive for humans but ``Decimal`` cannot parse them
    directly because of the thousands separators, currency symbols, or locale
    specific decimal separators.  Accounting style parentheses mark a
    negative value.  ``None`` is returned for blank input.
    """

    if text is None:
        return None

    cleaned = str(text).strip()
    if not cleaned:
        return None

    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1]
    cleaned = cleaned.strip()

    while cleaned and cleaned[0] in _CURRENCY_SYMBOLS:
        cleaned = cleaned[1:].lstrip()
    while cleaned and cleaned[-1] in _CURRENCY_SYMBOLS:
        cleaned = cleaned[:-1].rstrip()

    if not cleaned:
        return None

    cleaned = cleaned.replace("\u00a0", " ")

    decimal_is_comma = False
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(".") < cleaned.rfind(","):
            decimal_is_comma = True
    elif "," in cleaned:
        fractional_length = len(cleaned) - cleaned.rfind(",") - 1
        decimal_is_comma = 0 < fractional_length <= 2

    cleaned = cleaned.replace("_", "").replace(" ", "")

    if decimal_is_comma:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    if not cleaned:
        return None

    if negative:
        cleaned = f"-{cleaned}"
    return cleaned


def parse_amount(raw_value: Any) -> Optional[Decimal]:
    """Parse a submitted amount into a finite :class:`~decimal.Decimal`.

    Blank input yields ``None``.  ``AmountParsingError`` is raised for text
    that is not a number, for ``NaN``/``Infinity`` and for amounts above
    ``MAX_AMOUNT``, which the ``amount`` column cannot store.
    """

    if raw_value is None:
        return None
    if isinstance(raw_value, Decimal):
        value = raw_value
    elif isinstance(raw_value, (int, float)):
        value = Decimal(str(raw_value))
    else:
        normalised = normalise_amount_text(raw_value)
        if normalised is None:
            return None
        try:
            value = Decimal(normalised)
        except InvalidOperation as exc:
            raise AmountParsingError("Not a valid amount.") from exc

    if not value.is_finite():
        raise AmountParsingError("Not a valid amount.")
    if value > MAX_AMOUNT:
        raise AmountParsingError("Amount is too large.")
    return value


def to_minor_units(amount: Decimal) -> int:
    """Convert whole currency units to integer cents, rounding half up."""

    cents = Decimal(amount) * MINOR_UNITS_PER_UNIT
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: Optional[int]) -> Optional[Decimal]:
    if cents is None:
        return None
    return (Decimal(cents) / MINOR_UNITS_PER_UNIT).quantize(Decimal("0.01"))
