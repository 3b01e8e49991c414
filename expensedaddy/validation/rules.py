"""
Boundary Validation Rules

DESIGN DECISION: Inputs are checked once, at the boundary, before they
reach a repository's add operation. Repositories trust what they are
given, and updates are NOT re-validated (caller responsibility).

These helpers are pure functions over primitive values so the models
can call them from field validators without import cycles.
"""

import math
import re
from datetime import date
from typing import Iterable


CARD_NUMBER_MAX_DIGITS = 16
CARD_NUMBER_MIN_DIGITS = 4

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s")
_EXPIRY = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")


def require_positive_amount(value: float) -> float:
    """Amounts entering a repository must be strictly positive."""
    if value is None or math.isnan(value) or value <= 0:
        raise ValueError("Amount must be greater than 0")
    return value


def require_iso_date(value: str) -> str:
    """
    Check that the leading `YYYY-MM-DD` of an ISO 8601 string is a real date.
    
    The string itself is kept untouched: metrics match on its prefix.
    """
    try:
        date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        raise ValueError(f"Not an ISO 8601 date: {value!r}")
    return value


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim and lowercase tags, dropping blanks and repeats (first wins)."""
    seen: list[str] = []
    for tag in tags:
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def normalize_card_number(number: str) -> str:
    """Digits only, at most 16 of them."""
    return _NON_DIGITS.sub("", number)[:CARD_NUMBER_MAX_DIGITS]


def detect_card_type(number: str) -> str:
    """Guess the card network from the leading digits."""
    clean = _WHITESPACE.sub("", number)
    if re.match(r"^4", clean):
        return "visa"
    if re.match(r"^5[1-5]", clean) or re.match(r"^2[2-7]", clean):
        return "mastercard"
    if re.match(r"^3[47]", clean):
        return "amex"
    return "other"


def mask_card_number(number: str) -> str:
    """Show only the last four digits."""
    clean = _WHITESPACE.sub("", number)
    if len(clean) < 4:
        return clean
    return "•••• " + clean[-4:]


def format_expiry(value: str) -> str:
    """
    Normalise an expiry date to `MM/YY`.
    
    Accepts `MMYY`, `MM/YY` or anything whose first four digits are
    month then year.
    """
    digits = _NON_DIGITS.sub("", value)[:4]
    if len(digits) < 4:
        raise ValueError(f"Expiry date must be MM/YY, got {value!r}")
    formatted = f"{digits[:2]}/{digits[2:]}"
    if not _EXPIRY.match(formatted):
        raise ValueError(f"Invalid expiry month in {value!r}")
    return formatted
