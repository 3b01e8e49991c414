"""Boundary validation package."""

from expensedaddy.validation.rules import (
    detect_card_type,
    format_expiry,
    mask_card_number,
    normalize_card_number,
    normalize_tags,
    require_iso_date,
    require_positive_amount,
)

__all__ = [
    "detect_card_type",
    "format_expiry",
    "mask_card_number",
    "normalize_card_number",
    "normalize_tags",
    "require_iso_date",
    "require_positive_amount",
]
