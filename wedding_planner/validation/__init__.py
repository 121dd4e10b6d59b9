"""Draft validation package."""

from wedding_planner.validation.validator import (
    AMOUNT_TOO_LARGE_MESSAGE,
    INVALID_AMOUNT_MESSAGE,
    MISSING_NAME_MESSAGE,
    MISSING_TITLE_OR_AMOUNT_MESSAGE,
    TOO_MANY_DECIMALS_MESSAGE,
    DraftValidator,
    parse_amount,
)

__all__ = [
    "AMOUNT_TOO_LARGE_MESSAGE",
    "INVALID_AMOUNT_MESSAGE",
    "MISSING_NAME_MESSAGE",
    "MISSING_TITLE_OR_AMOUNT_MESSAGE",
    "TOO_MANY_DECIMALS_MESSAGE",
    "DraftValidator",
    "parse_amount",
]
