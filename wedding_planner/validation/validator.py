"""
Draft Validation

DESIGN DECISION: Validation runs before any mutation and never
fixes input silently. It reports issues, and the first error becomes
the message the user sees. A draft that fails validation leaves the
list untouched.

Amounts are typed on a Turkish keyboard, so "1.500,50" means
one thousand five hundred and a half. The parser accepts both the
Turkish and the English notation.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from wedding_planner.models.expense import AMOUNT_DECIMAL_PLACES, MAX_AMOUNT, ExpenseDraft
from wedding_planner.models.person import PersonDraft
from wedding_planner.models.results import ValidationIssue, ValidationResult


_PLAIN_NUMBER = re.compile(r"^\d+(\.\d+)?$")
_CURRENCY_MARKS = ("₺", "TL", "tl", "TRY")

MISSING_NAME_MESSAGE = "Lütfen isim giriniz"
MISSING_TITLE_OR_AMOUNT_MESSAGE = "Lütfen başlık ve tutar giriniz"
INVALID_AMOUNT_MESSAGE = "Lütfen geçerli bir tutar giriniz"
AMOUNT_TOO_LARGE_MESSAGE = "Tutar en fazla 999.999.999.999,99 olabilir"
TOO_MANY_DECIMALS_MESSAGE = "Tutar en fazla 2 ondalık basamak içerebilir"


def parse_amount(text: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """
    Parse a locale-formatted amount.

    Rules:
    - When both '.' and ',' appear, the rightmost one is the decimal
      separator and the other is a thousands separator.
    - A single ',' is a decimal separator; repeated ones group thousands.
    - A single '.' is a decimal separator; repeated ones group thousands.

    Returns None when the text is not a plain non-negative number.
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, Decimal):
        return text if text.is_finite() else None
    if isinstance(text, (int, float)):
        text = str(text)

    cleaned = text.strip()
    for mark in _CURRENCY_MARKS:
        cleaned = cleaned.replace(mark, "")
    cleaned = cleaned.replace(" ", "").replace("\u00a0", "").replace("'", "")
    if not cleaned:
        return None

    has_dot = "." in cleaned
    has_comma = "," in cleaned
    if has_dot and has_comma:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        if cleaned.count(",") == 1:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_dot and cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    if not _PLAIN_NUMBER.match(cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


class DraftValidator:
    """
    Validates person and expense drafts.

    Both checks are pure; they never touch storage.
    """

    def validate_person(self, draft: PersonDraft) -> ValidationResult:
        """A person needs a non-empty name."""
        issues = []
        if not draft.name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message=MISSING_NAME_MESSAGE,
            ))
        return ValidationResult(issues=issues)

    def validate_expense(
        self,
        draft: ExpenseDraft,
    ) -> tuple[ValidationResult, Optional[Decimal]]:
        """
        An expense needs a title and a positive amount.

        Returns:
            (validation_result, parsed_amount)
            parsed_amount is None whenever the result has errors.
        """
        issues = []

        if not draft.title.strip() or not draft.amount.strip():
            issues.append(ValidationIssue(
                field="title" if not draft.title.strip() else "amount",
                issue_type="missing",
                message=MISSING_TITLE_OR_AMOUNT_MESSAGE,
            ))
            return ValidationResult(issues=issues), None

        amount = parse_amount(draft.amount)
        if amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=INVALID_AMOUNT_MESSAGE,
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=INVALID_AMOUNT_MESSAGE,
            ))
        elif amount > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message=AMOUNT_TOO_LARGE_MESSAGE,
            ))
        elif -amount.normalize().as_tuple().exponent > AMOUNT_DECIMAL_PLACES:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_precision",
                message=TOO_MANY_DECIMALS_MESSAGE,
            ))

        result = ValidationResult(issues=issues)
        return result, (amount if result.is_valid else None)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Message to show for a failed validation."""
        first = result.first_error
        return first.message if first else ""
