"""Tests for draft validation and amount parsing."""

import pytest
from decimal import Decimal

from wedding_planner.models import ExpenseCategory, ExpenseDraft, PersonDraft
from wedding_planner.validation import DraftValidator, parse_amount


class TestParseAmount:
    """Amounts typed in Turkish or English notation."""

    @pytest.mark.parametrize("text,expected", [
        ("1500", Decimal("1500")),
        ("1500,50", Decimal("1500.50")),
        ("1500.50", Decimal("1500.50")),
        ("1.500,50", Decimal("1500.50")),
        ("1,500.50", Decimal("1500.50")),
        ("1.000.000", Decimal("1000000")),
        ("₺ 2.500", Decimal("2.500")),
        ("750 TL", Decimal("750")),
    ])
    def test_accepted_formats(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12a", "-5", "1,2.3.4,5", None])
    def test_rejected_formats(self, text):
        assert parse_amount(text) is None

    def test_numbers_pass_through(self):
        assert parse_amount(Decimal("10.5")) == Decimal("10.5")
        assert parse_amount(42) == Decimal("42")


class TestPersonValidation:
    """A person only needs a name."""

    def setup_method(self):
        self.validator = DraftValidator()

    def test_valid_person(self):
        result = self.validator.validate_person(PersonDraft(name="Ayşe"))
        assert result.is_valid

    def test_missing_name(self):
        result = self.validator.validate_person(PersonDraft(name="   ", phone="0555"))
        assert not result.is_valid
        assert self.validator.get_user_friendly_summary(result) == "Lütfen isim giriniz"


class TestExpenseValidation:
    """An expense needs a title and a positive amount."""

    def setup_method(self):
        self.validator = DraftValidator()

    def test_valid_expense(self):
        result, amount = self.validator.validate_expense(
            ExpenseDraft(title="Fotoğraf", amount="1.500,50", category=ExpenseCategory.PHOTOGRAPHY)
        )
        assert result.is_valid
        assert amount == Decimal("1500.50")

    def test_missing_title(self):
        result, amount = self.validator.validate_expense(ExpenseDraft(title="", amount="100"))
        assert amount is None
        assert result.first_error.message == "Lütfen başlık ve tutar giriniz"

    def test_missing_amount(self):
        result, amount = self.validator.validate_expense(ExpenseDraft(title="Salon", amount=""))
        assert amount is None
        assert result.first_error.message == "Lütfen başlık ve tutar giriniz"

    @pytest.mark.parametrize("amount", ["abc", "0", "0,00", "-10"])
    def test_invalid_amount(self, amount):
        result, parsed = self.validator.validate_expense(ExpenseDraft(title="Salon", amount=amount))
        assert parsed is None
        assert result.first_error.message == "Lütfen geçerli bir tutar giriniz"

    def test_amount_too_large(self):
        result, parsed = self.validator.validate_expense(ExpenseDraft(title="Salon", amount="9" * 400))
        assert parsed is None
        assert result.first_error.message == "Tutar en fazla 999.999.999.999,99 olabilir"

    def test_largest_amount_is_accepted(self):
        result, parsed = self.validator.validate_expense(
            ExpenseDraft(title="Salon", amount="999.999.999.999,99")
        )
        assert result.is_valid
        assert parsed == Decimal("999999999999.99")

    def test_too_many_decimals(self):
        result, parsed = self.validator.validate_expense(ExpenseDraft(title="Salon", amount="10,555"))
        assert parsed is None
        assert result.first_error.message == "Tutar en fazla 2 ondalık basamak içerebilir"

    def test_trailing_zeros_are_not_extra_decimals(self):
        result, parsed = self.validator.validate_expense(ExpenseDraft(title="Salon", amount="10,500"))
        assert result.is_valid
        assert parsed == Decimal("10.5")
