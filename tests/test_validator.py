"""Tests for TransactionValidator."""

import pytest
from decimal import Decimal

from finance_ledger.config import AppSettings
from finance_ledger.exceptions import ValidationError
from finance_ledger.models.transaction import TransactionCategory, TransactionKind
from finance_ledger.validation import TransactionValidator

from conftest import form


@pytest.fixture
def validator(app_settings) -> TransactionValidator:
    return TransactionValidator(app_settings)


class TestTransactionValidator:
    """Tests for parsing raw form input."""
    
    def test_valid_input(self, validator):
        patch = validator.validate(form(TransactionKind.INCOME, "100", "Salary", "salary"))
        assert patch.kind is TransactionKind.INCOME
        assert patch.amount == Decimal("100")
        assert patch.description == "Salary"
        assert patch.category is TransactionCategory.SALARY
    
    def test_all_fields_are_set(self, validator):
        """Submitting replaces every field, including a cleared category."""
        patch = validator.validate(form("expense", "3", "Coffee"))
        assert patch.model_dump(exclude_unset=True).keys() == {
            "kind", "amount", "description", "category",
        }
        assert patch.category is None
    
    def test_kind_tag_is_case_insensitive(self, validator):
        patch = validator.validate(form(" Expense ", "3", "Coffee"))
        assert patch.kind is TransactionKind.EXPENSE
    
    def test_trims_input(self, validator):
        patch = validator.validate(form("income", "  12.50 ", "  Refund  "))
        assert patch.amount == Decimal("12.50")
        assert patch.description == "Refund"
    
    @pytest.mark.parametrize(
        "amount_text, issue_type",
        [
            ("", "missing"),
            ("   ", "missing"),
            ("abc", "invalid_format"),
            ("1,000", "invalid_format"),
            ("NaN", "invalid_format"),
            ("Infinity", "invalid_format"),
            ("0", "out_of_range"),
            ("-30", "out_of_range"),
            ("1e12", "out_of_range"),
            ("1E+999999999", "out_of_range"),
            ("0.000000001", "too_precise"),
            ("1E-5000000", "too_precise"),
            ("1E-999999999", "too_precise"),
        ],
    )
    def test_bad_amounts(self, validator, amount_text, issue_type):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", amount_text, "Bad"))
        issues = exc_info.value.issues
        assert [issue.field for issue in issues] == ["amount"]
        assert issues[0].issue_type == issue_type
    
    def test_trailing_zeros_do_not_count_as_decimal_places(self, validator):
        patch = validator.validate(form("income", "12.500000000000", "Refund"))
        assert patch.amount == Decimal("12.5")

    def test_decimal_places_limit_is_configurable(self):
        validator = TransactionValidator(AppSettings(max_decimal_places=2))
        assert validator.validate(form("income", "9.99", "Ok")).amount == Decimal("9.99")
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", "9.999", "Too fine"))
        assert exc_info.value.issues[0].issue_type == "too_precise"
        assert "2 decimal places" in exc_info.value.issues[0].message

    def test_empty_description(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", "10", "   "))
        assert exc_info.value.issues[0].field == "description"
    
    def test_description_too_long(self):
        validator = TransactionValidator(AppSettings(max_description_length=5))
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", "10", "Too long"))
        assert exc_info.value.issues[0].issue_type == "too_long"
    
    def test_unknown_kind_and_category(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("transfer", "10", "Move", "crypto"))
        fields = {issue.field for issue in exc_info.value.issues}
        assert fields == {"kind", "category"}
    
    def test_collects_every_issue(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", "abc", ""))
        assert len(exc_info.value.issues) == 2
        assert "not a number" in str(exc_info.value)
    
    def test_blank_category_means_none(self, validator):
        patch = validator.validate(form("income", "1", "x", "  "))
        assert patch.category is None
    
    def test_validation_error_is_value_error(self, validator):
        with pytest.raises(ValueError):
            validator.validate(form("income", "", ""))
    
    def test_user_friendly_summary(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(form("income", "", ""))
        summary = TransactionValidator.get_user_friendly_summary(exc_info.value)
        assert "Please enter an amount" in summary
        assert "Please enter a description" in summary
