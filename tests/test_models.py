"""
Tests for Finance Ledger models

Test strategy:
1. Unit tests for individual components (models, store, session, validator)
2. Flow tests for the LedgerService against in-memory storage
3. No real disk access except where a tmp_path is used
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from finance_ledger.models.transaction import (
    BalanceSummary,
    Transaction,
    TransactionCategory,
    TransactionKind,
    TransactionPatch,
    ValidationIssue,
)
from finance_ledger.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)


class TestTransactionModel:
    """Tests for the Transaction model."""
    
    def test_transaction_creation(self):
        """Test Transaction model creation."""
        tx = Transaction(
            id=1,
            kind=TransactionKind.INCOME,
            amount=Decimal("100.00"),
            description="Salary",
            category=TransactionCategory.SALARY,
        )
        assert tx.id == 1
        assert tx.amount == Decimal("100.00")
        assert tx.category == TransactionCategory.SALARY
    
    def test_transaction_accepts_tags(self):
        """Kind and category can be given as their wire tags."""
        tx = Transaction(id=2, kind="expense", amount="30", description="Lunch", category="food")
        assert tx.kind is TransactionKind.EXPENSE
        assert tx.category is TransactionCategory.FOOD
    
    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        tx = Transaction(id=1, kind="income", amount="1", description="  Salary  ")
        assert tx.description == "Salary"
    
    @pytest.mark.parametrize("amount", ["0", "-5", "NaN", "Infinity"])
    def test_transaction_rejects_non_positive_or_non_finite_amount(self, amount):
        """Test that zero, negative and non-finite amounts are rejected."""
        with pytest.raises(PydanticValidationError):
            Transaction(id=1, kind="income", amount=amount, description="Bad")
    
    def test_transaction_rejects_blank_description(self):
        with pytest.raises(PydanticValidationError):
            Transaction(id=1, kind="income", amount="5", description="   ")
    
    def test_transaction_is_frozen(self):
        tx = Transaction(id=1, kind="income", amount="5", description="x")
        with pytest.raises(PydanticValidationError):
            tx.amount = Decimal("6")
    
    def test_signed_amount(self):
        income = Transaction(id=1, kind="income", amount="5", description="in")
        expense = Transaction(id=2, kind="expense", amount="5", description="out")
        assert income.signed_amount == Decimal("5")
        assert expense.signed_amount == Decimal("-5")
    
    def test_apply_patch_keeps_id_and_unpatched_fields(self):
        """Only explicitly set patch fields change."""
        tx = Transaction(
            id=7, kind="expense", amount="12.50", description="Taxi", category="transport"
        )
        updated = tx.apply(TransactionPatch(amount=Decimal("15")))
        assert updated.id == 7
        assert updated.amount == Decimal("15")
        assert updated.description == "Taxi"
        assert updated.category is TransactionCategory.TRANSPORT
        assert tx.amount == Decimal("12.50")
    
    def test_apply_patch_can_clear_category(self):
        tx = Transaction(id=7, kind="expense", amount="1", description="x", category="food")
        updated = tx.apply(TransactionPatch(category=None))
        assert updated.category is None


class TestBalanceSummary:
    """Tests for the derived BalanceSummary."""
    
    def test_balance_is_income_minus_expense(self):
        summary = BalanceSummary(
            income_total=Decimal("150"),
            expense_total=Decimal("30"),
            count=2,
        )
        assert summary.balance == Decimal("120")
    
    def test_empty_summary(self):
        summary = BalanceSummary()
        assert summary.balance == Decimal("0")
        assert summary.count == 0


class TestAuditModels:
    """Tests for audit-related models."""
    
    def test_ledger_event_creation(self):
        """Test LedgerEvent model creation."""
        event = LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_CREATED,
            description="Recorded income",
        )
        assert event.event_type == LedgerEventType.TRANSACTION_CREATED
        assert event.severity == AuditSeverity.INFO
    
    def test_ledger_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = LedgerEventBuilder.transaction_created(42, "income", "100")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["transaction_id"] == 42
        assert log_dict["details"]["amount"] == "100"
    
    def test_builder_save_failed_is_error(self):
        event = LedgerEventBuilder.save_failed("disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
    
    def test_builder_id_collision_is_warning(self):
        event = LedgerEventBuilder.id_collision(5, attempt=1)
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"attempt": 1}


class TestEnums:
    """Tests for enums and their wire values."""
    
    def test_kind_tags(self):
        assert TransactionKind.INCOME.value == "income"
        assert TransactionKind.EXPENSE.value == "expense"
    
    def test_all_categories_exist(self):
        """Test that expected categories exist."""
        expected = [
            "salary", "freelance", "investment", "gift", "food", "transport",
            "housing", "utilities", "health", "entertainment", "shopping",
            "education", "other",
        ]
        for cat in expected:
            assert TransactionCategory(cat) is not None
    
    def test_validation_issue_requires_message(self):
        with pytest.raises(PydanticValidationError):
            ValidationIssue(field="amount", issue_type="missing", message="  ")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
