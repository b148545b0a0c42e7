"""
Core Data Models for Finance Ledger

These models define the strict schemas for all data flowing through the ledger.
They are designed to:
1. Enforce the amount/description rules at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: The sign of a transaction lives in its kind, never in its
amount. Amounts are always strictly positive Decimals.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of money. These values are the literal tags on the wire."""
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionKind.INCOME else -1


class TransactionCategory(str, Enum):
    """
    Supported transaction categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent categorization and keeps the persisted values stable.
    """
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    GIFT = "gift"
    FOOD = "food"
    TRANSPORT = "transport"
    HOUSING = "housing"
    UTILITIES = "utilities"
    HEALTH = "health"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    EDUCATION = "education"
    OTHER = "other"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    The id is assigned once by the ledger service and never reassigned.
    Updates produce a new Transaction with the same id (see ``apply``).
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        ...,
        ge=0,
        description="Unique transaction id"
    )
    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Strictly positive amount"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    category: Optional[TransactionCategory] = Field(
        default=None,
        description="Optional category"
    )

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the kind."""
        return self.amount * self.kind.sign

    def apply(self, patch: "TransactionPatch") -> "Transaction":
        """Return a copy with the patched fields replaced. The id is kept."""
        changes = patch.model_dump(exclude_unset=True)
        return self.model_validate({**self.model_dump(), **changes, "id": self.id})


class TransactionPatch(BaseModel):
    """
    Partial update for a Transaction.

    Only fields that were explicitly set are applied.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Optional[TransactionKind] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[TransactionCategory] = None


class TransactionInput(BaseModel):
    """
    Raw form input as collected by the UI.

    CRITICAL: This is UNTRUSTED data. Nothing here has been parsed yet;
    it must go through the TransactionValidator before reaching the store.
    """

    kind: Union[TransactionKind, str] = Field(
        ...,
        description="Kind selector (enum member or its tag)"
    )
    amount_text: str = Field(
        default="",
        description="Amount exactly as typed"
    )
    description_text: str = Field(
        default="",
        description="Description exactly as typed"
    )
    category: Optional[Union[TransactionCategory, str]] = Field(
        default=None,
        description="Selected category, if any"
    )


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class BalanceSummary(BaseModel):
    """Totals for the current ledger snapshot. Never persisted."""

    income_total: Decimal = Decimal("0")
    expense_total: Decimal = Decimal("0")
    count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def balance(self) -> Decimal:
        return self.income_total - self.expense_total


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    @field_validator('message')
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Issue message cannot be blank")
        return v
