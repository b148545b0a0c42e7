"""
Submission Validation

DESIGN DECISION: Raw form text is parsed and checked in one place, before the
ledger is touched. All problems are collected, not just the first one, so the
UI can show every field that needs fixing.

Checks:
- kind is a known tag
- amount parses to a finite decimal, strictly positive, below the sanity cap,
  with no more than the configured number of decimal places
- description is non-empty after trimming and not too long
- category, if given, is a known category

IMPORTANT: Validation NEVER silently fixes issues. The only normalization is
trimming surrounding whitespace.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from finance_ledger.config import AppSettings, get_settings
from finance_ledger.exceptions import ValidationError
from finance_ledger.models.transaction import (
    TransactionCategory,
    TransactionInput,
    TransactionKind,
    TransactionPatch,
    ValidationIssue,
)


class TransactionValidator:
    """Turns a TransactionInput into a fully-populated TransactionPatch."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @staticmethod
    def _decimal_places(amount: Decimal) -> int:
        """Digits after the point, not counting trailing zeros."""
        _, digits, exponent = amount.as_tuple()
        significant = "".join(map(str, digits)).rstrip("0")
        exponent += len(digits) - len(significant)
        return max(0, -exponent)

    def _parse_kind(
        self,
        value: Union[TransactionKind, str],
        issues: list[ValidationIssue],
    ) -> Optional[TransactionKind]:
        if isinstance(value, TransactionKind):
            return value
        try:
            return TransactionKind(str(value).strip().lower())
        except ValueError:
            issues.append(ValidationIssue(
                field="kind",
                issue_type="invalid_value",
                message=f"Unknown transaction type: {value!r}",
            ))
            return None

    def _parse_amount(
        self,
        text: str,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        text = (text or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
            ))
            return None

        try:
            amount = Decimal(text)
        except InvalidOperation:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount is not a number: {text!r}",
            ))
            return None

        if not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a finite number",
            ))
            return None

        if amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message="Amount must be greater than zero",
            ))
            return None

        max_amount = Decimal(str(self._settings.max_amount))
        if amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message=f"Amount ({text}) exceeds the maximum of {max_amount:,}",
            ))
            return None

        places = self._decimal_places(amount)
        limit = self._settings.max_decimal_places
        if places > limit:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_precise",
                message=f"Amount has more than {limit} decimal places",
            ))
            return None

        return amount

    def _parse_description(
        self,
        text: str,
        issues: list[ValidationIssue],
    ) -> Optional[str]:
        text = (text or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Please enter a description",
            ))
            return None

        limit = self._settings.max_description_length
        if len(text) > limit:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"Description is longer than {limit} characters",
            ))
            return None

        return text

    def _parse_category(
        self,
        value: Optional[Union[TransactionCategory, str]],
        issues: list[ValidationIssue],
    ) -> Optional[TransactionCategory]:
        if value is None or isinstance(value, TransactionCategory):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        try:
            return TransactionCategory(text)
        except ValueError:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Unknown category: {value!r}",
            ))
            return None

    def validate(self, form: TransactionInput) -> TransactionPatch:
        """
        Parse and check a submission.

        Returns:
            A TransactionPatch with every field set.

        Raises:
            ValidationError: carrying all issues found. Nothing is mutated.
        """
        issues: list[ValidationIssue] = []

        kind = self._parse_kind(form.kind, issues)
        amount = self._parse_amount(form.amount_text, issues)
        description = self._parse_description(form.description_text, issues)
        category = self._parse_category(form.category, issues)

        if issues:
            summary = "; ".join(issue.message for issue in issues)
            raise ValidationError(summary, issues=issues)

        return TransactionPatch(
            kind=kind,
            amount=amount,
            description=description,
            category=category,
        )

    @staticmethod
    def get_user_friendly_summary(error: ValidationError) -> str:
        """Render a ValidationError for display."""
        lines = ["Please fix the following:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
