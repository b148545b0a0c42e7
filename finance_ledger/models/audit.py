"""
Audit Models for Finance Ledger

Every ledger mutation and every persistence round-trip is logged.
This provides:
1. Traceability of what changed the balance
2. Debugging information when a save or load fails
3. Ability to reconstruct a session from the log

DESIGN DECISION: Audit events are append-only log records. They are emitted,
never stored in the ledger slot itself.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    DELETE_DECLINED = "delete_declined"
    ID_COLLISION = "id_collision"

    # Edit session
    EDIT_STARTED = "edit_started"
    EDIT_CANCELLED = "edit_cancelled"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    LEDGER_LOADED = "ledger_loaded"
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    transaction_id: Optional[int] = Field(
        default=None,
        description="Transaction this event relates to, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = Field(
        default=None,
        description="Error message if this is an error event"
    )

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to a flat dictionary for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Factory for the events the ledger service emits.

    Keeps event wording in one place so the service stays readable.
    """

    @staticmethod
    def transaction_created(transaction_id: int, kind: str, amount: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_CREATED,
            transaction_id=transaction_id,
            description=f"Recorded {kind} of {amount}",
            details={"kind": kind, "amount": amount},
        )

    @staticmethod
    def transaction_updated(transaction_id: int, changed: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_UPDATED,
            transaction_id=transaction_id,
            description=f"Updated transaction {transaction_id}",
            details={"changed_fields": changed},
        )

    @staticmethod
    def transaction_deleted(transaction_id: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            transaction_id=transaction_id,
            description=f"Deleted transaction {transaction_id}",
        )

    @staticmethod
    def delete_declined(transaction_id: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.DELETE_DECLINED,
            transaction_id=transaction_id,
            description=f"Deletion of transaction {transaction_id} was not confirmed",
        )

    @staticmethod
    def id_collision(transaction_id: int, attempt: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ID_COLLISION,
            severity=AuditSeverity.WARNING,
            transaction_id=transaction_id,
            description=f"Generated id {transaction_id} already in use, retrying",
            details={"attempt": attempt},
        )

    @staticmethod
    def edit_started(transaction_id: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EDIT_STARTED,
            transaction_id=transaction_id,
            description=f"Editing transaction {transaction_id}",
        )

    @staticmethod
    def edit_cancelled(transaction_id: Optional[int]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EDIT_CANCELLED,
            transaction_id=transaction_id,
            description="Edit cancelled",
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Submission rejected with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def ledger_saved(count: int, key: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_SAVED,
            severity=AuditSeverity.DEBUG,
            description=f"Saved {count} transaction(s)",
            details={"count": count, "key": key},
        )

    @staticmethod
    def ledger_loaded(count: int, key: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            description=f"Loaded {count} transaction(s)",
            details={"count": count, "key": key},
        )

    @staticmethod
    def save_failed(error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Ledger could not be saved; changes are only in memory",
            error_message=error_message,
        )

    @staticmethod
    def load_failed(error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            description="Ledger could not be loaded",
            error_message=error_message,
        )
