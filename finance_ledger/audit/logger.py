"""
Audit Logger

DESIGN DECISION: Every ledger mutation and persistence round-trip is logged.
This provides:
1. Traceability of balance changes
2. Debugging capability when storage misbehaves
3. A record of unsaved-changes situations

The audit logger:
- Logs through structlog with JSON rendering
- Gracefully handles failures (never breaks a ledger operation)
"""

from typing import Optional

import structlog

from finance_ledger.models.audit import AuditSeverity, LedgerEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Keeps the emitted events in memory as well (bounded), so the UI can show
    recent activity and tests can assert on what happened.
    """

    def __init__(self, history_size: int = 200, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "finance_ledger.audit")
        self._history: list[LedgerEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> tuple[LedgerEvent, ...]:
        return tuple(self._history)

    def log(self, event: LedgerEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written to the log.
        """
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[: len(self._history) - self._history_size]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never take the ledger down with it
            return False
        return True
