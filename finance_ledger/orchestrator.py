"""
Ledger Orchestrator for Finance Ledger

This module ties together all the components and defines the flows the UI
calls into:
1. Submit (form input -> validate -> create or update -> save)
2. Edit (request_edit -> submit | cancel)
3. Delete (confirm -> remove -> save)
4. Balance (pure fold over the current ledger)

DESIGN DECISION: The in-memory ledger is the source of truth for the running
session. A failed save never rolls back a mutation; it is reported to the
caller and remembered as unsaved changes until a later save succeeds.

The UI owns none of this state. It holds one LedgerService, reads
``transactions``/``edit_session``/``compute_balance()`` and re-renders after
every mutating call.
"""

import inspect
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Union

from finance_ledger.audit import AuditLogger
from finance_ledger.config import Settings, get_settings
from finance_ledger.exceptions import (
    DuplicateIdError,
    LedgerError,
    PersistenceError,
    ValidationError,
)
from finance_ledger.ledger import (
    EditSession,
    EditState,
    MonotonicIdGenerator,
    TransactionStore,
)
from finance_ledger.models.audit import LedgerEventBuilder
from finance_ledger.models.transaction import (
    BalanceSummary,
    Transaction,
    TransactionInput,
    TransactionKind,
    TransactionPatch,
)
from finance_ledger.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceGateway,
)
from finance_ledger.validation import TransactionValidator


ConfirmCallback = Callable[[Transaction], Union[bool, Awaitable[bool]]]


class LedgerService:
    """
    Orchestrates validation, CRUD on the store, balance and persistence.

    Flow for a submit:
    1. Validate the raw form input (ValidationError, nothing mutated)
    2. Editing(id) -> update in place; Idle -> insert with a fresh id
    3. Save the whole ledger

    Construct it once at the composition root and pass it to the UI.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        store: Optional[TransactionStore] = None,
        validator: Optional[TransactionValidator] = None,
        id_generator: Optional[MonotonicIdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        max_id_attempts: int = 5,
    ):
        self._gateway = gateway
        self._store = store or TransactionStore()
        self._validator = validator or TransactionValidator()
        self._ids = id_generator or MonotonicIdGenerator()
        self._audit_logger = audit_logger or AuditLogger()
        self._session = EditSession()
        self._max_id_attempts = max_id_attempts
        self._unsaved_changes = False

        existing = self._store.max_id()
        if existing is not None:
            self._ids.observe(existing)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Current ledger in insertion order."""
        return self._store.all()

    @property
    def edit_session(self) -> EditState:
        return self._session.state

    @property
    def is_editing(self) -> bool:
        return self._session.is_editing

    @property
    def has_unsaved_changes(self) -> bool:
        """True if the last save failed and nothing has been saved since."""
        return self._unsaved_changes

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def load(self) -> int:
        """
        Seed the store from persistent storage.

        Returns:
            Number of transactions loaded

        Raises:
            CorruptStateError: stored data unparsable; the store stays empty
            PersistenceError: storage could not be read
        """
        try:
            ledger = await self._gateway.load()
        except LedgerError as e:
            self._audit_logger.log(LedgerEventBuilder.load_failed(str(e)))
            raise

        self._store.replace_all(ledger)
        for tx in ledger:
            self._ids.observe(tx.id)
        self._session.cancel()
        self._unsaved_changes = False

        self._audit_logger.log(
            LedgerEventBuilder.ledger_loaded(len(ledger), self._gateway.key)
        )
        return len(ledger)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def submit(self, form: TransactionInput) -> Transaction:
        """
        Create or update a transaction from form input.

        Returns:
            The created or updated transaction

        Raises:
            ValidationError: input rejected, nothing mutated
            NotFoundError: the transaction being edited no longer exists
            PersistenceError: mutation applied, but not saved
        """
        try:
            patch = self._validator.validate(form)
        except ValidationError as e:
            self._audit_logger.log(LedgerEventBuilder.validation_failed(
                [issue.model_dump() for issue in e.issues]
            ))
            raise

        editing_id = self._session.editing_id
        if editing_id is not None:
            before = self._store.get(editing_id)
            tx = self._store.update(editing_id, patch)
            self._session.complete()
            changed = [
                name for name in ("kind", "amount", "description", "category")
                if getattr(before, name) != getattr(tx, name)
            ]
            self._audit_logger.log(
                LedgerEventBuilder.transaction_updated(tx.id, changed)
            )
        else:
            tx = self._insert_new(patch)
            self._audit_logger.log(LedgerEventBuilder.transaction_created(
                tx.id, tx.kind.value, str(tx.amount)
            ))

        await self._persist()
        return tx

    def _insert_new(self, patch: TransactionPatch) -> Transaction:
        """Insert with a fresh id, retrying on collision."""
        fields = patch.model_dump(exclude_unset=True)
        last_error: Optional[DuplicateIdError] = None
        for attempt in range(1, self._max_id_attempts + 1):
            tx = Transaction(id=self._ids.next_id(), **fields)
            try:
                return self._store.insert(tx)
            except DuplicateIdError as e:
                last_error = e
                self._ids.observe(e.transaction_id)
                self._audit_logger.log(
                    LedgerEventBuilder.id_collision(e.transaction_id, attempt)
                )
        # Only reachable if the id generator keeps handing out used ids
        raise last_error

    async def request_edit(self, transaction_id: int) -> Transaction:
        """
        Enter edit mode for a transaction.

        Returns:
            The transaction, so the UI can pre-fill its inputs

        Raises:
            NotFoundError: no such transaction; the session is unchanged
        """
        tx = self._store.get(transaction_id)
        self._session.begin(transaction_id)
        self._audit_logger.log(LedgerEventBuilder.edit_started(transaction_id))
        return tx

    def cancel(self) -> None:
        """Leave edit mode without changing anything."""
        previous = self._session.cancel()
        if previous is not None:
            self._audit_logger.log(LedgerEventBuilder.edit_cancelled(previous))

    async def request_delete(
        self,
        transaction_id: int,
        confirm: Optional[ConfirmCallback] = None,
    ) -> bool:
        """
        Delete a transaction after confirmation.

        Args:
            transaction_id: Transaction to delete
            confirm: Called with the transaction; may be sync or async.
                None means the caller has already confirmed.

        Returns:
            True if deleted, False if the user declined

        Raises:
            NotFoundError: no such transaction
            PersistenceError: removed from memory, but not saved
        """
        tx = self._store.get(transaction_id)

        if confirm is not None:
            answer = confirm(tx)
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                self._audit_logger.log(
                    LedgerEventBuilder.delete_declined(transaction_id)
                )
                return False

        self._store.remove(transaction_id)
        self._session.discard(transaction_id)
        self._audit_logger.log(LedgerEventBuilder.transaction_deleted(transaction_id))

        await self._persist()
        return True

    async def retry_save(self) -> None:
        """Save the current ledger again, e.g. after a PersistenceError."""
        await self._persist()

    async def _persist(self) -> None:
        try:
            count = await self._gateway.save(self._store.all())
        except LedgerError as e:
            self._unsaved_changes = True
            self._audit_logger.log(LedgerEventBuilder.save_failed(str(e)))
            raise
        self._unsaved_changes = False
        self._audit_logger.log(
            LedgerEventBuilder.ledger_saved(count, self._gateway.key)
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def compute_balance(self) -> Decimal:
        """Income adds, expense subtracts. Pure."""
        balance = Decimal("0")
        for tx in self._store.all():
            balance += tx.signed_amount
        return balance

    def summary(self) -> BalanceSummary:
        """Income and expense totals for the current ledger."""
        income = Decimal("0")
        expense = Decimal("0")
        transactions = self._store.all()
        for tx in transactions:
            if tx.kind is TransactionKind.INCOME:
                income += tx.amount
            else:
                expense += tx.amount
        return BalanceSummary(
            income_total=income,
            expense_total=expense,
            count=len(transactions),
        )


def create_key_value_store(settings: Optional[Settings] = None) -> KeyValueStoreInterface:
    """Build the configured storage backend."""
    storage = (settings or get_settings()).storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(
        storage.path,
        retry_attempts=storage.retry_attempts,
    )


def create_ledger_service(
    store: Optional[KeyValueStoreInterface] = None,
    settings: Optional[Settings] = None,
) -> LedgerService:
    """
    Factory function to create the application's LedgerService.

    Args:
        store: Key-value backend to use. Defaults to the configured one.
        settings: Settings to use. Defaults to get_settings().

    Returns:
        A LedgerService with an empty store; call ``await service.load()``
        before handing it to the UI.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    gateway = PersistenceGateway(
        store or create_key_value_store(settings),
        key=settings.storage.key,
    )
    return LedgerService(
        gateway=gateway,
        validator=TransactionValidator(app_settings),
        max_id_attempts=app_settings.max_id_attempts,
    )
