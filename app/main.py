"""
Streamlit Frontend for Finance Ledger

This is the composition root and the UI collaborator. It:
1. Builds exactly one LedgerService and loads the stored ledger
2. Collects form input and passes it through untouched
3. Asks for confirmation before deletes
4. Re-renders from the service after every mutating call

The UI never owns the ledger. Streamlit session_state only holds widget
values and the pending-delete prompt.
"""

import asyncio
from typing import Optional

import streamlit as st

from finance_ledger.config import get_settings, validate_all_settings
from finance_ledger.exceptions import (
    CorruptStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from finance_ledger.models.transaction import (
    TransactionCategory,
    TransactionInput,
    TransactionKind,
)
from finance_ledger.orchestrator import LedgerService, create_ledger_service
from finance_ledger.validation import TransactionValidator


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="centered",
)

st.markdown("""
<style>
    .balance-card {
        padding: 20px;
        background-color: #00796B;
        color: #fff;
        border-radius: 10px;
        text-align: center;
        margin-bottom: 20px;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_event_loop() -> asyncio.AbstractEventLoop:
    """One loop for the whole app so the gateway's save lock stays valid."""
    return asyncio.new_event_loop()


def run_async(coro):
    """Helper to run async service calls in Streamlit."""
    return get_event_loop().run_until_complete(coro)


@st.cache_resource
def get_service() -> tuple[LedgerService, Optional[str]]:
    """Create and load the LedgerService (cached for the process)."""
    service = create_ledger_service()
    try:
        run_async(service.load())
    except CorruptStateError as e:
        return service, (
            f"Your saved transactions could not be read and were NOT loaded: {e}. "
            "New entries are kept for this session only and will not be saved "
            "until the file is repaired or removed."
        )
    except PersistenceError as e:
        return service, f"Could not open your saved transactions: {e}"
    return service, None


def _fill_form(kind: TransactionKind, amount: str, description: str, category) -> None:
    """Queue widget values; applied at the top of the next run."""
    st.session_state.form_pending = {
        "form_kind": kind,
        "form_amount": amount,
        "form_description": description,
        "form_category": category,
    }


def _clear_form() -> None:
    _fill_form(TransactionKind.INCOME, "", "", None)


def _apply_pending_form() -> None:
    pending = st.session_state.pop("form_pending", None)
    if pending:
        for key, value in pending.items():
            st.session_state[key] = value


def render_balance(service: LedgerService) -> None:
    summary = service.summary()
    st.markdown(f"""
    <div class="balance-card">
        <div>Total Balance</div>
        <div class="big-number">${summary.balance:,.2f}</div>
    </div>
    """, unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    col1.metric("Income", f"${summary.income_total:,.2f}")
    col2.metric("Expenses", f"${summary.expense_total:,.2f}")

    if service.has_unsaved_changes:
        st.warning("⚠️ Your latest changes are not saved yet.")
        if st.button("Retry save"):
            try:
                run_async(service.retry_save())
                st.rerun()
            except PersistenceError as e:
                st.error(f"Save failed again: {e}")


def render_form(service: LedgerService) -> None:
    """Add/edit form. Submit routing is decided by the service, not here."""
    if "form_kind" not in st.session_state:
        _clear_form()
    _apply_pending_form()

    editing_id = getattr(service.edit_session, "transaction_id", None)
    st.subheader("✏️ Edit Transaction" if editing_id is not None else "➕ Add Transaction")

    with st.form("transaction_form", clear_on_submit=False):
        description = st.text_input(
            "Description", key="form_description", placeholder="Description"
        )
        amount = st.text_input("Amount", key="form_amount", placeholder="Amount")
        kind = st.radio(
            "Type",
            options=list(TransactionKind),
            key="form_kind",
            format_func=lambda k: k.value.title(),
            horizontal=True,
        )
        category = st.selectbox(
            "Category",
            options=[None] + list(TransactionCategory),
            key="form_category",
            format_func=lambda c: "No category" if c is None else c.value.title(),
        )
        submitted = st.form_submit_button(
            "Save Changes" if editing_id is not None else "+ Add Transaction",
            type="primary",
        )

    if editing_id is not None and st.button("Cancel edit"):
        service.cancel()
        _clear_form()
        st.rerun()

    if submitted:
        form = TransactionInput(
            kind=kind,
            amount_text=amount,
            description_text=description,
            category=category,
        )
        try:
            run_async(service.submit(form))
        except ValidationError as e:
            st.error(TransactionValidator.get_user_friendly_summary(e))
            return
        except NotFoundError:
            service.cancel()
            st.error("That transaction was deleted before your edit was saved.")
            return
        except PersistenceError as e:
            st.error(f"Saved in this session, but not to disk: {e}")
        _clear_form()
        st.rerun()


def render_transactions(service: LedgerService) -> None:
    st.subheader("📋 Transactions")

    if not service.transactions:
        st.info("No transactions yet. Add your first one above.")
        return

    pending = st.session_state.get("pending_delete")

    for tx in service.transactions:
        sign = "+" if tx.kind is TransactionKind.INCOME else "-"
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            label = f"**{tx.description}**  \n{sign} ${tx.amount:,.2f}"
            if tx.category is not None:
                label += f" · {tx.category.value.title()}"
            st.markdown(label)
        with col2:
            if st.button("Edit", key=f"edit_{tx.id}"):
                try:
                    current = run_async(service.request_edit(tx.id))
                except NotFoundError:
                    st.error("That transaction no longer exists.")
                else:
                    _fill_form(
                        current.kind,
                        str(current.amount),
                        current.description,
                        current.category,
                    )
                    st.rerun()
        with col3:
            if st.button("Delete", key=f"delete_{tx.id}"):
                st.session_state.pending_delete = tx.id
                st.rerun()

        if pending == tx.id:
            st.warning(f"Delete '{tx.description}'?")
            yes, no = st.columns(2)
            if yes.button("Yes, delete", key=f"confirm_{tx.id}"):
                st.session_state.pending_delete = None
                try:
                    run_async(service.request_delete(tx.id))
                except NotFoundError:
                    pass
                except PersistenceError as e:
                    st.error(f"Deleted in this session, but not on disk: {e}")
                if not service.is_editing:
                    _clear_form()
                st.rerun()
            if no.button("Keep", key=f"keep_{tx.id}"):
                st.session_state.pending_delete = None
                st.rerun()


def render_settings_sidebar() -> None:
    settings = get_settings()
    status = validate_all_settings()
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")
    for name in ("storage", "app"):
        if status.get(name, False):
            st.sidebar.success(f"✅ {name.title()} settings OK")
        else:
            st.sidebar.error(f"❌ {name.title()}: {status.get(f'{name}_error')}")
    if status.get("storage", False):
        st.sidebar.caption(
            f"Backend: {settings.storage.backend} · key: {settings.storage.key}"
        )


def main():
    """Main application entry point."""
    service, load_error = get_service()
    render_settings_sidebar()

    st.title("💰 Finance Tracker")

    if load_error:
        st.error(load_error)

    render_balance(service)
    render_form(service)
    st.markdown("---")
    render_transactions(service)


if __name__ == "__main__":
    main()
