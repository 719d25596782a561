"""
Streamlit Frontend for MicroSpend

Four pages, mirroring the phone app's bottom tabs:
1. Today    - today's total and expenses
2. History  - every expense, grouped by day
3. Add      - record a new expense
4. Settings - default currency, CSV export (behind a short ad)

The UI never talks to storage directly. It calls the flows, which
persist first and then update the shared ExpenseStore.
"""

import asyncio

import streamlit as st

from microspend.core import (
    format_amount,
    format_expense_count,
    format_expense_meta,
    format_expense_title,
)
from microspend.export import ExportError, NothingToExportError
from microspend.models.expense import Category, Currency, Expense
from microspend.orchestrator import (
    PERSISTENCE_FAILED_MESSAGE,
    ExpenseFlow,
    ExportFlow,
    create_app_components,
)
from microspend.services.storage import StorageError


st.set_page_config(
    page_title="MicroSpend",
    page_icon="💸",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .total-card {
        padding: 20px;
        background-color: #f4f6fb;
        border-radius: 16px;
        margin: 10px 0 20px 0;
    }
    .total-amount {
        font-size: 2.5em;
        font-weight: bold;
        letter-spacing: -1px;
        color: #2c3e50;
    }
    .muted {
        color: #8a8f98;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Create and bootstrap application components (cached)."""
    expense_flow, export_flow, store = create_app_components()
    run_async(expense_flow.bootstrap())
    return expense_flow, export_flow, store


def main():
    """Main application entry point."""
    try:
        expense_flow, export_flow, _ = get_components()
    except StorageError as e:
        st.error(f"Couldn't open your expense database: {e}")
        st.stop()

    st.sidebar.title("💸 MicroSpend")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📅 Today", "🕑 History", "➕ Add", "⚙️ Settings"],
        index=0,
    )

    # Screen focus: reload from storage so the lists are never stale
    try:
        run_async(expense_flow.refresh())
    except StorageError:
        st.warning(PERSISTENCE_FAILED_MESSAGE)

    if page == "📅 Today":
        render_today_page(expense_flow)
    elif page == "🕑 History":
        render_history_page(expense_flow)
    elif page == "➕ Add":
        render_add_page(expense_flow)
    elif page == "⚙️ Settings":
        render_settings_page(expense_flow, export_flow)


def render_expense_row(expense: Expense, expense_flow: ExpenseFlow, key_prefix: str):
    """One expense: title, time/category, amount and a delete button."""
    col1, col2, col3 = st.columns([6, 3, 1])
    with col1:
        st.markdown(f"**{format_expense_title(expense)}**")
        st.markdown(
            f"<span class='muted'>{format_expense_meta(expense)}</span>",
            unsafe_allow_html=True,
        )
    with col2:
        st.markdown(f"**{format_amount(expense.amount, expense.currency)}**")
    with col3:
        if st.button("🗑️", key=f"{key_prefix}-delete-{expense.id}", help="Delete"):
            try:
                run_async(expense_flow.delete_expense(expense.id))
                st.rerun()
            except StorageError:
                st.error(PERSISTENCE_FAILED_MESSAGE)


def render_today_page(expense_flow: ExpenseFlow):
    """Render today's total and expense list."""
    st.title("📅 Today")
    state = expense_flow.store.state

    st.markdown(f"""
    <div class="total-card">
        <div class="muted">Today's spending</div>
        <div class="total-amount">{format_amount(state.today_total, state.currency)}</div>
        <div class="muted">{format_expense_count(state.today_count)}</div>
    </div>
    """, unsafe_allow_html=True)

    if not state.today_expenses:
        st.info("No expenses yet. Use ➕ Add to log your first spend.")
        return

    for expense in state.today_expenses:
        render_expense_row(expense, expense_flow, key_prefix="today")
        st.divider()


def render_history_page(expense_flow: ExpenseFlow):
    """Render all expenses, one section per day."""
    st.title("🕑 History")
    state = expense_flow.store.state
    groups = state.history_groups()

    if not groups:
        st.info("Your past expenses will appear here.")
        return

    for group in groups:
        col1, col2 = st.columns([3, 1])
        with col1:
            st.subheader(group.label)
        with col2:
            st.markdown(f"**{format_amount(group.total, state.currency)}**")
        for expense in group.expenses:
            render_expense_row(expense, expense_flow, key_prefix=group.date)
        st.divider()


def render_add_page(expense_flow: ExpenseFlow):
    """Render the add expense form."""
    st.title("➕ Add Expense")
    currency = expense_flow.store.state.currency

    with st.form("add_expense", clear_on_submit=True):
        amount_text = st.text_input(
            f"Amount ({currency.symbol} {currency.value}) *",
            placeholder="0.00",
        )
        note = st.text_input("Note (optional)", placeholder="Coffee, bus fare...")
        category = st.selectbox(
            "Category",
            options=[None] + list(Category),
            format_func=lambda c: "None" if c is None else c.value,
        )
        submitted = st.form_submit_button("Save", type="primary")

    if submitted:
        try:
            expense, message = run_async(
                expense_flow.add_expense(amount_text, note, category)
            )
        except StorageError:
            st.error(PERSISTENCE_FAILED_MESSAGE)
            return

        if expense is None:
            st.error(message)
        else:
            st.success(
                f"Saved {format_amount(expense.amount, expense.currency)} "
                f"{format_expense_title(expense)}"
            )


def render_settings_page(expense_flow: ExpenseFlow, export_flow: ExportFlow):
    """Render currency selection and CSV export."""
    st.title("⚙️ Settings")
    state = expense_flow.store.state

    st.markdown("### Default Currency")
    currencies = list(Currency)
    chosen = st.radio(
        "Currency for new expenses",
        options=currencies,
        index=currencies.index(state.currency),
        format_func=lambda c: f"{c.symbol}  {c.display_label}",
    )
    if chosen != state.currency:
        try:
            run_async(expense_flow.change_currency(chosen))
            st.rerun()
        except StorageError:
            st.error(PERSISTENCE_FAILED_MESSAGE)

    st.markdown("---")
    st.markdown("### Data")
    render_export_section(export_flow)

    st.markdown("---")
    st.markdown("### About")
    st.markdown("**MicroSpend** v1.0.0")


def render_export_section(export_flow: ExportFlow):
    """CSV export behind a short simulated ad."""
    if "export_gate" not in st.session_state:
        st.session_state.export_gate = None
    if "export_result" not in st.session_state:
        st.session_state.export_result = None
    if "export_error" not in st.session_state:
        st.session_state.export_error = None

    if st.session_state.export_error:
        st.error(st.session_state.export_error)
        st.session_state.export_error = None

    if st.session_state.export_gate is None:
        if st.button("⬇️ Export CSV"):
            if not export_flow.can_export():
                st.warning("Nothing to export. Add some expenses first.")
            else:
                st.session_state.export_result = None
                st.session_state.export_gate = export_flow.new_gate()
                st.rerun()
    else:
        gate = st.session_state.export_gate
        st.info("▶️ Watch a short ad to unlock CSV export of all your expenses.")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Cancel"):
                gate.cancel()
                st.session_state.export_gate = None
                st.rerun()
        with col2:
            if st.button("Watch Ad", type="primary"):
                try:
                    with st.spinner("Playing ad…"):
                        result = run_async(export_flow.run(gate=gate))
                    st.session_state.export_result = result
                except NothingToExportError as e:
                    st.session_state.export_error = str(e)
                except ExportError:
                    st.session_state.export_error = (
                        "Export failed. Something went wrong. Please try again."
                    )
                finally:
                    st.session_state.export_gate = None
                st.rerun()

    result = st.session_state.export_result
    if result is not None:
        st.success("Ad completed ✅ Your export is ready.")
        st.download_button(
            "Download expenses.csv",
            data=result.csv_text,
            file_name=result.filename,
            mime=result.mime_type,
        )


if __name__ == "__main__":
    main()
