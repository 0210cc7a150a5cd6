"""
Streamlit Frontend for Personal Finance Advisor

This is the screen the user works with every day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. One screen at a time, chosen by the session's router
3. Every action answered by a short status message
4. No hidden actions

The UI never talks to storage. It renders an AppState snapshot and
hands user actions to the FinanceSession as intents.
"""

import asyncio
import html
from datetime import date

import streamlit as st

from finance_advisor.config import validate_all_settings
from finance_advisor.models import TransactionType
from finance_advisor.models.category import categories_for
from finance_advisor.orchestrator import FinanceSession, create_app_components
from finance_advisor.state import AppState, Screen, StatusLevel


# Page configuration
st.set_page_config(
    page_title="Personal Finance Advisor",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)

DARK_MODE_CSS = """
<style>
    .stApp { background-color: #1a202c; color: #e2e8f0; }
    .big-number { color: #e2e8f0; }
    .success-box, .error-box, .info-box { color: #1a202c; }
</style>
"""

STATUS_BOX_CLASS = {
    StatusLevel.SUCCESS: "success-box",
    StatusLevel.INFO: "info-box",
    StatusLevel.ERROR: "error-box",
}

STATUS_REFRESH_SECONDS = 1

NAVIGATION = [
    ("📊 Dashboard", Screen.DASHBOARD),
    ("➕ Add Transaction", Screen.ADD_TRANSACTION),
    ("🎯 Budget Planner", Screen.BUDGET_PLANNER),
    ("👤 Profile", Screen.USER_PROFILE),
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> FinanceSession:
    """Get or create the finance session (cached)."""
    session = create_app_components()
    run_async(session.sign_in())
    return session


def main():
    """Main application entry point."""
    session = get_components()

    render_sidebar(session)

    state = session.snapshot()
    if state.dark_mode:
        st.markdown(DARK_MODE_CSS, unsafe_allow_html=True)

    st.title("💰 Personal Finance Advisor")
    if state.user_name:
        st.markdown(f"Welcome back, **{state.user_name}**!")

    render_status(session)

    if not state.is_ready:
        st.info("Loading application...")
        if st.button("🔄 Retry"):
            run_async(session.sign_in())
            st.rerun()
        return

    if state.screen == Screen.ADD_TRANSACTION:
        render_add_transaction_page(session, state)
    elif state.screen == Screen.BUDGET_PLANNER:
        render_budget_page(session, state)
    elif state.screen == Screen.USER_PROFILE:
        render_profile_page(session, state)
    else:
        render_dashboard(session, state)


def render_sidebar(session: FinanceSession):
    st.sidebar.title("💰 Finance Advisor")
    st.sidebar.markdown("---")

    for label, screen in NAVIGATION:
        if st.sidebar.button(label, key=f"nav_{screen.value}"):
            session.navigate(screen)
            st.rerun()

    st.sidebar.markdown("---")
    if st.sidebar.toggle("🌙 Dark mode", value=session.dark_mode) != session.dark_mode:
        session.toggle_dark_mode()
        st.rerun()

    if session.identity:
        st.sidebar.caption(f"User ID: {session.identity}")

    with st.sidebar.expander("⚙️ Connection Status"):
        status = validate_all_settings()
        for name, key in [("App settings", "app"), ("Google Sheets", "google_sheets")]:
            if status.get(key, False):
                st.success(f"✅ {name}")
            else:
                st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")


@st.fragment(run_every=STATUS_REFRESH_SECONDS)
def render_status(session: FinanceSession):
    """Show the current status message, if any. Reruns on its own so expired messages disappear."""
    message = session.notifier.current()
    if message is None:
        return
    st.markdown(f"""
    <div class="{STATUS_BOX_CLASS[message.level]}">
        <p>{html.escape(message.text)}</p>
    </div>
    """, unsafe_allow_html=True)


def render_dashboard(session: FinanceSession, state: AppState):
    """Render the dashboard: totals, this month's spending, advice, history."""
    summary = state.summary

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Total Income**")
        st.markdown(f'<div class="big-number">${summary.total_income:,.2f}</div>', unsafe_allow_html=True)
    with col2:
        st.markdown("**Total Expenses**")
        st.markdown(f'<div class="big-number">${summary.total_expense:,.2f}</div>', unsafe_allow_html=True)
    with col3:
        st.markdown("**Net Savings**")
        st.markdown(f'<div class="big-number">${summary.net_savings:,.2f}</div>', unsafe_allow_html=True)

    st.markdown("---")
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("📅 This Month's Spending")
        if not summary.monthly_spending_by_category:
            st.markdown("No expenses recorded this month.")
        for category, spent in summary.monthly_spending_by_category.items():
            limit = state.budgets.get(category)
            if limit is not None:
                flag = " ⚠️" if spent > limit else ""
                st.markdown(f"- **{category}**: ${spent:,.2f} of ${limit:,.2f}{flag}")
            else:
                st.markdown(f"- **{category}**: ${spent:,.2f}")

    with col2:
        st.subheader("💡 Financial Advice")
        for message in state.advice:
            st.markdown(f"- {message}")

    st.markdown("---")
    st.subheader("🧾 Transaction History")
    if not state.transactions:
        st.info("No transactions yet. Use 'Add Transaction' to record your first one.")
        return

    header = st.columns([2, 2, 3, 2, 4, 1])
    for column, title in zip(header, ["Date", "Type", "Category", "Amount", "Description", ""]):
        column.markdown(f"**{title}**")

    for transaction in state.transactions:
        row = st.columns([2, 2, 3, 2, 4, 1])
        row[0].write(transaction.iso_date)
        row[1].write(transaction.type.value.title())
        row[2].write(transaction.category)
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        row[3].write(f"{sign}${transaction.amount:,.2f}")
        row[4].write(transaction.description or "")
        if row[5].button("🗑️", key=f"delete_{transaction.id}"):
            run_async(session.delete_transaction(transaction.id))
            st.rerun()


def render_add_transaction_page(session: FinanceSession, state: AppState):
    """Render the add-transaction form."""
    st.subheader("➕ Add Transaction")

    transaction_type = st.radio(
        "Type *",
        options=list(TransactionType),
        format_func=lambda t: t.value.title(),
        horizontal=True,
    )

    with st.form("add_transaction"):
        category = st.selectbox(
            "Category *",
            options=list(categories_for(transaction_type, state.custom_categories)),
        )
        amount = st.text_input("Amount *", placeholder="0.00")
        transaction_date = st.date_input("Date *", value=date.today())
        description = st.text_area("Description (optional)")

        col1, col2 = st.columns(2)
        submitted = col1.form_submit_button("✅ Add Transaction", type="primary")
        cancelled = col2.form_submit_button("❌ Cancel")

    if submitted:
        run_async(
            session.add_transaction(
                transaction_type,
                category,
                amount,
                transaction_date,
                description,
            )
        )
        st.rerun()
    if cancelled:
        session.cancel()
        st.rerun()


def render_budget_page(session: FinanceSession, state: AppState):
    """Render the budget planner: one limit per expense category."""
    st.subheader("🎯 Budget Planner")
    st.markdown("Set a monthly limit per category. Leave a field empty or at 0 for no budget.")

    with st.form("budgets"):
        raw_budgets = {}
        columns = st.columns(2)
        for idx, category in enumerate(state.categories.expense):
            current = state.budgets.get(category)
            raw_budgets[category] = columns[idx % 2].text_input(
                category,
                value=str(current) if current is not None else "",
                key=f"budget_{category}",
            )

        col1, col2 = st.columns(2)
        submitted = col1.form_submit_button("💾 Save Budgets", type="primary")
        cancelled = col2.form_submit_button("❌ Cancel")

    if submitted:
        run_async(session.update_budgets(raw_budgets))
        st.rerun()
    if cancelled:
        session.cancel()
        st.rerun()

    st.markdown("---")
    st.markdown("### Add Custom Category")
    col1, col2 = st.columns([3, 1])
    new_category = col1.text_input("New category name", key="new_category")
    if col2.button("➕ Add"):
        run_async(session.add_custom_category(new_category))
        st.rerun()


def render_profile_page(session: FinanceSession, state: AppState):
    """Render the profile form."""
    st.subheader("👤 Profile")

    with st.form("profile"):
        name = st.text_input("Your name", value=state.user_name)
        col1, col2 = st.columns(2)
        submitted = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("❌ Cancel")

    if submitted:
        run_async(session.update_user_name(name))
        st.rerun()
    if cancelled:
        session.cancel()
        st.rerun()


if __name__ == "__main__":
    main()
