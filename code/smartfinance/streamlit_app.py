# streamlit_app.py
import asyncio
import logging
from typing import List

import plotly.express as px
import streamlit as st
from dotenv import load_dotenv

from smartfinance.ai.advice_client import check_backend_online
from smartfinance.core.models import ChartSlice, FinancialField, FinancialGoal, RiskLevel, Suggestion
from smartfinance.core.prompts import format_currency
from smartfinance.core.wizard import FinancialWizard, WizardStep
from smartfinance.logs import setup_logging

load_dotenv()
setup_logging()
logger = logging.getLogger(__name__)

CHART_COLORS = ["#6366f1", "#ef4444", "#10b981"]
STATUS_BADGES = {"Good": "🟢 Good", "Warning": "🟡 Warning", "Alert": "🔴 Alert"}
STEP_TITLES = {1: "Your Profile", 2: "Focus Areas", 3: "Your Advice"}
WIZARD_KEY = "_wizard"


def get_wizard() -> FinancialWizard:
    ss = st.session_state
    if WIZARD_KEY not in ss:
        ss[WIZARD_KEY] = FinancialWizard()
    return ss[WIZARD_KEY]


def render_step_indicator(wizard: FinancialWizard) -> None:
    current = 2 if wizard.loading else wizard.step.value
    cols = st.columns(len(STEP_TITLES))
    for col, (number, title) in zip(cols, STEP_TITLES.items()):
        marker = "✅" if number < current else ("🔵" if number == current else "⚪")
        col.markdown(f"{marker} **Step {number}**  \n{title}")
    st.progress(current / len(STEP_TITLES))


def render_profile_form(wizard: FinancialWizard) -> None:
    profile = wizard.profile
    st.subheader("Tell us about your finances")
    left, right = st.columns(2)
    age = left.number_input("Age", min_value=1, max_value=120, value=profile.age, step=1)
    income = right.number_input("Monthly income (₹)", min_value=0.0, value=profile.monthly_income, step=1000.0)
    expenses = left.number_input("Monthly expenses (₹)", min_value=0.0, value=profile.monthly_expenses, step=1000.0)
    savings = right.number_input("Current savings (₹)", min_value=0.0, value=profile.current_savings, step=1000.0)
    risks = list(RiskLevel)
    risk = left.selectbox(
        "Risk tolerance", risks, index=risks.index(profile.risk_level), format_func=lambda r: r.value
    )
    goals = list(FinancialGoal)
    goal = right.selectbox(
        "Financial goal", goals, index=goals.index(profile.financial_goal), format_func=lambda g: g.value
    )

    updates = {
        "age": int(age),
        "monthly_income": float(income),
        "monthly_expenses": float(expenses),
        "current_savings": float(savings),
        "risk_level": risk,
        "financial_goal": goal,
    }
    for field, value in updates.items():
        if getattr(profile, field) != value:
            wizard.update_profile(field, value)


def render_topic_selector(wizard: FinancialWizard) -> None:
    st.subheader("Which areas do you want advice on?")
    cols = st.columns(3)
    for idx, topic in enumerate(FinancialField):
        checked = cols[idx % 3].checkbox(topic.value, value=topic in wizard.topics, key=f"topic_{topic.name}")
        if checked != (topic in wizard.topics):
            wizard.toggle_topic(topic)


def render_cash_flow_chart(slices: List[ChartSlice]) -> None:
    fig = px.pie(
        values=[s.value for s in slices],
        names=[s.name for s in slices],
        hole=0.6,
        color_discrete_sequence=CHART_COLORS,
    )
    fig.update_traces(hovertemplate="%{label}: ₹%{value:,.0f}<extra></extra>")
    st.plotly_chart(fig, use_container_width=True)
    st.caption("Monthly Cash Flow Breakdown")


def render_suggestion(suggestion: Suggestion) -> None:
    with st.container(border=True):
        st.markdown(f"**{suggestion.title}**  \n{suggestion.field} · {STATUS_BADGES.get(suggestion.status, suggestion.status)}")
        st.write(suggestion.content)
        st.info(f"Action: {suggestion.action_item}")


def render_results(wizard: FinancialWizard) -> None:
    result = wizard.result
    if result is None:
        return
    with st.container(border=True):
        st.subheader("Financial Snapshot")
        st.write(result.overview)
        render_cash_flow_chart(wizard.cash_flow_breakdown)
        context = wizard.context_breakdown
        if context:
            cols = st.columns(len(context))
            for col, item in zip(cols, context):
                col.metric(item.name, format_currency(item.value))

    st.subheader("Smart Suggestions")
    for suggestion in result.suggestions:
        render_suggestion(suggestion)


def render_footer(wizard: FinancialWizard) -> None:
    if wizard.step is WizardStep.SHOWING_RESULTS:
        return
    back_col, _, next_col = st.columns([1, 2, 1])
    if wizard.step is WizardStep.SELECTING_TOPICS and back_col.button("Back"):
        wizard.back()
        st.rerun()
    label = "Generate Advice" if wizard.step is WizardStep.SELECTING_TOPICS else "Next Step"
    if next_col.button(label, type="primary"):
        if wizard.step is WizardStep.SELECTING_TOPICS:
            with st.spinner(
                f"Analyzing Financial Profile... Checking {len(wizard.topics)} data points against your goal of "
                f'"{wizard.profile.financial_goal.value}".'
            ):
                asyncio.run(wizard.handle_next())
        else:
            asyncio.run(wizard.handle_next())
        st.rerun()


# --- Streamlit UI ----------------------------------------------------------
st.set_page_config(page_title="SmartFinance AI", layout="centered")
wizard = get_wizard()

header_col, reset_col = st.columns([4, 1])
header_col.title("SmartFinance AI")
if wizard.step.value != 1 and not wizard.loading and reset_col.button("Reset"):
    wizard.restart()
    # Checkbox widgets keep their own state; drop it with the topics.
    for topic in FinancialField:
        st.session_state.pop(f"topic_{topic.name}", None)
    st.rerun()

with st.sidebar:
    st.header("Status")
    if st.button("Check advice backend"):
        if check_backend_online():
            st.success("Advice backend reachable.")
        else:
            st.error("Advice backend unreachable. Check ADVICE_BASE_URL and ADVICE_API_KEY.")

render_step_indicator(wizard)
if wizard.error:
    st.error(wizard.error)

if wizard.step is WizardStep.COLLECTING_PROFILE:
    render_profile_form(wizard)
elif wizard.step is WizardStep.SELECTING_TOPICS:
    render_topic_selector(wizard)
elif wizard.step is WizardStep.SHOWING_RESULTS:
    render_results(wizard)

render_footer(wizard)
