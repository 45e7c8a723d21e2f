import pytest

from smartfinance.core.models import FinancialField, UserProfile
from smartfinance.core.tools import (
    cash_flow_breakdown,
    compute_savings_capacity,
    context_breakdown,
    ordered_topics,
    parse_topic,
)


@pytest.mark.parametrize(
    "income, expenses, expected",
    [(50000, 30000, 20000), (30000, 50000, 0), (0, 0, 0), (0, 1200, 0), (1000.5, 0.5, 1000)],
)
def test_savings_capacity_is_never_negative(income, expenses, expected):
    assert compute_savings_capacity(income, expenses) == expected


def test_cash_flow_breakdown_always_has_two_parts():
    profile = UserProfile(monthly_income=20000, monthly_expenses=25000)
    slices = cash_flow_breakdown(profile)
    assert [(s.name, s.value) for s in slices] == [("Expenses", 25000), ("Savings Capacity", 0)]


def test_context_breakdown_keeps_positive_parts():
    profile = UserProfile(monthly_income=50000, monthly_expenses=30000, current_savings=10000)
    slices = context_breakdown(profile)
    assert [(s.name, s.value) for s in slices] == [
        ("Expenses", 30000),
        ("Potential Savings", 20000),
        ("Current Savings (Total)", 10000),
    ]


@pytest.mark.parametrize(
    "income, expenses, savings",
    [(0, 0, 0), (1000, 1000, 0), (1000, 2000, 0), (0, 0, 5000), (100, 0, 0)],
)
def test_context_breakdown_drops_non_positive_parts(income, expenses, savings):
    profile = UserProfile(monthly_income=income, monthly_expenses=expenses, current_savings=savings)
    assert all(s.value > 0 for s in context_breakdown(profile))


def test_ordered_topics_follow_declaration_order():
    topics = {FinancialField.Crypto, FinancialField.Stocks, FinancialField.SIP}
    assert ordered_topics(topics) == [FinancialField.Stocks, FinancialField.SIP, FinancialField.Crypto]


def test_parse_topic_accepts_labels_and_names():
    assert parse_topic("Loans / EMI") is FinancialField.LoansEMI
    assert parse_topic("EmergencyFund") is FinancialField.EmergencyFund
    assert parse_topic(FinancialField.Taxes) is FinancialField.Taxes
    with pytest.raises(ValueError):
        parse_topic("Gold")
