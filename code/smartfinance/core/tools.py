from typing import Iterable, List, Set

from .models import ChartSlice, FinancialField, UserProfile

EXPENSES_LABEL = "Expenses"
SAVINGS_CAPACITY_LABEL = "Savings Capacity"
POTENTIAL_SAVINGS_LABEL = "Potential Savings"
CURRENT_SAVINGS_LABEL = "Current Savings (Total)"


def compute_savings_capacity(monthly_income: float, monthly_expenses: float) -> float:
    return max(0.0, monthly_income - monthly_expenses)


def savings_capacity(profile: UserProfile) -> float:
    return compute_savings_capacity(profile.monthly_income, profile.monthly_expenses)


def cash_flow_breakdown(profile: UserProfile) -> List[ChartSlice]:
    return [
        ChartSlice(name=EXPENSES_LABEL, value=profile.monthly_expenses),
        ChartSlice(name=SAVINGS_CAPACITY_LABEL, value=savings_capacity(profile)),
    ]


def context_breakdown(profile: UserProfile) -> List[ChartSlice]:
    # Mixes a monthly flow with a stock value; only meant as context.
    slices = [
        ChartSlice(name=EXPENSES_LABEL, value=profile.monthly_expenses),
        ChartSlice(name=POTENTIAL_SAVINGS_LABEL, value=savings_capacity(profile)),
        ChartSlice(name=CURRENT_SAVINGS_LABEL, value=profile.current_savings),
    ]
    return [s for s in slices if s.value > 0]


def ordered_topics(topics: Iterable[FinancialField]) -> List[FinancialField]:
    """Return topics in declaration order so prompts stay deterministic."""
    selected: Set[FinancialField] = set(topics)
    return [field for field in FinancialField if field in selected]


def parse_topic(value: FinancialField | str) -> FinancialField:
    if isinstance(value, FinancialField):
        return value
    cleaned = str(value).strip()
    for field in FinancialField:
        if cleaned in (field.value, field.name):
            return field
    raise ValueError(f"Unknown topic: {value!r}")
