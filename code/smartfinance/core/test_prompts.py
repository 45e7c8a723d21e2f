from smartfinance.core.models import FinancialField, FinancialGoal, RiskLevel, UserProfile
from smartfinance.core.prompts import build_advice_prompt, format_currency


def _profile():
    return UserProfile(
        age=34,
        monthly_income=50000,
        monthly_expenses=30000,
        current_savings=10000,
        risk_level=RiskLevel.High,
        financial_goal=FinancialGoal.House,
    )


def test_format_currency():
    assert format_currency(1234567.4) == "₹1,234,567"


def test_prompt_embeds_profile_and_labels():
    prompt = build_advice_prompt(_profile(), {FinancialField.LoansEMI, FinancialField.EmergencyFund})
    assert "- Age: 34" in prompt
    assert "- Monthly income: ₹50,000" in prompt
    assert "- Monthly savings capacity: ₹20,000" in prompt
    assert "- Risk tolerance: High" in prompt
    assert "- Financial goal: Buying a House" in prompt
    assert "- Loans / EMI" in prompt
    assert '"actionItem"' in prompt


def test_prompt_is_deterministic_regardless_of_topic_order():
    first = build_advice_prompt(_profile(), [FinancialField.Crypto, FinancialField.Stocks])
    second = build_advice_prompt(_profile(), {FinancialField.Stocks, FinancialField.Crypto})
    assert first == second
    assert first.index("- Stocks") < first.index("- Crypto")
