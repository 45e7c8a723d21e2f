from typing import Iterable

from .models import FinancialField, UserProfile
from .tools import ordered_topics, savings_capacity


def format_currency(value: float) -> str:
    return f"₹{value:,.0f}"


def build_advice_prompt(profile: UserProfile, topics: Iterable[FinancialField]) -> str:
    topic_labels = [topic.value for topic in ordered_topics(topics)]
    topic_lines = "\n".join(f"- {label}" for label in topic_labels)
    allowed_fields = ", ".join(f'"{label}"' for label in topic_labels)
    return f"""
You are SmartFinance AI, a personal finance advisor.
Analyze the user's financial profile and give practical, specific advice for each selected area.
Keep the tone clear and encouraging. Use the user's numbers when you explain a point.
Give at least one suggestion per selected area, in the same order as the list below.

Rate every suggestion with a status:
- "Good": the user is on track in this area.
- "Warning": something needs attention soon.
- "Alert": a serious gap that should be fixed first.

Return ONLY a JSON object with this shape:
{{
  "overview": "2-3 sentence summary of the user's overall financial health",
  "suggestions": [
    {{
      "field": one of [{allowed_fields}],
      "status": "Good" | "Warning" | "Alert",
      "title": "short headline",
      "content": "explanation tailored to the profile",
      "actionItem": "one concrete next step"
    }}
  ]
}}

User Profile:
- Age: {profile.age}
- Monthly income: {format_currency(profile.monthly_income)}
- Monthly expenses: {format_currency(profile.monthly_expenses)}
- Monthly savings capacity: {format_currency(savings_capacity(profile))}
- Current savings: {format_currency(profile.current_savings)}
- Risk tolerance: {profile.risk_level.value}
- Financial goal: {profile.financial_goal.value}

Selected areas:
{topic_lines}
""".strip()
