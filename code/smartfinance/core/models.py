from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    Low = "Low"
    Medium = "Medium"
    High = "High"


class FinancialGoal(str, Enum):
    House = "Buying a House"
    Car = "Buying a Car"
    Retirement = "Retirement"
    Wealth = "Wealth Creation"
    Education = "Education"


class FinancialField(str, Enum):
    MutualFunds = "Mutual Funds"
    Stocks = "Stocks"
    SIP = "SIP"
    LoansEMI = "Loans / EMI"
    Taxes = "Taxes"
    Insurance = "Insurance"
    EmergencyFund = "Emergency Fund"
    Retirement = "Retirement"
    Crypto = "Crypto"


SuggestionStatus = Literal["Good", "Warning", "Alert"]

# JSON field names are camelCase on the wire; snake_case is still accepted on input.
WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(BaseModel):
    model_config = ConfigDict(**WIRE_CONFIG, validate_assignment=True)

    age: int = Field(gt=0, default=28)
    monthly_income: float = Field(ge=0, default=0.0)
    monthly_expenses: float = Field(ge=0, default=0.0)
    current_savings: float = Field(ge=0, default=0.0)
    risk_level: RiskLevel = RiskLevel.Medium
    financial_goal: FinancialGoal = FinancialGoal.Wealth


class Suggestion(BaseModel):
    model_config = ConfigDict(**WIRE_CONFIG, frozen=True)

    # Free text: the model may answer with labels outside FinancialField.
    field: str
    status: SuggestionStatus
    title: str
    content: str
    action_item: str

    @property
    def topic(self) -> Optional[FinancialField]:
        try:
            return FinancialField(self.field)
        except ValueError:
            return None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    overview: str
    suggestions: List[Suggestion] = []

    @field_validator("overview")
    @classmethod
    def _overview_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("overview must not be empty")
        return value


class ChartSlice(BaseModel):
    name: str
    value: float


class AdviceRequest(BaseModel):
    model_config = WIRE_CONFIG

    profile: UserProfile
    topics: List[FinancialField] = []


class BreakdownResponse(BaseModel):
    model_config = WIRE_CONFIG

    savings_capacity: float
    cash_flow: List[ChartSlice]
    context: List[ChartSlice]


class HealthResponse(BaseModel):
    model_config = WIRE_CONFIG

    status: str
    advice_backend: bool
