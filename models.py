from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from grain.planner.assumptions import DEFAULT_RISK_PROFILE
from grain.planner.engine import (
    BudgetInput,
    Debt,
    FixedExpenses,
    Goal,
    OnboardingProfile,
    RiskProfile,
    VariableExpenses,
)

# Ceiling for any single monthly amount; keeps sums finite.
MAX_AMOUNT = 1_000_000_000


class InputModel(BaseModel):
    # JSON allows Infinity/NaN literals; the calculator only takes finite numbers.
    model_config = ConfigDict(allow_inf_nan=False)


class FixedExpensesIn(InputModel):
    rent: float = Field(2000, ge=0, le=MAX_AMOUNT)
    utilities: float = Field(180, ge=0, le=MAX_AMOUNT)
    insurance: float = Field(120, ge=0, le=MAX_AMOUNT)
    subscriptions: float = Field(45, ge=0, le=MAX_AMOUNT)


class VariableExpensesIn(InputModel):
    transport: float = Field(160, ge=0, le=MAX_AMOUNT)
    groceries: float = Field(420, ge=0, le=MAX_AMOUNT)
    dining: float = Field(220, ge=0, le=MAX_AMOUNT)
    other: float = Field(120, ge=0, le=MAX_AMOUNT)


class DebtIn(InputModel):
    label: str = "Debt"
    balance: float = Field(0, ge=0, le=MAX_AMOUNT)
    annualRatePct: float = Field(0, ge=0, le=MAX_AMOUNT)


class BudgetIn(InputModel):
    income: float = Field(4000, ge=0, le=MAX_AMOUNT)
    fixedExpenses: FixedExpensesIn = Field(default_factory=FixedExpensesIn)
    variableExpenses: VariableExpensesIn = Field(default_factory=VariableExpensesIn)
    # None means "use the onboarding defaults"
    debts: Optional[List[DebtIn]] = None
    riskProfile: RiskProfile = DEFAULT_RISK_PROFILE
    cryptoCapPct: float = Field(0, ge=0, le=10)
    whatIfBoost: float = Field(0, ge=0, le=MAX_AMOUNT)

    def to_input(self) -> BudgetInput:
        f = self.fixedExpenses
        v = self.variableExpenses
        kwargs = {}
        if self.debts is not None:
            kwargs["debts"] = tuple(
                Debt(label=d.label, balance=d.balance, annual_rate_pct=d.annualRatePct)
                for d in self.debts
            )
        return BudgetInput(
            income=self.income,
            fixed=FixedExpenses(
                rent=f.rent, utilities=f.utilities, insurance=f.insurance, subscriptions=f.subscriptions
            ),
            variable=VariableExpenses(
                transport=v.transport, groceries=v.groceries, dining=v.dining, other=v.other
            ),
            risk_profile=self.riskProfile,
            crypto_cap_pct=self.cryptoCapPct,
            what_if_boost=self.whatIfBoost,
            **kwargs,
        )


class GoalIn(InputModel):
    id: int
    name: str
    targetAmount: float = Field(gt=0, le=MAX_AMOUNT)
    savedAmount: float = Field(0, ge=0, le=MAX_AMOUNT)

    def to_goal(self) -> Goal:
        return Goal(id=self.id, name=self.name, target_amount=self.targetAmount, saved_amount=self.savedAmount)


class ProfileIn(InputModel):
    province: str = "Ontario"
    age: int = Field(27, ge=0)
    primaryGoal: str = "Condo Down Payment"

    def to_profile(self) -> OnboardingProfile:
        return OnboardingProfile(province=self.province, age=self.age, primary_goal=self.primaryGoal)


class PlanRequest(BaseModel):
    budget: BudgetIn = Field(default_factory=BudgetIn)
    # None means "use the demo goals"
    goals: Optional[List[GoalIn]] = None


class ContextRequest(PlanRequest):
    mode: Literal["dashboard", "onboarding"] = "dashboard"
    profile: ProfileIn = Field(default_factory=ProfileIn)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    context: Optional[str] = None


class ChatReply(BaseModel):
    reply: str
