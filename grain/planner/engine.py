from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple

from .assumptions import (
    BASE_INVEST_SHARE_BY_RISK,
    CRYPTO_CAP_MAX_PCT,
    DEBT_OVERRIDE_APR_PCT,
    DEBT_OVERRIDE_PENALTY,
    DEFAULT_RISK_PROFILE,
    EMERGENCY_FUND_MONTHS,
    ETF_SHARE_OF_NON_CRYPTO,
    MIN_INVEST_SHARE,
)
from .parsers import coerce_pct, round_half_up


RiskProfile = Literal["conservative", "balanced", "growth", "yolo"]


@dataclass(frozen=True)
class FixedExpenses:
    rent: float = 2000
    utilities: float = 180
    insurance: float = 120
    subscriptions: float = 45


@dataclass(frozen=True)
class VariableExpenses:
    transport: float = 160
    groceries: float = 420
    dining: float = 220
    other: float = 120


@dataclass(frozen=True)
class Debt:
    label: str
    balance: float = 0.0
    annual_rate_pct: float = 0.0


DEFAULT_DEBTS: Tuple[Debt, ...] = (
    Debt(label="Credit card", balance=1200, annual_rate_pct=19.99),
    Debt(label="Student loan", balance=8000, annual_rate_pct=5.2),
)


@dataclass(frozen=True)
class BudgetInput:
    income: float = 4000
    fixed: FixedExpenses = field(default_factory=FixedExpenses)
    variable: VariableExpenses = field(default_factory=VariableExpenses)
    debts: Tuple[Debt, ...] = DEFAULT_DEBTS
    risk_profile: RiskProfile = DEFAULT_RISK_PROFILE
    crypto_cap_pct: float = 0.0
    what_if_boost: float = 0.0


@dataclass(frozen=True)
class Goal:
    id: int
    name: str
    target_amount: float
    saved_amount: float = 0.0


DEMO_GOALS: Tuple[Goal, ...] = (
    Goal(id=1, name="Condo Down Payment", target_amount=25_000, saved_amount=8_200),
    Goal(id=2, name="Travel Fund", target_amount=3_000, saved_amount=1_200),
)


@dataclass(frozen=True)
class OnboardingProfile:
    province: str = "Ontario"
    age: int = 27
    primary_goal: str = "Condo Down Payment"


@dataclass
class Totals:
    fixed_total: float
    variable_total: float
    spend_total: float
    leftover: float


@dataclass
class Allocation:
    target_share: float
    invest_share: float
    cash_amount: float
    invest_amount: int


@dataclass
class InvestmentMix:
    crypto: int
    etf: int
    bond: float


@dataclass
class GoalProjection:
    goal_id: int
    goal_name: str
    remaining: float
    pct_complete: int
    months_at_current_pace: int
    months_with_boost: int
    months_saved: int


@dataclass
class Insight:
    key: str
    title: str
    detail: str
    tag: str
    cta: Optional[str] = None


@dataclass
class DerivedPlan:
    totals: Totals
    allocation: Allocation
    investment_mix: InvestmentMix
    monthly_to_goals: float
    monthly_to_goals_boosted: float
    goal_projections: List[GoalProjection]
    insights: List[Insight]
    savings_rate_pct: int
    monthly_after_goals: float
    monthly_core_spend: float
    emergency_fund_target: int
    spend_breakdown: List[Dict[str, Any]]
    debt_interest_estimate: int


# ---------- Totals ----------

def compute_totals(inputs: BudgetInput) -> Totals:
    f = inputs.fixed
    v = inputs.variable
    fixed_total = f.rent + f.utilities + f.insurance + f.subscriptions
    variable_total = v.transport + v.groceries + v.dining + v.other
    spend_total = fixed_total + variable_total
    return Totals(
        fixed_total=fixed_total,
        variable_total=variable_total,
        spend_total=spend_total,
        leftover=max(0.0, inputs.income - spend_total),
    )


def monthly_core_spend(inputs: BudgetInput) -> float:
    f = inputs.fixed
    v = inputs.variable
    return f.rent + f.utilities + v.groceries + v.transport + f.insurance


# ---------- Allocation ----------

def has_high_interest_debt(debts: Iterable[Debt], apr_threshold: float = DEBT_OVERRIDE_APR_PCT) -> bool:
    return any(d.balance > 0 and d.annual_rate_pct > apr_threshold for d in debts)


def base_invest_share(risk_profile: str) -> float:
    return BASE_INVEST_SHARE_BY_RISK[risk_profile]


def allocate(leftover: float, risk_profile: str, debts: Iterable[Debt]) -> Allocation:
    share = base_invest_share(risk_profile)
    if has_high_interest_debt(debts):
        share = max(MIN_INVEST_SHARE, share - DEBT_OVERRIDE_PENALTY)

    invest = round_half_up(leftover * share)
    cash = leftover - invest
    realized = invest / leftover if leftover > 0 else share

    return Allocation(
        target_share=share,
        invest_share=realized,
        cash_amount=cash,
        invest_amount=invest,
    )


# ---------- Investment mix ----------

def investment_mix(invest_amount: float, crypto_cap_pct: float) -> InvestmentMix:
    """
    Crypto takes at most the capped percentage; ETFs get 80% of the rest and
    bonds absorb the remainder. The two independent roundings can leave the
    buckets up to 1 unit away from invest_amount.
    """
    cap = coerce_pct(crypto_cap_pct, 0.0, CRYPTO_CAP_MAX_PCT) / 100
    crypto = round_half_up(invest_amount * cap)
    remaining = max(0.0, invest_amount - crypto)
    etf = round_half_up(remaining * ETF_SHARE_OF_NON_CRYPTO)
    bond = max(0.0, remaining - etf)
    return InvestmentMix(crypto=crypto, etf=etf, bond=bond)


# ---------- Goals ----------

def months_to_goal(target: float, saved: float, monthly_rate: float) -> int:
    remaining = max(0.0, target - saved)
    return int(math.ceil(remaining / max(1.0, monthly_rate)))


def project_goal(goal: Goal, monthly_rate: float, boost: float) -> GoalProjection:
    base = months_to_goal(goal.target_amount, goal.saved_amount, monthly_rate)
    boosted = months_to_goal(goal.target_amount, goal.saved_amount, monthly_rate + max(0.0, boost))
    assert boosted <= base, "boosted pace cannot be slower than current pace"

    pct = round_half_up(goal.saved_amount / max(1.0, goal.target_amount) * 100)
    return GoalProjection(
        goal_id=goal.id,
        goal_name=goal.name,
        remaining=max(0.0, goal.target_amount - goal.saved_amount),
        pct_complete=max(0, min(100, pct)),
        months_at_current_pace=base,
        months_with_boost=boosted,
        months_saved=max(0, base - boosted),
    )


def project_goals(goals: Iterable[Goal], monthly_rate: float, boost: float) -> List[GoalProjection]:
    return [project_goal(g, monthly_rate, boost) for g in goals]


# ---------- Plan ----------

def _spend_breakdown(inputs: BudgetInput, allocation: Allocation) -> List[Dict[str, Any]]:
    f = inputs.fixed
    v = inputs.variable
    rows = [
        ("housing", f.rent),
        ("utilities", f.utilities),
        ("insurance", f.insurance),
        ("transport", v.transport),
        ("groceries", v.groceries),
        ("dining", v.dining),
        ("subscriptions", f.subscriptions),
        ("other", v.other),
        ("savings", allocation.cash_amount),
        ("investments", allocation.invest_amount),
    ]
    return [
        {"name": name, "value": value}
        for name, value in rows
        if math.isfinite(value) and value > 0
    ]


def build_plan(inputs: BudgetInput, goals: Iterable[Goal] = DEMO_GOALS) -> DerivedPlan:
    # insights imports engine types
    from .insights import generate_insights, high_interest_debt

    totals = compute_totals(inputs)
    allocation = allocate(totals.leftover, inputs.risk_profile, inputs.debts)
    mix = investment_mix(allocation.invest_amount, inputs.crypto_cap_pct)

    monthly_to_goals = allocation.cash_amount + allocation.invest_amount
    boost = max(0.0, inputs.what_if_boost)
    projections = project_goals(goals, monthly_to_goals, boost)

    core = monthly_core_spend(inputs)
    debt = high_interest_debt(inputs.debts)
    interest = 0
    if debt is not None:
        interest = max(0, round_half_up(debt.annual_rate_pct / 100 / 12 * debt.balance))

    plan = DerivedPlan(
        totals=totals,
        allocation=allocation,
        investment_mix=mix,
        monthly_to_goals=monthly_to_goals,
        monthly_to_goals_boosted=monthly_to_goals + boost,
        goal_projections=projections,
        insights=[],
        savings_rate_pct=round_half_up(monthly_to_goals / max(1.0, inputs.income) * 100),
        monthly_after_goals=max(0.0, totals.leftover - monthly_to_goals),
        monthly_core_spend=core,
        emergency_fund_target=round_half_up(core * EMERGENCY_FUND_MONTHS),
        spend_breakdown=_spend_breakdown(inputs, allocation),
        debt_interest_estimate=interest,
    )
    plan.insights = generate_insights(plan, inputs)
    return plan


def plan_to_dict(plan: DerivedPlan) -> Dict[str, Any]:
    t = plan.totals
    a = plan.allocation
    m = plan.investment_mix
    return {
        "totals": {
            "fixedTotal": t.fixed_total,
            "variableTotal": t.variable_total,
            "spendTotal": t.spend_total,
            "leftover": t.leftover,
        },
        "allocation": {
            "targetShare": a.target_share,
            "investShare": a.invest_share,
            "investSharePct": round_half_up(min(1.0, max(0.0, a.invest_share)) * 100),
            "cashAmount": a.cash_amount,
            "investAmount": a.invest_amount,
        },
        "investmentMix": {"crypto": m.crypto, "etf": m.etf, "bond": m.bond},
        "monthlyToGoals": plan.monthly_to_goals,
        "monthlyToGoalsBoosted": plan.monthly_to_goals_boosted,
        "goalProjections": [
            {
                "goalId": g.goal_id,
                "goalName": g.goal_name,
                "remaining": g.remaining,
                "pctComplete": g.pct_complete,
                "monthsAtCurrentPace": g.months_at_current_pace,
                "monthsWithBoost": g.months_with_boost,
                "monthsSaved": g.months_saved,
            }
            for g in plan.goal_projections
        ],
        "insights": [
            {"key": i.key, "title": i.title, "detail": i.detail, "tag": i.tag, "cta": i.cta}
            for i in plan.insights
        ],
        "savingsRatePct": plan.savings_rate_pct,
        "monthlyAfterGoals": plan.monthly_after_goals,
        "monthlyCoreSpend": plan.monthly_core_spend,
        "emergencyFundTarget": plan.emergency_fund_target,
        "spendBreakdown": plan.spend_breakdown,
        "debtInterestEstimate": plan.debt_interest_estimate,
    }
