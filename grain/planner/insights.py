# grain/planner/insights.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .assumptions import (
    DEBT_REDIRECT_CAP,
    DINING_ALERT,
    DINING_TRIM_SHARE,
    EMERGENCY_FUND_MONTHS,
    HIGH_INTEREST_APR_PCT,
    HOUSING_ALERT_PCT,
    HOUSING_BENCHMARK_PCT,
    LOW_SAVINGS_MONTHLY,
    MAX_INSIGHTS,
    SUBSCRIPTIONS_ALERT,
    TARGET_SAVINGS_RATE,
)
from .engine import BudgetInput, Debt, DerivedPlan, Insight
from .parsers import format_money, format_number, round_half_up


@dataclass(frozen=True)
class InsightRule:
    """One coaching rule: returns an Insight when its threshold trips, else None."""

    key: str
    build: Callable[[DerivedPlan, BudgetInput], Optional[Insight]]


def high_interest_debt(debts: Iterable[Debt]) -> Optional[Debt]:
    for d in debts:
        if d.balance > 0 and d.annual_rate_pct >= HIGH_INTEREST_APR_PCT:
            return d
    return None


def _housing_high(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    housing_pct = inputs.fixed.rent / max(1.0, inputs.income) * 100
    if housing_pct <= HOUSING_ALERT_PCT:
        return None
    trim = round_half_up((housing_pct - HOUSING_BENCHMARK_PCT) / 100 * inputs.income)
    return Insight(
        key="housing_high",
        title="Housing Is High vs Benchmark",
        detail=(
            f"Rent is {round_half_up(housing_pct)}% of income "
            f"(benchmark ~{format_number(HOUSING_BENCHMARK_PCT)}%). "
            f"Consider trimming ~{format_money(trim)}."
        ),
        tag="benchmark",
        cta="What does this mean for me?",
    )


def _high_interest_debt(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    debt = high_interest_debt(inputs.debts)
    if debt is None:
        return None
    redirect = min(DEBT_REDIRECT_CAP, plan.monthly_to_goals)
    interest = round_half_up(debt.annual_rate_pct / 100 / 12 * debt.balance)
    return Insight(
        key="high_interest_debt",
        title="High-Interest Debt First",
        detail=(
            f"{debt.label} APR {format_number(debt.annual_rate_pct)}% detected. "
            f"Redirect {format_money(redirect)} this month to debt payoff, "
            f"avoiding ~{format_money(interest)} interest next month."
        ),
        tag="debt",
        cta="Help me prioritize payments",
    )


def _subscriptions_audit(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    subs = inputs.fixed.subscriptions
    if subs <= SUBSCRIPTIONS_ALERT:
        return None
    return Insight(
        key="subscriptions_audit",
        title="Subscriptions Audit",
        detail=(
            f"Subscriptions total {format_money(subs)}/mo. "
            f"Cancel 1-2 rarely used to save {format_money(subs * 12)}/yr."
        ),
        tag="quick win",
        cta="Which ones should I cancel?",
    )


def _dining_creep(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    dining = inputs.variable.dining
    if dining <= DINING_ALERT:
        return None
    monthly = round_half_up(dining * DINING_TRIM_SHARE)
    yearly = round_half_up(dining * DINING_TRIM_SHARE * 12)
    return Insight(
        key="dining_creep",
        title="Dining Out Creep",
        detail=(
            f"Dining is {format_money(dining)}/mo. "
            f"Trim {round_half_up(DINING_TRIM_SHARE * 100)}% for +{format_money(monthly)}/mo "
            f"({format_money(yearly)}/yr)."
        ),
        tag="behavior",
        cta="Give me a 3-step plan",
    )


def _low_savings_rate(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    if plan.monthly_to_goals >= LOW_SAVINGS_MONTHLY:
        return None
    target = round_half_up(inputs.income * TARGET_SAVINGS_RATE)
    return Insight(
        key="low_savings_rate",
        title="Increase Savings Rate",
        detail=(
            f"Only {format_money(plan.monthly_to_goals)}/mo to goals now. "
            f"Target ~{format_money(target)} "
            f"(~{round_half_up(TARGET_SAVINGS_RATE * 100)}%) if possible."
        ),
        tag="coach",
        cta="How can I get there?",
    )


def _emergency_fund(plan: DerivedPlan, inputs: BudgetInput) -> Optional[Insight]:
    core = plan.monthly_core_spend
    if core <= 0:
        return None
    return Insight(
        key="emergency_fund",
        title="Emergency Fund Target",
        detail=(
            f"Aim for ~{format_money(plan.emergency_fund_target)} "
            f"(~{EMERGENCY_FUND_MONTHS} months core). "
            f"You're spending ~{format_money(core)}/mo on essentials."
        ),
        tag="safety",
        cta="How did you calculate this?",
    )


# Declaration order is priority order.
RULES: List[InsightRule] = [
    InsightRule("housing_high", _housing_high),
    InsightRule("high_interest_debt", _high_interest_debt),
    InsightRule("subscriptions_audit", _subscriptions_audit),
    InsightRule("dining_creep", _dining_creep),
    InsightRule("low_savings_rate", _low_savings_rate),
    InsightRule("emergency_fund", _emergency_fund),
]


def generate_insights(
    plan: DerivedPlan,
    inputs: BudgetInput,
    rules: Optional[Iterable[InsightRule]] = None,
    limit: int = MAX_INSIGHTS,
) -> List[Insight]:
    out: List[Insight] = []
    for rule in RULES if rules is None else rules:
        insight = rule.build(plan, inputs)
        if insight is not None:
            out.append(insight)
    return out[:limit]
