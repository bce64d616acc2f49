from __future__ import annotations

from typing import List, Sequence

from grain.planner.engine import BudgetInput, DerivedPlan, Goal, OnboardingProfile, compute_totals, months_to_goal
from grain.planner.parsers import format_money, format_number


def _debt_lines(inputs: BudgetInput) -> List[str]:
    return [
        f"{d.label} {format_money(d.balance)} at {format_number(d.annual_rate_pct)}% APR"
        for d in inputs.debts
        if d.balance > 0
    ]


def build_coach_context(inputs: BudgetInput, plan: DerivedPlan, goals: Sequence[Goal]) -> str:
    """
    Plain-text snapshot of the dashboard numbers for the coach's system prompt.
    The first goal is treated as the primary one.
    """
    t = plan.totals
    a = plan.allocation
    lines: List[str] = [
        f"Monthly income: {format_money(inputs.income)}",
        f"Planned spend: {format_money(t.spend_total)}",
        (
            f"Leftover after spend: {format_money(t.leftover)} "
            f"(cushion after goals: {format_money(plan.monthly_after_goals)})"
        ),
        (
            f"Monthly to goals: {format_money(plan.monthly_to_goals)} "
            f"(cash {format_money(a.cash_amount)}, invest {format_money(a.invest_amount)})."
        ),
    ]

    if goals:
        primary = goals[0]
        lines.append(
            f"Primary goal: {primary.name}: {format_money(primary.saved_amount)} "
            f"of {format_money(primary.target_amount)} saved."
        )
        overview = "; ".join(
            f"{g.name}: {format_money(g.saved_amount)} saved of {format_money(g.target_amount)} "
            f"({months_to_goal(g.target_amount, g.saved_amount, plan.monthly_to_goals)} months at current pace)"
            for g in goals
        )
        lines.append(f"Goals overview: {overview}.")

    lines.append(
        f"Risk profile: {inputs.risk_profile}; "
        f"crypto cap {format_number(inputs.crypto_cap_pct)}% of investments."
    )

    debts = _debt_lines(inputs)
    if debts:
        lines.append(f"Debt focus: {'; '.join(debts)}.")
    else:
        lines.append("Debt focus: no unsecured debt currently tracked.")

    if inputs.what_if_boost > 0:
        lines.append(f"What-if boost in play: +{format_money(inputs.what_if_boost)} per month.")
    else:
        lines.append("What-if boost currently $0.")

    return "\n".join(lines)


def build_onboarding_context(profile: OnboardingProfile, inputs: BudgetInput) -> str:
    t = compute_totals(inputs)
    lines = [
        f"Province: {profile.province}",
        f"Age: {profile.age}" if profile.age else "Age not provided.",
        f"Monthly income: {format_money(inputs.income)}",
        f"Fixed costs: {format_money(t.fixed_total)}",
        f"Variable costs: {format_money(t.variable_total)}",
        f"Planned spend total: {format_money(t.spend_total)}",
        f"Leftover after spend: {format_money(t.leftover)}",
        f"Primary goal: {profile.primary_goal}",
        f"Risk profile: {inputs.risk_profile}",
        f"Crypto cap preference: {format_number(inputs.crypto_cap_pct)}%",
    ]
    for d in inputs.debts:
        if d.balance > 0:
            lines.append(
                f"{d.label} balance: {format_money(d.balance)} at {format_number(d.annual_rate_pct)}% APR."
            )
        else:
            lines.append(f"{d.label} balance: $0.")
    return "\n".join(lines)
