# grain/planner/snapshot.py
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from .assumptions import BASE_INVEST_SHARE_BY_RISK, CRYPTO_CAP_MAX_PCT
from .engine import BudgetInput, Debt, FixedExpenses, OnboardingProfile, VariableExpenses
from .parsers import coerce_amount

SNAPSHOT_VERSION = "grain.seed.v1"

FIXED_KEYS = ["rent", "utilities", "insurance", "subscriptions"]
VARIABLE_KEYS = ["transport", "groceries", "dining", "other"]

# Flat debt slots written by the v1 web client.
LEGACY_DEBT_SLOTS = [
    {"label": "Credit card", "balanceKey": "ccDebt", "aprKey": "ccApr"},
    {"label": "Student loan", "balanceKey": "studentLoan", "aprKey": "studentApr"},
]


def _number(v: Any) -> Optional[float]:
    """A usable stored number, or None when the field should fall back to its default."""
    return coerce_amount(v, default=None)


def _text(v: Any) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _restore_debt(raw: Any) -> Optional[Debt]:
    if not isinstance(raw, dict):
        return None
    balance = _number(raw.get("balance"))
    apr = _number(raw.get("apr"))
    if balance is None or apr is None:
        return None
    return Debt(label=_text(raw.get("label")) or "Debt", balance=balance, annual_rate_pct=apr)


def _restore_debts(raw: Dict[str, Any], default: Tuple[Debt, ...]) -> Tuple[Debt, ...]:
    stored = raw.get("debts")
    if isinstance(stored, list):
        restored = [_restore_debt(item) for item in stored]
        return tuple(d for d in restored if d is not None)

    # Legacy flat slots: each slot merges over the matching default debt.
    defaults_by_label = {d.label: d for d in default}
    debts: List[Debt] = []
    touched = False
    for slot in LEGACY_DEBT_SLOTS:
        base = defaults_by_label.get(slot["label"], Debt(label=slot["label"]))
        balance = _number(raw.get(slot["balanceKey"]))
        apr = _number(raw.get(slot["aprKey"]))
        if balance is not None or apr is not None:
            touched = True
        debts.append(
            Debt(
                label=base.label,
                balance=base.balance if balance is None else balance,
                annual_rate_pct=base.annual_rate_pct if apr is None else apr,
            )
        )
    return tuple(debts) if touched else default


def record_to_snapshot(
    raw: Any,
    defaults: Optional[Tuple[OnboardingProfile, BudgetInput]] = None,
) -> Tuple[OnboardingProfile, BudgetInput]:
    """
    Restore (profile, inputs) from a stored flat record.

    Every field is merged independently: a missing or malformed value keeps
    its default instead of rejecting the whole record.
    """
    profile, inputs = defaults or (OnboardingProfile(), BudgetInput())
    if not isinstance(raw, dict):
        return profile, inputs

    province = _text(raw.get("province"))
    age = _number(raw.get("age"))
    primary_goal = _text(raw.get("primaryGoal"))
    profile = OnboardingProfile(
        province=province or profile.province,
        age=profile.age if age is None else int(age),
        primary_goal=primary_goal or profile.primary_goal,
    )

    fixed_updates = {k: _number(raw.get(k)) for k in FIXED_KEYS}
    variable_updates = {k: _number(raw.get(k)) for k in VARIABLE_KEYS}
    fixed = replace(inputs.fixed, **{k: v for k, v in fixed_updates.items() if v is not None})
    variable = replace(inputs.variable, **{k: v for k, v in variable_updates.items() if v is not None})

    risk = raw.get("risk")
    if not (isinstance(risk, str) and risk in BASE_INVEST_SHARE_BY_RISK):
        risk = inputs.risk_profile

    income = _number(raw.get("income"))
    crypto = _number(raw.get("cryptoPct"))
    what_if = _number(raw.get("whatIf"))

    inputs = BudgetInput(
        income=inputs.income if income is None else income,
        fixed=fixed,
        variable=variable,
        debts=_restore_debts(raw, inputs.debts),
        risk_profile=risk,
        crypto_cap_pct=inputs.crypto_cap_pct if crypto is None else min(CRYPTO_CAP_MAX_PCT, crypto),
        what_if_boost=inputs.what_if_boost if what_if is None else what_if,
    )
    return profile, inputs


def snapshot_to_record(profile: OnboardingProfile, inputs: BudgetInput) -> Dict[str, Any]:
    fixed: FixedExpenses = inputs.fixed
    variable: VariableExpenses = inputs.variable
    return {
        "version": SNAPSHOT_VERSION,
        "province": profile.province,
        "age": profile.age,
        "primaryGoal": profile.primary_goal,
        "income": inputs.income,
        **{k: getattr(fixed, k) for k in FIXED_KEYS},
        **{k: getattr(variable, k) for k in VARIABLE_KEYS},
        "debts": [
            {"label": d.label, "balance": d.balance, "apr": d.annual_rate_pct}
            for d in inputs.debts
        ],
        "risk": inputs.risk_profile,
        "cryptoPct": inputs.crypto_cap_pct,
        "whatIf": inputs.what_if_boost,
    }
