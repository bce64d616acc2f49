import pytest

from grain.planner.assumptions import DEFAULT_RISK_PROFILE
from grain.planner.engine import BudgetInput, Debt, OnboardingProfile
from grain.planner.parsers import coerce_amount, coerce_pct, format_money, parse_amount, round_half_up
from grain.planner.snapshot import SNAPSHOT_VERSION, record_to_snapshot, snapshot_to_record


@pytest.mark.parametrize("raw", [None, "garbage", 42, ["income", 5000]])
def test_non_dict_record_yields_defaults(raw):
    profile, inputs = record_to_snapshot(raw)
    assert profile == OnboardingProfile()
    assert inputs == BudgetInput()


def test_fields_merge_independently():
    profile, inputs = record_to_snapshot(
        {
            "income": "lots",
            "rent": 1800,
            "dining": -40,
            "groceries": 380.5,
            "risk": "reckless",
            "cryptoPct": 25,
            "province": "  ",
            "age": 31.0,
        }
    )
    assert inputs.income == 4000
    assert inputs.fixed.rent == 1800
    assert inputs.fixed.utilities == 180
    assert inputs.variable.dining == 220
    assert inputs.variable.groceries == 380.5
    assert inputs.risk_profile == DEFAULT_RISK_PROFILE
    assert inputs.crypto_cap_pct == 10
    assert profile.province == "Ontario"
    assert profile.age == 31


def test_stored_strings_are_parsed_as_amounts():
    profile, inputs = record_to_snapshot(
        {
            "income": "5,100",
            "rent": "$1,850",
            "dining": "1.5k",
            "ccDebt": "2,400",
            "whatIf": "inf",
            "groceries": "nan",
            "age": "34",
        }
    )
    assert inputs.income == 5100
    assert inputs.fixed.rent == 1850
    assert inputs.variable.dining == 1500
    assert inputs.debts[0].balance == 2400
    assert inputs.what_if_boost == 0
    assert inputs.variable.groceries == 420
    assert profile.age == 34


def test_oversized_integers_keep_defaults():
    _, inputs = record_to_snapshot({"income": 10**400})
    assert inputs.income == 4000


def test_booleans_are_not_numbers():
    _, inputs = record_to_snapshot({"income": True, "whatIf": False})
    assert inputs.income == 4000
    assert inputs.what_if_boost == 0


def test_debt_list_skips_malformed_entries():
    _, inputs = record_to_snapshot(
        {
            "debts": [
                {"label": "Car loan", "balance": 9000, "apr": 7.5},
                {"label": "Broken", "balance": "x", "apr": 3},
                "not a debt",
                {"balance": 100, "apr": 22},
            ]
        }
    )
    assert inputs.debts == (
        Debt(label="Car loan", balance=9000, annual_rate_pct=7.5),
        Debt(label="Debt", balance=100, annual_rate_pct=22),
    )


def test_empty_debt_list_means_no_debt():
    _, inputs = record_to_snapshot({"debts": []})
    assert inputs.debts == ()


def test_legacy_flat_debt_keys():
    _, inputs = record_to_snapshot({"ccDebt": 0, "studentApr": 6})
    assert inputs.debts == (
        Debt(label="Credit card", balance=0, annual_rate_pct=19.99),
        Debt(label="Student loan", balance=8000, annual_rate_pct=6),
    )


def test_round_trip_keeps_values():
    profile = OnboardingProfile(province="Quebec", age=40, primary_goal="Travel Fund")
    inputs = BudgetInput(income=5200, risk_profile="yolo", crypto_cap_pct=7.5, what_if_boost=150)
    record = snapshot_to_record(profile, inputs)
    assert record["version"] == SNAPSHOT_VERSION
    assert record["primaryGoal"] == "Travel Fund"
    assert record["debts"][0] == {"label": "Credit card", "balance": 1200, "apr": 19.99}
    assert record_to_snapshot(record) == (profile, inputs)


def test_restore_over_custom_defaults():
    defaults = (OnboardingProfile(province="Alberta"), BudgetInput(income=6000))
    profile, inputs = record_to_snapshot({"rent": 1500}, defaults=defaults)
    assert profile.province == "Alberta"
    assert inputs.income == 6000
    assert inputs.fixed.rent == 1500


@pytest.mark.parametrize(
    "raw,expected",
    [
        (1200, 1200.0),
        ("1,200", 1200.0),
        ("$2,450.50", 2450.5),
        ("CAD 300", 300.0),
        ("2.5k", 2500.0),
        ("", None),
        ("abc", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_coercion_rejects_invalid_numbers():
    assert coerce_amount(float("nan")) == 0
    assert coerce_amount(float("inf")) == 0
    assert coerce_amount(-5) == 0
    assert coerce_amount("abc") == 0
    assert coerce_amount("400") == 400
    assert coerce_amount("-3", default=None) is None
    assert coerce_pct(55, 0, 10) == 10
    assert coerce_pct("oops", 0, 10) == 0


def test_round_half_up_and_money_format():
    assert round_half_up(404.25) == 404
    assert round_half_up(220.5) == 221
    assert round_half_up(2.5) == 3
    assert format_money(11520) == "$11,520"
    assert format_money(19.99) == "$19.99"
    assert format_money(1200.5) == "$1,200.5"
