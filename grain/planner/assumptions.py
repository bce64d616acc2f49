# grain/planner/assumptions.py

# Share of leftover routed to investments, by risk profile.
# "growth" has no distinct tuning yet and mirrors "balanced".
BASE_INVEST_SHARE_BY_RISK = {
    "conservative": 0.30,
    "balanced": 0.55,
    "growth": 0.55,
    "yolo": 0.80,
}

DEFAULT_RISK_PROFILE = "balanced"

# High-interest debt suppresses investing.
DEBT_OVERRIDE_APR_PCT = 10.0
DEBT_OVERRIDE_PENALTY = 0.25
MIN_INVEST_SHARE = 0.15

CRYPTO_CAP_MAX_PCT = 10.0
ETF_SHARE_OF_NON_CRYPTO = 0.8

EMERGENCY_FUND_MONTHS = 4

# Insight thresholds
HOUSING_ALERT_PCT = 35.0
HOUSING_BENCHMARK_PCT = 30.0
HIGH_INTEREST_APR_PCT = 15.0
DEBT_REDIRECT_CAP = 300
SUBSCRIPTIONS_ALERT = 40.0
DINING_ALERT = 200.0
DINING_TRIM_SHARE = 0.2
LOW_SAVINGS_MONTHLY = 500
TARGET_SAVINGS_RATE = 0.2
MAX_INSIGHTS = 5
