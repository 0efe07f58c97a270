"""
Core constants and limits.

Defines sentinels, annualization lookups and scoring parameters shared by
the metrics engine.
"""

# Sentinels returned when a ratio has a positive numerator and no risk
RATIO_SENTINEL = 999.9999  # Profit factor, Sterling, Burke
COLLABORATOR_RATIO_SENTINEL = 999.999999  # Sortino, Omega, Calmar

# Annualization
DEFAULT_ANNUALIZATION_FACTOR = 252  # Fallback when the interval cannot be read
DAYS_PER_YEAR = 365
# (max interval minutes, periods per year), checked in order
ANNUALIZATION_TABLE: tuple[tuple[int, int], ...] = (
    (1, 525600),
    (5, 105120),
    (15, 35040),
    (30, 17520),
    (60, 8760),
    (240, 2190),
    (360, 1460),
    (720, 730),
    (1440, 365),
    (10080, 52),
)
MONTHLY_ANNUALIZATION_FACTOR = 12

# Value-at-Risk quantiles
VAR_95_QUANTILE = 0.05
VAR_99_QUANTILE = 0.01

# Minimum sample sizes
MIN_KURTOSIS_POINTS = 4
MIN_SKEWNESS_POINTS = 3

# Risk-adjusted return weights
RISK_ADJUSTED_VOLATILITY_WEIGHT = 0.4
RISK_ADJUSTED_DRAWDOWN_WEIGHT = 0.4
RISK_ADJUSTED_DOWNSIDE_WEIGHT = 0.2

# Fee Constants
DEFAULT_FEE_RATIO = 0.001  # 0.1% per side

# Comprehensive score
MAX_SCORE = 10.0
MIN_SCORE = 0.0
SCORE_WEIGHTS = {
    "return": 0.35,
    "core_risk": 0.25,
    "advanced_risk": 0.20,
    "trade_quality": 0.12,
    "stability": 0.08,
}
LOW_RETURN_THRESHOLD = 0.01  # Annualized return below 1% caps the score
LOW_RETURN_SCORE_CAP = 3.0
MODEST_RETURN_THRESHOLD = 0.05  # Annualized return below 5%
MODEST_RETURN_SCORE_CAP = 6.0

# Trade count band considered statistically meaningful
IDEAL_MIN_TRADES = 10
IDEAL_MAX_TRADES = 100
MAX_SCORED_TRADES = 500
