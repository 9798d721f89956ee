# ── Phase 1: Parsing ──────────────────────────────

# Every source line: "YYYY-MM-DD HH:MM:SS+HH:MM,open,high,low,close,volume"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S%z"
FIELD_SEPARATOR  = ","

PRICE_FIELDS = ['open', 'high', 'low', 'close']
ALL_FIELDS   = ['timestamp'] + PRICE_FIELDS + ['volume']

# Volumes must fit a signed 64-bit integer
MAX_VOLUME = 2 ** 63 - 1

# Prefix for every console line the project prints
LOG_PREFIX = "[TDA]"

# ── Phase 2: Analytics ────────────────────────────

# Indexed by datetime.weekday(), Monday is 0
WEEKDAY_LABELS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
HOURS          = list(range(24))

MOMENTUM_WINDOW = 10   # bars between the two closes compared
NUM_PRICE_ZONES = 10   # equal-width buckets over [min low, max high]

# Volatility tiers, as a fraction of the highest close
HIGH_VOLATILITY_PCT      = 0.05
MODERATE_VOLATILITY_PCT  = 0.02
VOLATILITY_FALLBACK_BASE = 1.0   # used when the highest close is not positive

# First open vs last close band for the overall trend
TREND_BAND_PCT = 0.01

# ── Phase 3: Wording ──────────────────────────────

PREDICTION_TEXT = {
    'upward':   "Positive momentum suggests potential upward movement.",
    'downward': "Negative momentum suggests potential downward movement.",
    'neutral':  "Momentum is neutral.",
}

VOLATILITY_TEXT = {
    'high':     "High volatility environment.",
    'moderate': "Moderate volatility environment.",
    'low':      "Low volatility environment.",
}

TREND_TEXT = {
    'upward':   "Overall trend appears upward.",
    'downward': "Overall trend appears downward.",
    'flat':     "Overall trend appears relatively flat.",
}

# ── Batch run ─────────────────────────────────────

DATA_DIRS          = ["data/", "./"]
INPUT_FILE_PATTERN = "{n}daysBTC.csv"
INPUT_FILE_COUNT   = 7

OUTPUT_DIR = "outputs/"
