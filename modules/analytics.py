# modules/analytics.py

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from config import (
    WEEKDAY_LABELS, HOURS, MOMENTUM_WINDOW, NUM_PRICE_ZONES,
    HIGH_VOLATILITY_PCT, MODERATE_VOLATILITY_PCT, VOLATILITY_FALLBACK_BASE,
    TREND_BAND_PCT, TREND_TEXT
)
from modules.diagnostics import DiagnosticSink, print_diagnostic
from modules.errors import DegenerateRangeError, EmptyDatasetError
from modules.models import (
    AnalyticsReport, IntradayStats, PricePattern, PriceZone, Record
)
from modules.record_set import SourceReader, build_record_set, read_text_file, sort_records


FRAME_COLUMNS = ['open', 'high', 'low', 'close', 'volume', 'hour', 'weekday']


# ─────────────────────────────────────────────
# SECTION 1: RECORDS → FRAME
# ─────────────────────────────────────────────

def records_to_frame(records: Sequence[Record]) -> pd.DataFrame:
    """
    One row per record, in the order given.
    hour / weekday come from each timestamp in its own UTC offset,
    so they are extracted here rather than through a datetime index.
    """
    rows = [
        {
            'open':    r.open,
            'high':    r.high,
            'low':     r.low,
            'close':   r.close,
            'volume':  r.volume,
            'hour':    r.timestamp.hour,
            'weekday': WEEKDAY_LABELS[r.timestamp.weekday()],
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    return df.astype({
        'open': 'float64', 'high': 'float64', 'low': 'float64', 'close': 'float64',
        'volume': 'int64', 'hour': 'int64', 'weekday': 'object',
    })


# ─────────────────────────────────────────────
# SECTION 2: PRICE EXTREMES
# ─────────────────────────────────────────────

def find_best_buy_price(df: pd.DataFrame) -> float:
    """Lowest low. 0 for an empty frame."""
    if df.empty:
        return 0.0
    return float(df['low'].min())


def find_best_sell_price(df: pd.DataFrame) -> float:
    """Highest high. 0 for an empty frame."""
    if df.empty:
        return 0.0
    return float(df['high'].max())


# ─────────────────────────────────────────────
# SECTION 3: DAY / HOUR STRENGTH & VOLUME
# ─────────────────────────────────────────────

def _bar_strength(df: pd.DataFrame) -> pd.Series:
    # |close - open| per bar; a move that overflows float saturates at the largest float
    return (df['close'] - df['open']).abs().clip(upper=np.finfo('float64').max)


def _sum_by(values: pd.Series, keys: pd.Series) -> Dict:
    # Python ints, so totals are truncated per bar and never wrap at 64 bits
    return {key: sum(int(v) for v in group) for key, group in values.groupby(keys)}


def analyze_trending_days(df: pd.DataFrame) -> Dict[str, int]:
    """Strength score per weekday. All 7 labels are always present."""
    by_day = _sum_by(_bar_strength(df), df['weekday'])
    return {day: by_day.get(day, 0) for day in WEEKDAY_LABELS}


def analyze_trending_hours(df: pd.DataFrame) -> Dict[int, int]:
    """Strength score per hour of day. All 24 hours are always present."""
    by_hour = _sum_by(_bar_strength(df), df['hour'])
    return {hour: by_hour.get(hour, 0) for hour in HOURS}


def find_highest_volume_hours(df: pd.DataFrame) -> Dict[int, int]:
    """Total volume per hour of day. All 24 hours are always present."""
    by_hour = _sum_by(df['volume'], df['hour'])
    return {hour: by_hour.get(hour, 0) for hour in HOURS}


# ─────────────────────────────────────────────
# SECTION 4: MOMENTUM
# ─────────────────────────────────────────────

def classify_momentum(momentum: float) -> str:
    if momentum > 0:
        return 'upward'
    if momentum < 0:
        return 'downward'
    return 'neutral'


def analyze_momentum(df: pd.DataFrame,
                     window: int = MOMENTUM_WINDOW) -> Tuple[Optional[float], Optional[str]]:
    """
    Momentum = close[i] - close[i - window]; the most recent value is reported.
    Needs more than `window` bars, otherwise (None, None).
    """
    if window < 1:
        raise ValueError(f"Momentum window must be >= 1, got {window}")
    if len(df) <= window:
        return None, None

    momentum = float(df['close'].diff(periods=window).iloc[-1])
    return momentum, classify_momentum(momentum)


# ─────────────────────────────────────────────
# SECTION 5: VOLATILITY
# ─────────────────────────────────────────────

def volatility_thresholds(max_close: Optional[float]) -> Tuple[float, float]:
    """
    (high, moderate) thresholds as a fraction of the highest close.
    A missing or non-positive highest close falls back to a base of 1.0.
    """
    base = max_close if max_close is not None and max_close > 0 else VOLATILITY_FALLBACK_BASE
    return base * HIGH_VOLATILITY_PCT, base * MODERATE_VOLATILITY_PCT


def classify_volatility(average_range: float, max_close: Optional[float]) -> str:
    high, moderate = volatility_thresholds(max_close)
    if average_range > high:
        return 'high'
    if average_range > moderate:
        return 'moderate'
    return 'low'


def analyze_volatility(df: pd.DataFrame) -> Tuple[Optional[float], Optional[str]]:
    """
    Volatility here is the mean bar range (high - low) over all bars.
    Assessment tiers are relative to the highest close in the data.
    """
    if df.empty:
        return None, None

    average_range = float((df['high'] - df['low']).mean())
    max_close     = float(df['close'].max())
    return average_range, classify_volatility(average_range, max_close)


# ─────────────────────────────────────────────
# SECTION 6: PRICE ZONES
# ─────────────────────────────────────────────

def price_zone_width(min_low: float, max_high: float, num_zones: int) -> float:
    if num_zones < 1:
        raise ValueError(f"Number of price zones must be >= 1, got {num_zones}")
    width = (max_high - min_low) / num_zones
    if not max_high > min_low or not np.isfinite(width) or width == 0:
        raise DegenerateRangeError(
            f"Price range [{min_low}, {max_high}] cannot be split into zones"
        )
    return width


def identify_price_zones(df: pd.DataFrame,
                         num_zones: int = NUM_PRICE_ZONES) -> Optional[Dict[int, PriceZone]]:
    """
    Close-price histogram over [min low, max high] in equal-width zones.

    The fractional zone index is clamped into [0, num_zones - 1] before
    truncation, so a close sitting exactly on max high lands in the last zone.
    Zones are keyed by integer index; only zones with hits are returned.
    None when there is no data or the range is degenerate, including a
    span too wide to represent as a float.
    """
    if df.empty:
        return None

    min_low  = float(df['low'].min())
    max_high = float(df['high'].max())
    try:
        zone_width = price_zone_width(min_low, max_high, num_zones)
    except DegenerateRangeError:
        return None

    raw_index  = (df['close'].to_numpy() - min_low) / zone_width
    zone_index = np.floor(np.clip(raw_index, 0, num_zones - 1)).astype('int64')
    counts     = np.bincount(zone_index, minlength=num_zones)
    total      = len(df)

    zones = {}
    for index, count in enumerate(counts):
        if count == 0:
            continue
        lower = min_low + index * zone_width
        zones[index] = PriceZone(
            index=index,
            lower=lower,
            upper=min(lower + zone_width, max_high),
            count=int(count),
            importance=int(count) / total,
        )
    return zones


# ─────────────────────────────────────────────
# SECTION 7: INTRADAY
# ─────────────────────────────────────────────

def classify_direction(first_open: float, last_close: float) -> str:
    if last_close > first_open:
        return 'up'
    if last_close < first_open:
        return 'down'
    return 'flat'


def analyze_intraday(df: pd.DataFrame) -> Dict[int, IntradayStats]:
    """
    Per hour of day: mean bar range, total volume, and direction from the
    first bar's open to the last bar's close in chronological order.
    Hours without data are left out.
    """
    if df.empty:
        return {}

    per_hour = (
        df.assign(bar_range=df['high'] - df['low'])
        .groupby('hour', sort=True)
        .agg(
            volatility=('bar_range', 'mean'),
            first_open=('open', 'first'),
            last_close=('close', 'last'),
        )
    )
    volume_by_hour = _sum_by(df['volume'], df['hour'])

    return {
        int(row.Index): IntradayStats(
            volatility=float(row.volatility),
            direction=classify_direction(row.first_open, row.last_close),
            volume=volume_by_hour[row.Index],
        )
        for row in per_hour.itertuples()
    }


# ─────────────────────────────────────────────
# SECTION 8: PATTERNS
# ─────────────────────────────────────────────

def detect_patterns(df: pd.DataFrame) -> List[Tuple[PricePattern, float]]:
    """Placeholder. No chart-pattern recognition is performed."""
    return [(PricePattern.NONE, 0.0)]


# ─────────────────────────────────────────────
# SECTION 9: RECOMMENDATIONS
# ─────────────────────────────────────────────

def classify_trend(first_open: float, last_close: float,
                   band: float = TREND_BAND_PCT) -> str:
    if last_close > first_open * (1 + band):
        return 'upward'
    if last_close < first_open * (1 - band):
        return 'downward'
    return 'flat'


def generate_recommendations(df: pd.DataFrame) -> List[str]:
    """Overall trend from the first open to the last close."""
    if len(df) < 2:
        return ["Insufficient data for basic recommendations."]

    trend = classify_trend(float(df['open'].iloc[0]), float(df['close'].iloc[-1]))
    return [TREND_TEXT[trend]]


def find_top_volume_hour(volume_by_hour: Dict[int, int]) -> Optional[int]:
    """Hour with the most volume; ties go to the earliest hour. None if no volume."""
    if not volume_by_hour:
        return None
    hour = max(sorted(volume_by_hour), key=volume_by_hour.get)
    return hour if volume_by_hour[hour] > 0 else None


def generate_enhanced_recommendations(momentum: Optional[float],
                                      volatility: Optional[float],
                                      highest_volume_hours: Dict[int, int],
                                      max_close: Optional[float]) -> List[str]:
    """
    Momentum sign x (above / below the moderate volatility threshold),
    then the busiest hour. Never returns an empty list.
    """
    recommendations = []

    if momentum is not None and volatility is not None:
        _, moderate = volatility_thresholds(max_close)
        volatile = volatility > moderate

        if momentum > 0 and volatile:
            recommendations.append(
                "Positive momentum in a volatile market suggests potential buy "
                "opportunities, manage risk carefully."
            )
        elif momentum < 0 and volatile:
            recommendations.append(
                "Negative momentum in a volatile market suggests caution or potential "
                "short opportunities, manage risk carefully."
            )
        elif momentum > 0:
            recommendations.append(
                "Positive momentum in a low volatility market might indicate a steady climb."
            )
        elif momentum < 0:
            recommendations.append(
                "Negative momentum in a low volatility market might indicate a steady decline."
            )
        else:
            recommendations.append("Neutral momentum detected.")
    else:
        recommendations.append(
            "Could not generate momentum/volatility recommendations due to missing data."
        )

    top_hour = find_top_volume_hour(highest_volume_hours)
    if top_hour is not None:
        recommendations.append(f"Highest trading volume typically occurs around hour {top_hour}.")
    else:
        recommendations.append("Volume distribution data unavailable or zero.")

    if not recommendations:
        recommendations.append("No specific enhanced recommendations generated based on current rules.")

    return recommendations


# ─────────────────────────────────────────────
# MASTER FUNCTIONS
# ─────────────────────────────────────────────

def analyze_records(records: Sequence[Record],
                    window: int = MOMENTUM_WINDOW,
                    num_zones: int = NUM_PRICE_ZONES) -> AnalyticsReport:
    """
    Run every analysis over one record sequence and fold the results
    into a single report. Each step only reads the frame.
    """
    if not records:
        raise EmptyDatasetError("No records to analyze.")

    df = records_to_frame(sort_records(records))

    highest_volume_hours   = find_highest_volume_hours(df)
    momentum, prediction   = analyze_momentum(df, window=window)
    volatility, assessment = analyze_volatility(df)

    return AnalyticsReport(
        best_buy_price=find_best_buy_price(df),
        best_sell_price=find_best_sell_price(df),
        trending_days=analyze_trending_days(df),
        trending_hours=analyze_trending_hours(df),
        highest_volume_hours=highest_volume_hours,
        price_zones=identify_price_zones(df, num_zones=num_zones),
        momentum=momentum,
        prediction=prediction,
        volatility=volatility,
        volatility_assessment=assessment,
        intraday_patterns=analyze_intraday(df),
        recommendations=generate_recommendations(df),
        enhanced_recommendations=generate_enhanced_recommendations(
            momentum, volatility, highest_volume_hours,
            max_close=float(df['close'].max()),
        ),
        patterns=detect_patterns(df),
        record_count=len(df),
    )


def analyze_sources(sources: List[str],
                    reader: SourceReader = read_text_file,
                    sink: DiagnosticSink = print_diagnostic,
                    window: int = MOMENTUM_WINDOW,
                    num_zones: int = NUM_PRICE_ZONES) -> AnalyticsReport:
    """
    Full pipeline: read + parse every source, then analyze the combined,
    time-sorted records. Raises EmptyDatasetError when nothing parsed.
    """
    record_set = build_record_set(sources, reader=reader, sink=sink)
    return analyze_records(record_set.records, window=window, num_zones=num_zones)
