# modules/models.py

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


# ─────────────────────────────────────────────
# SECTION 1: INPUT RECORD
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class Record:
    """
    One timestamped OHLCV sample.
    Created once by the parser and never mutated.
    high >= low is not enforced. Syntactically valid bars are kept as-is.
    """
    timestamp: datetime   # timezone-aware
    open: float
    high: float
    low: float
    close: float
    volume: int


# ─────────────────────────────────────────────
# SECTION 2: ANALYTICS BUILDING BLOCKS
# ─────────────────────────────────────────────

class PricePattern(Enum):
    DOUBLE_TOP         = "Double Top"
    DOUBLE_BOTTOM      = "Double Bottom"
    HEAD_AND_SHOULDERS = "Head and Shoulders"
    TRIANGLE           = "Triangle Pattern"
    BREAKOUT           = "Breakout"
    NONE               = "No significant pattern"


@dataclass(frozen=True)
class PriceZone:
    """One bucket of the close-price histogram, keyed by its integer index."""
    index: int
    lower: float
    upper: float
    count: int
    importance: float

    @property
    def label(self) -> str:
        return f"{self.lower:.2f}-{self.upper:.2f}"


@dataclass(frozen=True)
class IntradayStats:
    volatility: float   # mean (high - low) within the hour
    direction: str      # 'up' | 'down' | 'flat'
    volume: int


# ─────────────────────────────────────────────
# SECTION 3: COMPOSITE REPORT
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class AnalyticsReport:
    """
    Terminal output of one analysis call.
    Optional fields are None when there was not enough data, never 0.
    Mappings are read-only views and sequences are tuples, so a report
    cannot be changed after it is built.
    """
    best_buy_price: float
    best_sell_price: float
    trending_days: Mapping[str, int]
    trending_hours: Mapping[int, int]
    highest_volume_hours: Mapping[int, int]
    price_zones: Optional[Mapping[int, PriceZone]]
    momentum: Optional[float]
    prediction: Optional[str]
    volatility: Optional[float]
    volatility_assessment: Optional[str]
    intraday_patterns: Mapping[int, IntradayStats]
    recommendations: Tuple[str, ...]
    enhanced_recommendations: Tuple[str, ...]
    patterns: Tuple[Tuple[PricePattern, float], ...] = ((PricePattern.NONE, 0.0),)
    record_count: int = 0

    def __post_init__(self):
        for name in ('trending_days', 'trending_hours', 'highest_volume_hours',
                     'price_zones', 'intraday_patterns'):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        for name in ('recommendations', 'enhanced_recommendations', 'patterns'):
            object.__setattr__(self, name, tuple(getattr(self, name)))
