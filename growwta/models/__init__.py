"""Data models for groww-ta."""

from growwta.models.candle import Candle, CandleSeries
from growwta.models.indicator import (
    ADXReading,
    BollingerReading,
    IndicatorValue,
    MACDReading,
    RSIReading,
    StochasticReading,
    VolatilityReading,
    WilliamsReading,
)
from growwta.models.levels import (
    FibonacciLevel,
    FibonacciProjection,
    FloorPivots,
    Level,
    PivotPoint,
    SupportResistance,
)
from growwta.models.pattern import Pattern, PatternScan

__all__ = [
    "Candle",
    "CandleSeries",
    "IndicatorValue",
    "RSIReading",
    "StochasticReading",
    "WilliamsReading",
    "MACDReading",
    "BollingerReading",
    "ADXReading",
    "VolatilityReading",
    "PivotPoint",
    "Level",
    "SupportResistance",
    "FibonacciLevel",
    "FibonacciProjection",
    "FloorPivots",
    "Pattern",
    "PatternScan",
]
