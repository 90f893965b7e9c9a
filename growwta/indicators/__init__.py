"""Technical indicators module."""

from growwta.indicators.levels import (
    analyze_fibonacci,
    calculate_fibonacci_levels,
    calculate_pivot_points,
    cluster_pivots,
    find_pivots,
    find_support_resistance,
)
from growwta.indicators.moving_average import (
    analyze_macd,
    calculate_ema,
    calculate_macd,
    calculate_sma,
)
from growwta.indicators.oscillators import (
    analyze_rsi,
    analyze_stochastic,
    analyze_williams_r,
    calculate_rsi,
    calculate_stochastic,
    calculate_williams_r,
)
from growwta.indicators.patterns import detect_patterns
from growwta.indicators.trend import analyze_adx, calculate_adx
from growwta.indicators.volatility import (
    analyze_bollinger,
    analyze_volatility,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_historical_volatility,
    calculate_returns,
    calculate_sharpe_ratio,
)

__all__ = [
    "calculate_sma",
    "calculate_ema",
    "calculate_macd",
    "analyze_macd",
    "calculate_rsi",
    "calculate_stochastic",
    "calculate_williams_r",
    "analyze_rsi",
    "analyze_stochastic",
    "analyze_williams_r",
    "calculate_adx",
    "analyze_adx",
    "calculate_returns",
    "calculate_historical_volatility",
    "calculate_atr",
    "calculate_sharpe_ratio",
    "calculate_bollinger_bands",
    "analyze_volatility",
    "analyze_bollinger",
    "find_pivots",
    "cluster_pivots",
    "find_support_resistance",
    "calculate_fibonacci_levels",
    "analyze_fibonacci",
    "calculate_pivot_points",
    "detect_patterns",
]
