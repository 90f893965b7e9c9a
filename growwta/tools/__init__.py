"""Agent tools for groww-ta.

These tools validate a historical-data request, load candles from a
market-data provider and return indicator readings as plain dictionaries.
"""

from growwta.tools.indicators import (
    AVAILABLE_INDICATORS,
    calculate_indicators,
    find_support_resistance,
    get_fibonacci_levels,
    scan_candlestick_patterns,
)

__all__ = [
    "AVAILABLE_INDICATORS",
    "calculate_indicators",
    "find_support_resistance",
    "get_fibonacci_levels",
    "scan_candlestick_patterns",
]
