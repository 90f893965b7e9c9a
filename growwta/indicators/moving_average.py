"""Moving averages and MACD.

Outputs are compact: a series computed over ``period`` windows is shorter
than its input by ``period - 1`` and never padded with NaN. Element ``j``
of the output belongs to input index ``j + period - 1``.
"""

from typing import Optional

from growwta.errors import InsufficientDataError
from growwta.models import CandleSeries, IndicatorValue, MACDReading


def _check_period(name: str, values: list[float], period: int) -> None:
    if period < 1:
        raise ValueError(f"{name} period must be >= 1, got {period}")
    if len(values) < period:
        raise InsufficientDataError(name, required=period, available=len(values))


def calculate_sma(values: list[float], period: int) -> list[float]:
    """Calculate Simple Moving Average.

    Args:
        values: List of values (typically close prices)
        period: Number of periods for the moving average

    Returns:
        List of SMA values, one per full window (length n - period + 1).

    Raises:
        InsufficientDataError: If fewer than `period` values are given.
    """
    _check_period("SMA", values, period)

    result = []
    for i in range(period - 1, len(values)):
        window = values[i - period + 1:i + 1]
        result.append(sum(window) / period)

    return result


def calculate_ema(values: list[float], period: int) -> list[float]:
    """Calculate Exponential Moving Average.

    The first EMA is the SMA of the first `period` values; every later
    value applies ``ema = value * k + prev * (1 - k)`` with
    ``k = 2 / (period + 1)``.

    Args:
        values: List of values
        period: Number of periods for the EMA

    Returns:
        List of EMA values starting at the seed (length n - period + 1).
    """
    _check_period("EMA", values, period)

    multiplier = 2 / (period + 1)

    # First EMA is SMA
    result = [sum(values[:period]) / period]

    for i in range(period, len(values)):
        result.append(values[i] * multiplier + result[-1] * (1 - multiplier))

    return result


def calculate_macd(
    closes: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> tuple[list[float], list[float], list[float]]:
    """Calculate MACD (Moving Average Convergence Divergence).

    Args:
        closes: List of close prices
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal line period (default 9)

    Returns:
        Tuple of (macd_line, signal_line, histogram). The MACD line starts
        at input index slow - 1; signal line and histogram start
        signal - 1 entries later.
    """
    if fast >= slow:
        raise ValueError(f"MACD fast period ({fast}) must be shorter than slow period ({slow})")
    if signal < 1:
        raise ValueError(f"MACD signal period must be >= 1, got {signal}")

    required = slow + signal - 1
    if len(closes) < required:
        raise InsufficientDataError("MACD", required=required, available=len(closes))

    fast_ema = calculate_ema(closes, fast)
    slow_ema = calculate_ema(closes, slow)

    # Align the fast EMA on the slow EMA's first index
    offset = slow - fast
    macd_line = [f - s for f, s in zip(fast_ema[offset:], slow_ema)]

    signal_line = calculate_ema(macd_line, signal)
    histogram = [m - s for m, s in zip(macd_line[signal - 1:], signal_line)]

    return macd_line, signal_line, histogram


def detect_crossover(
    line: list[float], reference: list[float]
) -> Optional[str]:
    """Report a cross of `line` over `reference` on the latest step."""
    if len(line) < 2 or len(reference) < 2:
        return None
    prev_diff = line[-2] - reference[-2]
    diff = line[-1] - reference[-1]
    if prev_diff <= 0 < diff:
        return "bullish"
    if prev_diff >= 0 > diff:
        return "bearish"
    return None


def analyze_macd(
    series: CandleSeries,
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDReading:
    """MACD reading with trend and crossover classification."""
    macd_line, signal_line, histogram = calculate_macd(series.closes, fast, slow, signal)

    aligned_macd = macd_line[signal - 1:]
    crossover = detect_crossover(aligned_macd, signal_line)
    hist = histogram[-1]

    if hist > 0:
        trend = "bullish"
    elif hist < 0:
        trend = "bearish"
    else:
        trend = "neutral"

    if crossover == "bullish":
        interpretation = "Bullish crossover: MACD crossed above signal line"
    elif crossover == "bearish":
        interpretation = "Bearish crossover: MACD crossed below signal line"
    elif trend == "bullish":
        interpretation = "Bullish momentum: MACD above signal line"
    elif trend == "bearish":
        interpretation = "Bearish momentum: MACD below signal line"
    else:
        interpretation = "Neutral: MACD on signal line"

    return MACDReading(
        macd=IndicatorValue(name="MACD", value=macd_line[-1], period=slow, series=macd_line),
        signal=IndicatorValue(name="MACD Signal", value=signal_line[-1], period=signal, series=signal_line),
        histogram=IndicatorValue(name="MACD Histogram", value=hist, series=histogram),
        trend=trend,
        crossover=crossover,
        interpretation=interpretation,
    )
