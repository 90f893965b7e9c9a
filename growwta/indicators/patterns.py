"""Candlestick pattern recognition over a short trailing window."""

from typing import Optional

from growwta.models import Candle, CandleSeries, Pattern, PatternScan

LONG_BODY_RATIO = 0.6
DOJI_BODY_RATIO = 0.1


def _single_candle_pattern(prev: Candle, cur: Candle, position: int) -> Optional[Pattern]:
    """Classify the shape of `cur`, using `prev` for trend context."""
    body = cur.body_size
    total_range = cur.range

    # Doji - body under 10% of the range
    if body < DOJI_BODY_RATIO * total_range:
        return Pattern(
            name="Doji", polarity="neutral", category="reversal",
            strength="weak", position=position,
        )

    long_lower = cur.lower_shadow > 2 * body and cur.upper_shadow < 0.5 * body
    long_upper = cur.upper_shadow > 2 * body and cur.lower_shadow < 0.5 * body

    # Hammer - after a down candle, long lower shadow, closes up
    if long_lower and prev.is_bearish and cur.is_bullish:
        return Pattern(
            name="Hammer", polarity="bullish", category="reversal",
            strength="moderate", position=position,
        )

    # Hanging Man - hammer shape after an up candle
    if long_lower and prev.is_bullish:
        return Pattern(
            name="Hanging Man", polarity="bearish", category="reversal",
            strength="moderate", position=position,
        )

    # Shooting Star - long upper shadow after an up candle
    if long_upper and prev.is_bullish:
        return Pattern(
            name="Shooting Star", polarity="bearish", category="reversal",
            strength="moderate", position=position,
        )

    if body > LONG_BODY_RATIO * total_range:
        if cur.is_bullish:
            return Pattern(
                name="Long Bullish Candle", polarity="bullish", category="continuation",
                strength="moderate", position=position,
            )
        return Pattern(
            name="Long Bearish Candle", polarity="bearish", category="continuation",
            strength="moderate", position=position,
        )

    return None


def _engulfing_pattern(prev: Candle, cur: Candle, position: int) -> Optional[Pattern]:
    """Two-candle engulfing patterns."""
    if cur.body_size <= prev.body_size:
        return None

    # Bullish Engulfing
    if prev.is_bearish and cur.is_bullish and cur.open < prev.close and cur.close > prev.open:
        return Pattern(
            name="Bullish Engulfing", polarity="bullish", category="reversal",
            strength="strong", position=position,
        )

    # Bearish Engulfing
    if prev.is_bullish and cur.is_bearish and cur.open > prev.close and cur.close < prev.open:
        return Pattern(
            name="Bearish Engulfing", polarity="bearish", category="reversal",
            strength="strong", position=position,
        )

    return None


def detect_patterns(series: CandleSeries, lookback: int = 5) -> PatternScan:
    """Detect candlestick patterns in the last `lookback` candles.

    Each examined candle is compared with the one before it, so the scan
    reads up to lookback + 1 candles. Candles with zero range are skipped.

    Args:
        series: Candle series to scan
        lookback: Number of trailing candles to classify (default 5)

    Returns:
        PatternScan with patterns in encounter order
    """
    if lookback < 1:
        raise ValueError(f"Pattern lookback must be >= 1, got {lookback}")

    n = len(series)
    start = max(1, n - lookback)
    patterns = []

    for i in range(start, n):
        prev, cur = series[i - 1], series[i]
        if cur.range == 0:
            continue

        shape = _single_candle_pattern(prev, cur, i)
        if shape is not None:
            patterns.append(shape)

        engulfing = _engulfing_pattern(prev, cur, i)
        if engulfing is not None:
            patterns.append(engulfing)

    return PatternScan(
        patterns=patterns,
        window_start=start if n > 1 else 0,
        window_end=max(n - 1, 0),
    )
