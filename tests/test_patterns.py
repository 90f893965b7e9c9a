"""Tests for candlestick pattern recognition."""

import pytest

from growwta.indicators import detect_patterns
from growwta.models import Candle, CandleSeries

# (open, high, low, close)
BEARISH = (100.0, 101.0, 94.0, 95.0)
BULLISH_ENGULFING = (94.0, 103.0, 93.0, 102.0)
DOWN_CANDLE = (105.0, 106.0, 99.0, 100.0)
UP_CANDLE = (95.0, 101.0, 94.0, 100.0)
HAMMER_SHAPE = (100.0, 101.2, 97.0, 101.0)
SHOOTING_STAR_SHAPE = (100.0, 103.0, 98.8, 99.0)
DOJI = (100.0, 101.0, 99.0, 100.05)
FLAT = (100.0, 100.0, 100.0, 100.0)
SMALL_UP = (100.0, 101.0, 99.0, 100.4)


def create_series(ohlc: list[tuple[float, float, float, float]]) -> CandleSeries:
    return CandleSeries(
        interval=1440,
        candles=tuple(
            Candle(timestamp=1_600_000_000 + i * 86400, open=o, high=h, low=lo, close=c, volume=1000)
            for i, (o, h, lo, c) in enumerate(ohlc)
        ),
    )


def names(scan) -> list[str]:
    return [p.name for p in scan.patterns]


class TestEngulfing:
    def test_bullish_engulfing(self):
        scan = detect_patterns(create_series([BEARISH, BULLISH_ENGULFING]))

        assert "Bullish Engulfing" in names(scan)
        engulfing = next(p for p in scan.patterns if p.name == "Bullish Engulfing")
        assert engulfing.polarity == "bullish"
        assert engulfing.category == "reversal"
        assert engulfing.strength == "strong"
        assert engulfing.position == 1

    def test_bearish_engulfing(self):
        scan = detect_patterns(create_series([
            (95.0, 101.0, 94.0, 100.0),
            (101.0, 102.0, 92.0, 93.0),
        ]))
        assert "Bearish Engulfing" in names(scan)

    def test_smaller_body_does_not_engulf(self):
        scan = detect_patterns(create_series([BEARISH, (94.0, 97.0, 93.5, 96.0)]))
        assert "Bullish Engulfing" not in names(scan)


class TestSingleCandle:
    def test_hammer_after_down_candle(self):
        scan = detect_patterns(create_series([DOWN_CANDLE, HAMMER_SHAPE]))
        assert names(scan) == ["Hammer"]
        assert scan.patterns[0].polarity == "bullish"

    def test_hanging_man_after_up_candle(self):
        scan = detect_patterns(create_series([UP_CANDLE, HAMMER_SHAPE]))
        assert names(scan) == ["Hanging Man"]
        assert scan.patterns[0].polarity == "bearish"

    def test_shooting_star_after_up_candle(self):
        scan = detect_patterns(create_series([UP_CANDLE, SHOOTING_STAR_SHAPE]))
        assert names(scan) == ["Shooting Star"]

    def test_doji(self):
        scan = detect_patterns(create_series([UP_CANDLE, DOJI]))
        assert names(scan) == ["Doji"]
        assert scan.patterns[0].polarity == "neutral"

    def test_long_bearish_candle(self):
        scan = detect_patterns(create_series([SMALL_UP, (100.0, 100.5, 91.5, 92.0)]))
        assert "Long Bearish Candle" in names(scan)

    def test_zero_range_candle_skipped(self):
        scan = detect_patterns(create_series([UP_CANDLE, FLAT]))
        assert scan.patterns == []


class TestScanWindow:
    """
    **Feature: candlestick patterns, Property 12: Bounded scan window**

    *For any* lookback, only the trailing `lookback` candles are classified,
    each against the candle before it.
    """

    def test_only_trailing_candles_scanned(self):
        ohlc = [BEARISH, BULLISH_ENGULFING]
        # Engulfing at index 1, then eight quiet candles
        quiet = [(100.0 + i, 101.0 + i, 99.0 + i, 100.4 + i) for i in range(8)]
        series = create_series(ohlc + quiet)

        scan = detect_patterns(series, lookback=3)

        assert scan.window_start == 7
        assert scan.window_end == 9
        assert all(p.position >= 7 for p in scan.patterns)
        assert "Bullish Engulfing" not in names(scan)

    def test_lookback_covers_whole_series(self):
        scan = detect_patterns(create_series([BEARISH, BULLISH_ENGULFING]), lookback=50)
        assert scan.window_start == 1
        assert "Bullish Engulfing" in names(scan)

    def test_single_candle_series(self):
        scan = detect_patterns(create_series([BEARISH]))
        assert scan.patterns == []

    def test_invalid_lookback(self):
        with pytest.raises(ValueError):
            detect_patterns(create_series([BEARISH, BULLISH_ENGULFING]), lookback=0)

    def test_latest_and_bias(self):
        scan = detect_patterns(create_series([DOWN_CANDLE, HAMMER_SHAPE, DOJI]))

        assert [p.name for p in scan.latest()] == ["Doji", "Hammer"]
        assert scan.bias == "bullish"
