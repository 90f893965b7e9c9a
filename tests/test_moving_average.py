"""Property-based tests for moving averages and MACD.

Tests validate SMA/EMA against a pandas reference implementation.
"""

import pandas as pd
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from growwta.errors import InsufficientDataError
from growwta.indicators import calculate_ema, calculate_macd, calculate_sma
from growwta.indicators.moving_average import analyze_macd, detect_crossover
from growwta.models import Candle, CandleSeries


# Strategy for generating realistic price series
@st.composite
def price_series(draw, min_length: int = 50, max_length: int = 200):
    """Generate a realistic price series with positive values and varied movements."""
    length = draw(st.integers(min_value=min_length, max_value=max_length))

    base_price = draw(st.floats(min_value=50.0, max_value=500.0))

    changes = draw(st.lists(
        st.sampled_from([-0.05, -0.03, -0.02, -0.01, -0.005,
                         0.005, 0.01, 0.02, 0.03, 0.05]),
        min_size=length - 1,
        max_size=length - 1
    ))

    prices = [base_price]
    for change in changes:
        prices.append(max(0.01, prices[-1] * (1 + change)))

    return prices


def create_series(closes: list[float]) -> CandleSeries:
    """Daily candles whose open is the previous close."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(Candle(
            timestamp=1_600_000_000 + i * 86400,
            open=prev,
            high=max(prev, close) * 1.01,
            low=min(prev, close) * 0.99,
            close=close,
            volume=100000,
        ))
        prev = close
    return CandleSeries(interval=1440, candles=tuple(candles))


class TestSMA:
    """
    **Feature: moving averages, Property 1: SMA window alignment**

    *For any* series of n values and period p <= n, the SMA has n - p + 1
    values, each the mean of its window.
    """

    @given(prices=price_series(min_length=20, max_length=120), period=st.integers(1, 20))
    @settings(max_examples=100, deadline=None)
    def test_sma_matches_pandas_rolling(self, prices: list[float], period: int):
        """SMA should equal pandas rolling mean with NaN warm-up removed."""
        ours = calculate_sma(prices, period)
        ref = pd.Series(prices).rolling(period).mean().dropna().tolist()

        assert len(ours) == len(prices) - period + 1
        assert ours == pytest.approx(ref, rel=1e-9)

    def test_sma_known_values(self):
        assert calculate_sma([1, 2, 3, 4, 5], 3) == [2.0, 3.0, 4.0]

    def test_sma_period_equal_to_length(self):
        assert calculate_sma([2.0, 4.0, 6.0], 3) == [4.0]

    def test_sma_insufficient_data(self):
        with pytest.raises(InsufficientDataError) as exc:
            calculate_sma([1.0, 2.0], 3)
        assert exc.value.required == 3
        assert exc.value.available == 2

    def test_sma_rejects_zero_period(self):
        with pytest.raises(ValueError):
            calculate_sma([1.0, 2.0], 0)


class TestEMA:
    """
    **Feature: moving averages, Property 2: EMA seeded with SMA**

    *For any* series, the first EMA value is the SMA of the first p values
    and later values follow the recursive smoothing.
    """

    @given(prices=price_series(min_length=30, max_length=150), period=st.integers(2, 26))
    @settings(max_examples=100, deadline=None)
    def test_ema_matches_pandas_ewm(self, prices: list[float], period: int):
        """EMA should match pandas ewm(adjust=False) started from the SMA seed."""
        ours = calculate_ema(prices, period)

        seed = sum(prices[:period]) / period
        seeded = pd.Series([seed] + prices[period:])
        ref = seeded.ewm(span=period, adjust=False).mean().tolist()

        assert len(ours) == len(prices) - period + 1
        assert ours == pytest.approx(ref, rel=1e-9)

    def test_ema_constant_series(self):
        assert calculate_ema([10.0] * 8, 3) == pytest.approx([10.0] * 6)

    def test_ema_known_values(self):
        # k = 0.5 for period 3; seed = 2
        assert calculate_ema([1.0, 2.0, 3.0, 4.0], 3) == pytest.approx([2.0, 3.0])


class TestMACD:
    """
    **Feature: moving averages, Property 3: MACD alignment**

    *For any* series long enough, the histogram equals MACD minus signal
    with both aligned on the signal line's first index.
    """

    @given(prices=price_series(min_length=40, max_length=200))
    @settings(max_examples=100, deadline=None)
    def test_macd_lengths_and_histogram(self, prices: list[float]):
        macd_line, signal_line, histogram = calculate_macd(prices)

        assert len(macd_line) == len(prices) - 26 + 1
        assert len(signal_line) == len(macd_line) - 9 + 1
        assert len(histogram) == len(signal_line)

        for m, s, h in zip(macd_line[8:], signal_line, histogram):
            assert h == pytest.approx(m - s)

    def test_macd_line_is_fast_minus_slow(self):
        prices = [100 + (i % 7) * 1.5 for i in range(60)]
        macd_line, _, _ = calculate_macd(prices)
        fast = calculate_ema(prices, 12)
        slow = calculate_ema(prices, 26)
        assert macd_line[-1] == pytest.approx(fast[-1] - slow[-1])
        assert macd_line[0] == pytest.approx(fast[14] - slow[0])

    def test_macd_minimum_length(self):
        prices = [float(100 + i) for i in range(34)]
        _, signal_line, _ = calculate_macd(prices)
        assert len(signal_line) == 1

        with pytest.raises(InsufficientDataError):
            calculate_macd(prices[:33])

    def test_macd_rejects_fast_not_below_slow(self):
        with pytest.raises(ValueError):
            calculate_macd([100.0] * 50, fast=26, slow=12)

    def test_analyze_macd_uptrend_is_bullish(self):
        # Accelerating rally keeps MACD rising above its signal line
        prices = [100 * (1.002 ** (i * i / 10)) for i in range(60)]
        reading = analyze_macd(create_series(prices))
        assert reading.trend == "bullish"
        assert reading.histogram.value > 0
        assert reading.macd.series[-1] == reading.macd.value


class TestCrossover:
    def test_bullish_cross(self):
        assert detect_crossover([1.0, 3.0], [2.0, 2.0]) == "bullish"

    def test_bearish_cross(self):
        assert detect_crossover([3.0, 1.0], [2.0, 2.0]) == "bearish"

    def test_touch_then_cross(self):
        assert detect_crossover([2.0, 2.5], [2.0, 2.0]) == "bullish"

    def test_no_cross(self):
        assert detect_crossover([3.0, 4.0], [2.0, 2.0]) is None

    def test_too_short(self):
        assert detect_crossover([1.0], [2.0]) is None
