"""Property-based tests for RSI, Stochastic and Williams %R."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from growwta.errors import DegenerateInputError, InsufficientDataError
from growwta.indicators import (
    analyze_rsi,
    analyze_stochastic,
    analyze_williams_r,
    calculate_rsi,
    calculate_stochastic,
    calculate_williams_r,
)
from growwta.models import Candle, CandleSeries


@st.composite
def price_series(draw, min_length: int = 30, max_length: int = 150):
    """Generate a realistic price series with positive values and varied movements."""
    length = draw(st.integers(min_value=min_length, max_value=max_length))
    base_price = draw(st.floats(min_value=50.0, max_value=500.0))
    changes = draw(st.lists(
        st.sampled_from([-0.04, -0.02, -0.01, 0.0, 0.01, 0.02, 0.04]),
        min_size=length - 1,
        max_size=length - 1
    ))

    prices = [base_price]
    for change in changes:
        prices.append(prices[-1] * (1 + change))
    return prices


def create_series(closes: list[float], spread: float = 0.01) -> CandleSeries:
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(Candle(
            timestamp=1_600_000_000 + i * 86400,
            open=prev,
            high=max(prev, close) * (1 + spread),
            low=min(prev, close) * (1 - spread),
            close=close,
            volume=50000,
        ))
        prev = close
    return CandleSeries(interval=1440, candles=tuple(candles))


class TestRSIBounds:
    """
    **Feature: oscillators, Property 4: RSI bounded**

    *For any* price series, every RSI value lies in [0, 100] and one value
    is produced per close from index `period` on.
    """

    @given(prices=price_series(), period=st.integers(2, 21))
    @settings(max_examples=100, deadline=None)
    def test_rsi_in_range(self, prices: list[float], period: int):
        if len(prices) < period + 1:
            return
        values = calculate_rsi(prices, period)

        assert len(values) == len(prices) - period
        for val in values:
            assert 0 <= val <= 100, f"RSI value {val} out of range [0, 100]"

    def test_rsi_balanced_moves(self):
        assert calculate_rsi([1.0, 2.0, 1.0], period=2) == pytest.approx([50.0])

    def test_rsi_only_gains(self):
        assert calculate_rsi([float(i) for i in range(1, 20)], 14)[-1] == 100.0

    def test_rsi_only_losses(self):
        assert calculate_rsi([float(i) for i in range(20, 1, -1)], 14)[-1] == pytest.approx(0.0)

    def test_rsi_flat_series(self):
        values = calculate_rsi([100.0] * 20, 14)
        assert values == [100.0] * 6

    def test_rsi_insufficient_data(self):
        with pytest.raises(InsufficientDataError) as exc:
            calculate_rsi([100.0] * 14, 14)
        assert exc.value.required == 15


class TestRSIReading:
    def test_overbought_rally(self):
        prices = [100 * (1.01 ** i) for i in range(30)]
        reading = analyze_rsi(create_series(prices))
        assert reading.zone == "overbought"
        assert reading.rsi.period == 14

    def test_oversold_selloff(self):
        prices = [100 * (0.99 ** i) for i in range(30)]
        reading = analyze_rsi(create_series(prices))
        assert reading.zone == "oversold"


class TestStochastic:
    """
    **Feature: oscillators, Property 5: Stochastic bounded**

    *For any* non-flat series, %K and %D lie in [0, 100] and %D is the
    3-period SMA of %K.
    """

    @given(prices=price_series(min_length=20))
    @settings(max_examples=100, deadline=None)
    def test_stochastic_in_range(self, prices: list[float]):
        series = create_series(prices)
        k_values, d_values = calculate_stochastic(series.highs, series.lows, series.closes)

        assert len(k_values) == len(prices) - 13
        assert len(d_values) == len(k_values) - 2
        for k in k_values:
            assert 0 <= k <= 100
        for i, d in enumerate(d_values):
            assert d == pytest.approx(sum(k_values[i:i + 3]) / 3)

    def test_flat_window_raises(self):
        flat = [100.0] * 20
        with pytest.raises(DegenerateInputError):
            calculate_stochastic(flat, flat, flat)

    def test_insufficient_data(self):
        prices = [float(100 + i) for i in range(15)]
        with pytest.raises(InsufficientDataError) as exc:
            calculate_stochastic(prices, prices, prices)
        assert exc.value.required == 16

    def test_unequal_lengths(self):
        with pytest.raises(ValueError):
            calculate_stochastic([1.0] * 20, [1.0] * 19, [1.0] * 20)

    def test_close_at_high_is_overbought(self):
        prices = [100 + i for i in range(30)]
        series = CandleSeries(
            interval=1440,
            candles=tuple(
                Candle(timestamp=1_600_000_000 + i * 86400, open=p - 1, high=p, low=p - 2, close=p, volume=1)
                for i, p in enumerate(prices)
            ),
        )
        reading = analyze_stochastic(series)
        assert reading.k.value == pytest.approx(100.0)
        assert reading.zone == "overbought"


def create_band_series(closes: list[float]) -> CandleSeries:
    """Candles pinned to a 90-110 range, so %K = (close - 90) * 5."""
    return CandleSeries(
        interval=1440,
        candles=tuple(
            Candle(timestamp=1_600_000_000 + i * 86400, open=c, high=110.0, low=90.0, close=c, volume=1)
            for i, c in enumerate(closes)
        ),
    )


class TestStochasticCrossover:
    """
    **Feature: oscillators, Property 19: %K/%D crossover reported**

    %K is compared with %D at the same candle; a sign change between the
    last two candles is reported as a crossover.
    """

    def test_bullish_crossover_on_last_candle(self):
        # %K: 50, 40, 30, 20, 80  ->  %D: 40, 30, 43.3
        series = create_band_series([100, 100, 100, 98, 96, 94, 106])

        reading = analyze_stochastic(series, k_period=3, d_period=3)

        assert reading.k.value == pytest.approx(80.0)
        assert reading.d.value == pytest.approx(130 / 3)
        assert reading.crossover == "bullish"
        assert "bullish %K/%D crossover" in reading.interpretation

    def test_bearish_crossover_on_last_candle(self):
        # %K: 50, 60, 70, 80, 20  ->  %D: 60, 70, 56.7
        series = create_band_series([100, 100, 100, 102, 104, 106, 94])

        reading = analyze_stochastic(series, k_period=3, d_period=3)

        assert reading.k.value == pytest.approx(20.0)
        assert reading.crossover == "bearish"
        assert "bearish %K/%D crossover" in reading.interpretation

    def test_no_crossover_while_k_stays_above(self):
        # %K: 20, 30, 40, 50, 60  ->  %D: 30, 40, 50
        series = create_band_series([100, 100, 94, 96, 98, 100, 102])

        reading = analyze_stochastic(series, k_period=3, d_period=3)

        assert reading.crossover is None
        assert reading.interpretation == "Neutral range"


class TestWilliamsR:
    """
    **Feature: oscillators, Property 6: Williams %R mirrors %K**

    *For any* non-flat series, Williams %R equals %K - 100 over the same
    period, so it lies in [-100, 0].
    """

    @given(prices=price_series(min_length=20))
    @settings(max_examples=100, deadline=None)
    def test_williams_is_shifted_k(self, prices: list[float]):
        series = create_series(prices)
        k_values, _ = calculate_stochastic(series.highs, series.lows, series.closes, 14, 3)
        willr = calculate_williams_r(series.highs, series.lows, series.closes, 14)

        assert len(willr) == len(k_values)
        for w, k in zip(willr, k_values):
            assert -100 <= w <= 0
            assert w == pytest.approx(k - 100)

    def test_flat_window_raises(self):
        flat = [50.0] * 14
        with pytest.raises(DegenerateInputError):
            calculate_williams_r(flat, flat, flat)

    def test_oversold_reading(self):
        prices = [100 * (0.98 ** i) for i in range(20)]
        reading = analyze_williams_r(create_series(prices, spread=0.0))
        assert reading.zone == "oversold"
        assert reading.williams_r.value == pytest.approx(-100.0)
