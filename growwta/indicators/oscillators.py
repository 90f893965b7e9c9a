"""Bounded momentum oscillators: RSI, Stochastic and Williams %R."""

from growwta.errors import DegenerateInputError, InsufficientDataError
from growwta.indicators.moving_average import calculate_sma, detect_crossover
from growwta.models import (
    CandleSeries,
    IndicatorValue,
    RSIReading,
    StochasticReading,
    WilliamsReading,
)

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
RSI_MIDLINE = 50
STOCH_OVERBOUGHT = 80
STOCH_OVERSOLD = 20
WILLIAMS_OVERBOUGHT = -20
WILLIAMS_OVERSOLD = -80


def _check_lengths(name: str, high: list[float], low: list[float], close: list[float]) -> None:
    if not (len(high) == len(low) == len(close)):
        raise ValueError(
            f"{name} needs equal-length inputs "
            f"(high={len(high)}, low={len(low)}, close={len(close)})"
        )


def calculate_rsi(closes: list[float], period: int = 14) -> list[float]:
    """Calculate Relative Strength Index.

    The first average gain/loss is the simple mean of the first `period`
    price changes; later averages use Wilder smoothing
    ``avg = (avg * (period - 1) + new) / period``.

    Args:
        closes: List of close prices
        period: RSI period (default 14)

    Returns:
        List of RSI values (0-100), one per close from index `period` on.

    Raises:
        InsufficientDataError: If fewer than period + 1 closes are given.
    """
    if period < 1:
        raise ValueError(f"RSI period must be >= 1, got {period}")
    if len(closes) < period + 1:
        raise InsufficientDataError("RSI", required=period + 1, available=len(closes))

    changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]
    gains = [max(0.0, c) for c in changes]
    losses = [max(0.0, -c) for c in changes]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    def _rsi(ag: float, al: float) -> float:
        if al == 0:
            return 100.0
        return 100 - (100 / (1 + ag / al))

    result = [_rsi(avg_gain, avg_loss)]

    for i in range(period, len(changes)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result.append(_rsi(avg_gain, avg_loss))

    return result


def calculate_stochastic(
    high: list[float],
    low: list[float],
    close: list[float],
    k_period: int = 14,
    d_period: int = 3
) -> tuple[list[float], list[float]]:
    """Calculate Stochastic Oscillator (%K and %D).

    Args:
        high: List of high prices
        low: List of low prices
        close: List of close prices
        k_period: %K period (default 14)
        d_period: %D smoothing period (default 3)

    Returns:
        Tuple of (%K values, %D values). %K starts at index k_period - 1,
        %D starts d_period - 1 entries later.

    Raises:
        InsufficientDataError: If fewer than k_period + d_period - 1 candles.
        DegenerateInputError: If a window has highest high == lowest low.
    """
    _check_lengths("Stochastic", high, low, close)
    if k_period < 1 or d_period < 1:
        raise ValueError(f"Stochastic periods must be >= 1, got {k_period}/{d_period}")

    n = len(close)
    required = k_period + d_period - 1
    if n < required:
        raise InsufficientDataError("Stochastic", required=required, available=n)

    k_values = []
    for i in range(k_period - 1, n):
        highest_high = max(high[i - k_period + 1:i + 1])
        lowest_low = min(low[i - k_period + 1:i + 1])

        if highest_high == lowest_low:
            raise DegenerateInputError(
                "Stochastic", f"flat {k_period}-candle window ending at index {i}"
            )
        k_values.append((close[i] - lowest_low) / (highest_high - lowest_low) * 100)

    # %D is SMA of %K
    d_values = calculate_sma(k_values, d_period)

    return k_values, d_values


def calculate_williams_r(
    high: list[float],
    low: list[float],
    close: list[float],
    period: int = 14
) -> list[float]:
    """Calculate Williams %R.

    Args:
        high: List of high prices
        low: List of low prices
        close: List of close prices
        period: Lookback period (default 14)

    Returns:
        List of Williams %R values (-100 to 0) from index period - 1 on.

    Raises:
        DegenerateInputError: If a window has highest high == lowest low.
    """
    _check_lengths("Williams %R", high, low, close)
    if period < 1:
        raise ValueError(f"Williams %R period must be >= 1, got {period}")

    n = len(close)
    if n < period:
        raise InsufficientDataError("Williams %R", required=period, available=n)

    result = []
    for i in range(period - 1, n):
        highest_high = max(high[i - period + 1:i + 1])
        lowest_low = min(low[i - period + 1:i + 1])

        if highest_high == lowest_low:
            raise DegenerateInputError(
                "Williams %R", f"flat {period}-candle window ending at index {i}"
            )
        result.append(((highest_high - close[i]) / (highest_high - lowest_low)) * -100)

    return result


def analyze_rsi(series: CandleSeries, period: int = 14) -> RSIReading:
    """RSI reading with overbought/oversold and midline classification."""
    values = calculate_rsi(series.closes, period)
    rsi = values[-1]

    if rsi >= RSI_OVERBOUGHT:
        zone = "overbought"
        interpretation = "Overbought: potential pullback or reversal"
    elif rsi <= RSI_OVERSOLD:
        zone = "oversold"
        interpretation = "Oversold: potential bounce or reversal"
    elif rsi >= RSI_MIDLINE:
        zone = "bullish"
        interpretation = "Bullish momentum: RSI above the 50 midline"
    else:
        zone = "bearish"
        interpretation = "Bearish momentum: RSI below the 50 midline"

    return RSIReading(
        rsi=IndicatorValue(name="RSI", value=rsi, period=period, series=values),
        zone=zone,
        interpretation=interpretation,
    )


def analyze_stochastic(
    series: CandleSeries, k_period: int = 14, d_period: int = 3
) -> StochasticReading:
    """Stochastic reading; both %K and %D must agree for a band signal."""
    k_values, d_values = calculate_stochastic(
        series.highs, series.lows, series.closes, k_period, d_period
    )
    k, d = k_values[-1], d_values[-1]

    if k >= STOCH_OVERBOUGHT and d >= STOCH_OVERBOUGHT:
        zone = "overbought"
    elif k <= STOCH_OVERSOLD and d <= STOCH_OVERSOLD:
        zone = "oversold"
    else:
        zone = "neutral"

    crossover = detect_crossover(k_values[d_period - 1:], d_values)

    parts = {
        "overbought": "Overbought: %K and %D above 80",
        "oversold": "Oversold: %K and %D below 20",
        "neutral": "Neutral range",
    }
    interpretation = parts[zone]
    if crossover == "bullish":
        interpretation += "; bullish %K/%D crossover"
    elif crossover == "bearish":
        interpretation += "; bearish %K/%D crossover"

    return StochasticReading(
        k=IndicatorValue(name="%K", value=k, period=k_period, series=k_values),
        d=IndicatorValue(name="%D", value=d, period=d_period, series=d_values),
        zone=zone,
        crossover=crossover,
        interpretation=interpretation,
    )


def analyze_williams_r(series: CandleSeries, period: int = 14) -> WilliamsReading:
    """Williams %R reading with overbought/oversold classification."""
    values = calculate_williams_r(series.highs, series.lows, series.closes, period)
    wr = values[-1]

    if wr >= WILLIAMS_OVERBOUGHT:
        zone, interpretation = "overbought", "Overbought: close near the period high"
    elif wr <= WILLIAMS_OVERSOLD:
        zone, interpretation = "oversold", "Oversold: close near the period low"
    else:
        zone, interpretation = "neutral", "Neutral range"

    return WilliamsReading(
        williams_r=IndicatorValue(name="Williams %R", value=wr, period=period, series=values),
        zone=zone,
        interpretation=interpretation,
    )
