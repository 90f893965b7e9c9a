"""Volatility measures: historical volatility, ATR, Sharpe ratio, Bollinger Bands."""

import math
from typing import Optional

from growwta.errors import DegenerateInputError, InsufficientDataError
from growwta.indicators.moving_average import calculate_sma
from growwta.indicators.trend import calculate_true_range
from growwta.models import BollingerReading, CandleSeries, IndicatorValue, VolatilityReading

TRADING_DAYS_PER_YEAR = 252
RISK_FREE_RATE = 0.06


def calculate_returns(closes: list[float]) -> list[float]:
    """Simple per-candle returns (close[i] - close[i-1]) / close[i-1]."""
    returns = []
    for i in range(1, len(closes)):
        if closes[i - 1] == 0:
            raise DegenerateInputError("Returns", f"zero close at index {i - 1}")
        returns.append((closes[i] - closes[i - 1]) / closes[i - 1])
    return returns


def _mean_and_sample_stdev(returns: list[float]) -> tuple[float, float]:
    n = len(returns)
    mean = sum(returns) / n
    variance = sum((r - mean) ** 2 for r in returns) / (n - 1)
    return mean, math.sqrt(variance)


def calculate_historical_volatility(closes: list[float]) -> float:
    """Annualized historical volatility in percent.

    Uses the sample variance of simple returns, scaled by sqrt(252).

    Raises:
        InsufficientDataError: If fewer than 3 closes (2 returns).
    """
    if len(closes) < 3:
        raise InsufficientDataError("Historical volatility", required=3, available=len(closes))

    _, stdev = _mean_and_sample_stdev(calculate_returns(closes))
    return stdev * math.sqrt(TRADING_DAYS_PER_YEAR) * 100


def calculate_atr(
    high: list[float],
    low: list[float],
    close: list[float],
) -> float:
    """Average True Range as a simple mean over the whole window.

    Unlike the true range inside ADX, no Wilder smoothing is applied.
    """
    if len(close) < 2:
        raise InsufficientDataError("ATR", required=2, available=len(close))

    true_ranges = calculate_true_range(high, low, close)
    return sum(true_ranges) / len(true_ranges)


def calculate_sharpe_ratio(
    returns: list[float],
    risk_free_rate: float = RISK_FREE_RATE,
) -> float:
    """Annualized Sharpe-style ratio from per-candle returns.

    ((mean * 252) - risk_free_rate) / (stdev * sqrt(252))

    Raises:
        DegenerateInputError: If returns have zero deviation.
    """
    if len(returns) < 2:
        raise InsufficientDataError("Sharpe ratio", required=2, available=len(returns))

    mean, stdev = _mean_and_sample_stdev(returns)
    if stdev == 0:
        raise DegenerateInputError("Sharpe ratio", "returns have zero standard deviation")

    return ((mean * TRADING_DAYS_PER_YEAR) - risk_free_rate) / (
        stdev * math.sqrt(TRADING_DAYS_PER_YEAR)
    )


def classify_risk(annualized_volatility: float) -> str:
    if annualized_volatility < 15:
        return "low"
    if annualized_volatility < 25:
        return "moderate"
    if annualized_volatility < 40:
        return "high"
    return "very high"


def analyze_volatility(series: CandleSeries) -> VolatilityReading:
    """Volatility reading with risk band."""
    closes = series.closes
    if len(closes) < 3:
        raise InsufficientDataError("Volatility", required=3, available=len(closes))

    returns = calculate_returns(closes)
    mean, stdev = _mean_and_sample_stdev(returns)
    annualized = stdev * math.sqrt(TRADING_DAYS_PER_YEAR) * 100
    atr = calculate_atr(series.highs, series.lows, closes)

    sharpe: Optional[float]
    try:
        sharpe = calculate_sharpe_ratio(returns)
    except DegenerateInputError:
        sharpe = None

    risk = classify_risk(annualized)
    interpretation = f"{risk.capitalize()} risk: {annualized:.2f}% annualized volatility"
    if sharpe is not None:
        interpretation += f", Sharpe ratio {sharpe:.2f}"

    last = closes[-1]
    return VolatilityReading(
        annualized_volatility=annualized,
        daily_volatility=stdev,
        mean_return=mean,
        atr=atr,
        atr_percent=(atr / last) * 100 if last > 0 else None,
        sharpe_ratio=sharpe,
        risk=risk,
        interpretation=interpretation,
    )


def calculate_bollinger_bands(
    closes: list[float],
    period: int = 20,
    std_dev: float = 2.0
) -> tuple[list[float], list[float], list[float]]:
    """Calculate Bollinger Bands.

    Args:
        closes: List of close prices
        period: SMA period (default 20)
        std_dev: Standard deviation multiplier (default 2.0)

    Returns:
        Tuple of (upper_band, middle_band, lower_band), each of length
        n - period + 1.
    """
    if std_dev < 0:
        raise ValueError(f"Bollinger std_dev multiplier must be >= 0, got {std_dev}")

    middle_band = calculate_sma(closes, period)
    upper_band = []
    lower_band = []

    for j, mean in enumerate(middle_band):
        window = closes[j:j + period]

        # Population standard deviation
        variance = sum((x - mean) ** 2 for x in window) / period
        std = variance ** 0.5

        upper_band.append(mean + (std_dev * std))
        lower_band.append(mean - (std_dev * std))

    return upper_band, middle_band, lower_band


def analyze_bollinger(
    series: CandleSeries, period: int = 20, std_dev: float = 2.0
) -> BollingerReading:
    """Bollinger Bands reading with the close's position inside the bands."""
    upper, middle, lower = calculate_bollinger_bands(series.closes, period, std_dev)
    price = series.last_price
    u, m, lo = upper[-1], middle[-1], lower[-1]

    if price > u:
        position, interpretation = "above_upper", "Above upper band: overextended to the upside"
    elif price < lo:
        position, interpretation = "below_lower", "Below lower band: overextended to the downside"
    elif price > m:
        position, interpretation = "upper_half", "Upper half of the bands"
    elif price < m:
        position, interpretation = "lower_half", "Lower half of the bands"
    else:
        position, interpretation = "middle", "At the middle band"

    return BollingerReading(
        upper=IndicatorValue(name="BB Upper", value=u, period=period, series=upper),
        middle=IndicatorValue(name="BB Middle", value=m, period=period, series=middle),
        lower=IndicatorValue(name="BB Lower", value=lo, period=period, series=lower),
        std_dev=std_dev,
        bandwidth=((u - lo) / m) * 100 if m > 0 else None,
        position=position,
        interpretation=interpretation,
    )
