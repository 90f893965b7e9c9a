"""Trend strength: ADX with +DI/-DI via Wilder smoothing."""

from growwta.errors import DegenerateInputError, InsufficientDataError
from growwta.models import ADXReading, CandleSeries, IndicatorValue

ADX_VERY_STRONG = 50
ADX_STRONG = 25
ADX_MODERATE = 20


def calculate_true_range(
    high: list[float],
    low: list[float],
    close: list[float],
) -> list[float]:
    """True range for each step from the second candle on.

    TR = max(high - low, |high - prev_close|, |low - prev_close|)
    """
    if not (len(high) == len(low) == len(close)):
        raise ValueError("True range needs equal-length high/low/close inputs")

    return [
        max(
            high[i] - low[i],
            abs(high[i] - close[i - 1]),
            abs(low[i] - close[i - 1])
        )
        for i in range(1, len(close))
    ]


def calculate_directional_movement(
    high: list[float],
    low: list[float],
) -> tuple[list[float], list[float]]:
    """+DM and -DM for each step from the second candle on."""
    plus_dm = []
    minus_dm = []

    for i in range(1, len(high)):
        up_move = max(high[i] - high[i - 1], 0.0)
        down_move = max(low[i - 1] - low[i], 0.0)

        plus_dm.append(up_move if up_move > down_move else 0.0)
        minus_dm.append(down_move if down_move > up_move else 0.0)

    return plus_dm, minus_dm


def wilder_sum(data: list[float], period: int) -> list[float]:
    """Wilder running sum: seed with a plain sum, then sum - sum/period + new."""
    result = [sum(data[:period])]
    for i in range(period, len(data)):
        result.append(result[-1] - (result[-1] / period) + data[i])
    return result


def calculate_adx(
    high: list[float],
    low: list[float],
    close: list[float],
    period: int = 14
) -> tuple[list[float], list[float], list[float]]:
    """Calculate Average Directional Index (ADX) with +DI and -DI.

    Args:
        high: List of high prices
        low: List of low prices
        close: List of close prices
        period: ADX period (default 14)

    Returns:
        Tuple of (ADX, +DI, -DI). +DI/-DI start at input index `period`;
        ADX starts at input index 2 * period - 1. All share the same last
        index as the input.

    Raises:
        InsufficientDataError: If fewer than 2 * period candles.
        DegenerateInputError: If the smoothed true range is zero.
    """
    n = len(close)
    if len(high) != n or len(low) != n:
        raise ValueError("ADX needs equal-length high/low/close inputs")
    if period < 1:
        raise ValueError(f"ADX period must be >= 1, got {period}")
    if n < period * 2:
        raise InsufficientDataError("ADX", required=period * 2, available=n)

    tr_list = calculate_true_range(high, low, close)
    plus_dm, minus_dm = calculate_directional_movement(high, low)

    smoothed_tr = wilder_sum(tr_list, period)
    smoothed_plus_dm = wilder_sum(plus_dm, period)
    smoothed_minus_dm = wilder_sum(minus_dm, period)

    plus_di = []
    minus_di = []
    dx = []

    for s_tr, s_plus, s_minus in zip(smoothed_tr, smoothed_plus_dm, smoothed_minus_dm):
        if s_tr == 0:
            raise DegenerateInputError("ADX", "smoothed true range is zero (flat prices)")
        pdi = 100 * s_plus / s_tr
        mdi = 100 * s_minus / s_tr
        plus_di.append(pdi)
        minus_di.append(mdi)

        di_sum = pdi + mdi
        dx.append(100 * abs(pdi - mdi) / di_sum if di_sum > 0 else 0.0)

    # ADX is Wilder-smoothed DX, seeded with a plain mean
    adx = [sum(dx[:period]) / period]
    for i in range(period, len(dx)):
        adx.append((adx[-1] * (period - 1) + dx[i]) / period)

    return adx, plus_di, minus_di


def classify_trend_strength(adx: float) -> str:
    if adx >= ADX_VERY_STRONG:
        return "very strong"
    if adx >= ADX_STRONG:
        return "strong"
    if adx >= ADX_MODERATE:
        return "moderate"
    return "weak"


def analyze_adx(series: CandleSeries, period: int = 14) -> ADXReading:
    """ADX reading with trend strength and direction."""
    adx_values, plus_di, minus_di = calculate_adx(
        series.highs, series.lows, series.closes, period
    )
    adx, pdi, mdi = adx_values[-1], plus_di[-1], minus_di[-1]

    strength = classify_trend_strength(adx)
    if pdi > mdi:
        direction = "bullish"
    elif mdi > pdi:
        direction = "bearish"
    else:
        direction = "neutral"

    if strength == "weak":
        interpretation = "Weak trend: market is ranging or sideways"
    elif direction == "neutral":
        interpretation = f"{strength.capitalize()} trend with no directional bias"
    else:
        interpretation = f"{strength.capitalize()} {direction} trend"

    return ADXReading(
        adx=IndicatorValue(name="ADX", value=adx, period=period, series=adx_values),
        plus_di=IndicatorValue(name="+DI", value=pdi, period=period, series=plus_di),
        minus_di=IndicatorValue(name="-DI", value=mdi, period=period, series=minus_di),
        strength=strength,
        direction=direction,
        interpretation=interpretation,
    )
