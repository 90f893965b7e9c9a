"""Price levels: pivot detection, support/resistance clustering and Fibonacci."""

from typing import Literal, Optional

from growwta.errors import DegenerateInputError, InsufficientDataError
from growwta.models import (
    CandleSeries,
    FibonacciLevel,
    FibonacciProjection,
    FloorPivots,
    Level,
    PivotPoint,
    SupportResistance,
)

RETRACEMENT_RATIOS = (0.0, 0.236, 0.382, 0.5, 0.618, 0.786, 1.0)
EXTENSION_RATIOS = (1.272, 1.414, 1.618, 2.0, 2.618)
SIGNIFICANCE_TOLERANCE = 0.01


def find_pivots(
    series: CandleSeries, window: int = 2
) -> tuple[list[PivotPoint], list[PivotPoint]]:
    """Find pivot highs and lows.

    A candle is a pivot high when its high is strictly greater than the
    highs of the `window` candles on each side; pivot lows mirror this on
    the lows.

    Returns:
        Tuple of (pivot_highs, pivot_lows), each in series order.
    """
    if window < 1:
        raise ValueError(f"Pivot window must be >= 1, got {window}")

    required = 2 * window + 1
    if len(series) < required:
        raise InsufficientDataError("Pivots", required=required, available=len(series))

    highs = series.highs
    lows = series.lows
    timestamps = series.timestamps

    pivot_highs = []
    pivot_lows = []

    for i in range(window, len(series) - window):
        neighbours = [j for j in range(i - window, i + window + 1) if j != i]

        if all(highs[i] > highs[j] for j in neighbours):
            pivot_highs.append(PivotPoint(price=highs[i], timestamp=timestamps[i], kind="high"))

        if all(lows[i] < lows[j] for j in neighbours):
            pivot_lows.append(PivotPoint(price=lows[i], timestamp=timestamps[i], kind="low"))

    return pivot_highs, pivot_lows


def cluster_pivots(
    pivots: list[PivotPoint],
    tolerance: float = 0.01,
    min_touches: int = 2,
) -> list[Level]:
    """Group pivots into price levels.

    Each pivot joins the first group whose running mean is within
    `tolerance` (relative) of the pivot price, else starts a new group.
    Groups with fewer than `min_touches` pivots are dropped.

    Returns:
        Levels sorted by touch count, most touched first.
    """
    if tolerance < 0:
        raise ValueError(f"Cluster tolerance must be >= 0, got {tolerance}")

    groups: list[list[PivotPoint]] = []
    means: list[float] = []

    for pivot in pivots:
        for idx, mean in enumerate(means):
            if mean > 0 and abs(pivot.price - mean) / mean <= tolerance:
                groups[idx].append(pivot)
                means[idx] = sum(p.price for p in groups[idx]) / len(groups[idx])
                break
        else:
            groups.append([pivot])
            means.append(pivot.price)

    levels = [
        Level(
            price=mean,
            touches=len(group),
            last_touch=max(p.timestamp for p in group),
        )
        for group, mean in zip(groups, means)
        if len(group) >= min_touches
    ]

    # sorted() is stable, so equal touch counts keep first-seen order
    return sorted(levels, key=lambda lvl: lvl.touches, reverse=True)


def find_support_resistance(
    series: CandleSeries,
    tolerance: float = 0.01,
    min_touches: int = 2,
    window: int = 2,
) -> SupportResistance:
    """Cluster pivot highs into resistance and pivot lows into support.

    Levels are kept in touch-count order; the nearest resistance is the
    first one above the current price and the nearest support the first
    one below it.
    """
    pivot_highs, pivot_lows = find_pivots(series, window=window)
    price = series.last_price

    resistance = [
        lvl for lvl in cluster_pivots(pivot_highs, tolerance, min_touches)
        if lvl.price > price
    ]
    support = [
        lvl for lvl in cluster_pivots(pivot_lows, tolerance, min_touches)
        if lvl.price < price
    ]

    return SupportResistance(
        current_price=price,
        support=support,
        resistance=resistance,
        nearest_support=support[0] if support else None,
        nearest_resistance=resistance[0] if resistance else None,
    )


def _is_significant(level_price: float, current_price: Optional[float]) -> bool:
    if current_price is None or level_price == 0:
        return False
    return abs(current_price - level_price) / abs(level_price) <= SIGNIFICANCE_TOLERANCE


def calculate_fibonacci_levels(
    high_price: float,
    low_price: float,
    direction: Literal["UP", "DOWN"] = "UP",
    current_price: Optional[float] = None,
) -> FibonacciProjection:
    """Calculate Fibonacci retracement and extension levels.

    Args:
        high_price: Swing high price
        low_price: Swing low price
        direction: "UP" retraces from the high toward the low, "DOWN" from
            the low toward the high
        current_price: Optional price used to flag significant levels

    Returns:
        FibonacciProjection with retracements (0% to 100%) and extensions
        beyond the range in the trend direction.
    """
    direction = direction.upper()
    if direction not in ("UP", "DOWN"):
        raise ValueError(f"Fibonacci direction must be UP or DOWN, got {direction}")
    if high_price < low_price:
        raise ValueError(f"Swing high {high_price} is below swing low {low_price}")

    diff = high_price - low_price
    if diff == 0:
        raise DegenerateInputError("Fibonacci", "swing high equals swing low")

    if direction == "UP":
        retracements = [high_price - ratio * diff for ratio in RETRACEMENT_RATIOS]
        extensions = [low_price + ratio * diff for ratio in EXTENSION_RATIOS]
    else:
        retracements = [low_price + ratio * diff for ratio in RETRACEMENT_RATIOS]
        extensions = [high_price - ratio * diff for ratio in EXTENSION_RATIOS]

    return FibonacciProjection(
        high=high_price,
        low=low_price,
        direction=direction,
        current_price=current_price,
        retracements=[
            FibonacciLevel(ratio=r, price=p, significant=_is_significant(p, current_price))
            for r, p in zip(RETRACEMENT_RATIOS, retracements)
        ],
        extensions=[
            FibonacciLevel(ratio=r, price=p, significant=_is_significant(p, current_price))
            for r, p in zip(EXTENSION_RATIOS, extensions)
        ],
    )


def detect_trend_direction(closes: list[float]) -> Literal["UP", "DOWN"]:
    """Compare the mean close of the first and last quarter of the window."""
    if len(closes) < 2:
        raise InsufficientDataError("Trend direction", required=2, available=len(closes))

    quarter = max(1, len(closes) // 4)
    first = sum(closes[:quarter]) / quarter
    last = sum(closes[-quarter:]) / quarter
    return "UP" if last > first else "DOWN"


def analyze_fibonacci(
    series: CandleSeries,
    direction: Optional[Literal["UP", "DOWN"]] = None,
) -> FibonacciProjection:
    """Fibonacci levels over the whole series' high/low range.

    The direction is auto-detected when not given.
    """
    if len(series) < 2:
        raise InsufficientDataError("Fibonacci", required=2, available=len(series))

    if direction is None:
        direction = detect_trend_direction(series.closes)

    return calculate_fibonacci_levels(
        max(series.highs),
        min(series.lows),
        direction=direction,
        current_price=series.last_price,
    )


def calculate_pivot_points(
    high: float,
    low: float,
    close: float
) -> FloorPivots:
    """Calculate Standard Pivot Points with support and resistance levels.

    Args:
        high: Previous candle's high
        low: Previous candle's low
        close: Previous candle's close

    Returns:
        FloorPivots with pivot, R1-R3 and S1-S3
    """
    pivot = (high + low + close) / 3

    return FloorPivots(
        pivot=pivot,
        r1=(2 * pivot) - low,
        r2=pivot + (high - low),
        r3=high + 2 * (pivot - low),
        s1=(2 * pivot) - high,
        s2=pivot - (high - low),
        s3=low - 2 * (high - pivot),
    )
