"""Indicator tools for agents and the CLI.

Every tool runs the same pipeline: validate the requested range, fetch the
candle series from a market-data provider, run the engines, and format the
readings as a plain dictionary. Tools never raise for data, provider or
parameter problems; they report them under an ``error`` key (None when
successful).
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

from growwta.config import get_db_path, load_config
from growwta.errors import IndicatorError
from growwta.indicators import (
    analyze_adx,
    analyze_bollinger,
    analyze_fibonacci,
    analyze_macd,
    analyze_rsi,
    analyze_stochastic,
    analyze_volatility,
    analyze_williams_r,
    calculate_pivot_points,
    detect_patterns,
    find_support_resistance as find_levels,
)
from growwta.models import CandleSeries
from growwta.providers import CandleStore, MarketDataProvider
from growwta.validation import check_range

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Default look-back per interval, kept inside each interval's duration limit
DEFAULT_LOOKBACK_DAYS = {
    1: 3,
    5: 15,
    10: 30,
    60: 90,
    240: 90,
    1440: 365,
    10080: 1825,
}

INDICATOR_ANALYZERS: dict[str, Callable[[CandleSeries], Any]] = {
    "rsi": analyze_rsi,
    "macd": analyze_macd,
    "stoch": analyze_stochastic,
    "willr": analyze_williams_r,
    "adx": analyze_adx,
    "bb": analyze_bollinger,
    "volatility": analyze_volatility,
}

AVAILABLE_INDICATORS = list(INDICATOR_ANALYZERS)


def _get_provider(db_path: Optional[Path] = None) -> MarketDataProvider:
    """Get the default provider, the local candle store."""
    return CandleStore(db_path or get_db_path(load_config()))


def _resolve_range(
    interval: int,
    start_time: Optional[int],
    end_time: Optional[int],
    now: int,
) -> tuple[int, int]:
    end = end_time if end_time is not None else now
    if start_time is not None:
        return start_time, end
    days = DEFAULT_LOOKBACK_DAYS.get(interval, 30)
    return end - days * SECONDS_PER_DAY, end


def _strip_series(value: Any) -> Any:
    """Drop backing series from a dumped reading, keeping latest values."""
    if isinstance(value, dict):
        return {k: _strip_series(v) for k, v in value.items() if k != "series"}
    if isinstance(value, list):
        return [_strip_series(v) for v in value]
    return value


def _fetch_series(
    symbol: str,
    interval: int,
    start_time: Optional[int],
    end_time: Optional[int],
    provider: Optional[MarketDataProvider],
    exchange: str,
    segment: str,
    now: Optional[int],
    db_path: Optional[Path],
) -> tuple[Optional[CandleSeries], dict]:
    """Validate the range, then fetch. Returns (series, error_fields)."""
    now = now if now is not None else int(time.time())
    start, end = _resolve_range(interval, start_time, end_time, now)

    check = check_range(interval, start, end, now=now)
    if not check.ok:
        logger.info("Rejected %d-minute request for %s: %s", interval, symbol, check.reason)
        return None, {
            "error": check.reason,
            "rejection": check.model_dump(include={"constraint", "limit", "requested"}),
        }

    provider = provider or _get_provider(db_path)
    try:
        series = provider.get_candles(
            symbol.upper(), interval, start, end, exchange=exchange, segment=segment
        )
    except Exception as e:
        logger.warning("Provider failed for %s: %s", symbol, e)
        return None, {"error": f"Failed to fetch data for {symbol.upper()}: {e}"}

    if len(series) == 0:
        return None, {
            "error": f"No data found for {symbol.upper()} at {interval}-minute interval",
        }

    return series, {}


def calculate_indicators(
    symbol: str,
    indicators: Optional[list[str]] = None,
    interval: int = 1440,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
    provider: Optional[MarketDataProvider] = None,
    exchange: str = "NSE",
    segment: str = "CASH",
    include_series: bool = False,
    now: Optional[int] = None,
    db_path: Optional[Path] = None,
) -> dict:
    """Calculate technical indicators for a symbol.

    Args:
        symbol: Trading symbol (e.g., "RELIANCE", "TCS").
        indicators: Indicators to calculate. Options: "rsi", "macd",
                   "stoch", "willr", "adx", "bb", "volatility". If None,
                   calculates all.
        interval: Candle interval in minutes (default 1440, daily).
        start_time: Range start (epoch seconds); defaults to a per-interval
                    look-back from end_time.
        end_time: Range end (epoch seconds); defaults to now.
        provider: Market-data provider; defaults to the local candle store.
        exchange: Exchange code (default "NSE").
        segment: Market segment (default "CASH").
        include_series: Include full backing series in the readings.
        now: Reference time for range validation (default: clock).
        db_path: Optional path to the candle database.

    Returns:
        Dictionary containing:
        - symbol, interval: The request
        - data_points: Number of candles used
        - current_price: Latest close
        - indicators: Readings keyed by indicator name
        - errors: Per-indicator failures (insufficient or degenerate data)
        - error: Request-level error (None if the series was loaded)
    """
    result = {
        "symbol": symbol.upper(),
        "interval": interval,
        "data_points": 0,
        "current_price": None,
        "indicators": {},
        "errors": {},
        "error": None,
    }

    series, failure = _fetch_series(
        symbol, interval, start_time, end_time, provider, exchange, segment, now, db_path
    )
    if series is None:
        result.update(failure)
        return result

    result["data_points"] = len(series)
    result["current_price"] = series.last_price

    requested = [i.lower() for i in indicators] if indicators else AVAILABLE_INDICATORS

    for name in requested:
        analyzer = INDICATOR_ANALYZERS.get(name)
        if analyzer is None:
            result["errors"][name] = f"Unknown indicator: {name}"
            continue
        try:
            reading = analyzer(series).model_dump()
        except IndicatorError as e:
            result["errors"][name] = str(e)
            continue
        result["indicators"][name] = reading if include_series else _strip_series(reading)

    return result


def find_support_resistance(
    symbol: str,
    interval: int = 1440,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
    tolerance: float = 0.01,
    min_touches: int = 2,
    num_levels: int = 3,
    provider: Optional[MarketDataProvider] = None,
    exchange: str = "NSE",
    segment: str = "CASH",
    now: Optional[int] = None,
    db_path: Optional[Path] = None,
) -> dict:
    """Find support and resistance levels for a symbol.

    Levels come from clustering pivot highs and lows; floor pivots from the
    previous candle are included for reference.

    Returns:
        Dictionary containing:
        - symbol: The queried symbol
        - current_price: Latest close
        - support_levels / resistance_levels: Up to num_levels levels each,
          most touched first
        - nearest_support / nearest_resistance: Closest qualifying levels
        - pivot_points: Floor pivots (P, R1-R3, S1-S3)
        - error: Error message if calculation failed (None if successful)
    """
    result = {
        "symbol": symbol.upper(),
        "interval": interval,
        "current_price": None,
        "support_levels": [],
        "resistance_levels": [],
        "nearest_support": None,
        "nearest_resistance": None,
        "pivot_points": None,
        "error": None,
    }

    series, failure = _fetch_series(
        symbol, interval, start_time, end_time, provider, exchange, segment, now, db_path
    )
    if series is None:
        result.update(failure)
        return result

    result["current_price"] = series.last_price

    try:
        levels = find_levels(series, tolerance=tolerance, min_touches=min_touches)
    except ValueError as e:
        result["error"] = str(e)
        return result

    result["support_levels"] = [lvl.model_dump() for lvl in levels.support[:num_levels]]
    result["resistance_levels"] = [lvl.model_dump() for lvl in levels.resistance[:num_levels]]
    if levels.nearest_support:
        result["nearest_support"] = levels.nearest_support.model_dump()
    if levels.nearest_resistance:
        result["nearest_resistance"] = levels.nearest_resistance.model_dump()

    if len(series) >= 2:
        prev = series[-2]
        result["pivot_points"] = calculate_pivot_points(prev.high, prev.low, prev.close).model_dump()

    return result


def get_fibonacci_levels(
    symbol: str,
    interval: int = 1440,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
    direction: Optional[str] = None,
    provider: Optional[MarketDataProvider] = None,
    exchange: str = "NSE",
    segment: str = "CASH",
    now: Optional[int] = None,
    db_path: Optional[Path] = None,
) -> dict:
    """Fibonacci retracement and extension levels over the requested range.

    Args:
        direction: "UP" or "DOWN"; auto-detected from the closes when None.

    Returns:
        Dictionary with high, low, direction, retracements, extensions,
        significant levels near the current price, and error.
    """
    result = {
        "symbol": symbol.upper(),
        "interval": interval,
        "current_price": None,
        "fibonacci": None,
        "significant_levels": [],
        "error": None,
    }

    series, failure = _fetch_series(
        symbol, interval, start_time, end_time, provider, exchange, segment, now, db_path
    )
    if series is None:
        result.update(failure)
        return result

    result["current_price"] = series.last_price

    try:
        projection = analyze_fibonacci(series, direction.upper() if direction else None)
    except ValueError as e:
        result["error"] = str(e)
        return result

    result["fibonacci"] = projection.model_dump()
    result["significant_levels"] = [lvl.label for lvl in projection.significant_levels]
    return result


def scan_candlestick_patterns(
    symbol: str,
    interval: int = 1440,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
    lookback: int = 5,
    provider: Optional[MarketDataProvider] = None,
    exchange: str = "NSE",
    segment: str = "CASH",
    now: Optional[int] = None,
    db_path: Optional[Path] = None,
) -> dict:
    """Detect candlestick patterns in the most recent candles.

    Returns:
        Dictionary with patterns (most recent first), count, overall bias,
        and error.
    """
    result = {
        "symbol": symbol.upper(),
        "interval": interval,
        "patterns": [],
        "count": 0,
        "bias": "neutral",
        "error": None,
    }

    series, failure = _fetch_series(
        symbol, interval, start_time, end_time, provider, exchange, segment, now, db_path
    )
    if series is None:
        result.update(failure)
        return result

    try:
        scan = detect_patterns(series, lookback=lookback)
    except ValueError as e:
        result["error"] = str(e)
        return result

    result["patterns"] = [p.model_dump() for p in scan.latest(len(scan.patterns))]
    result["count"] = len(scan.patterns)
    result["bias"] = scan.bias
    return result
