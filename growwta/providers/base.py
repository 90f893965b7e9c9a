"""Market-data provider interface for groww-ta."""

from abc import ABC, abstractmethod

from growwta.models import CandleSeries


class MarketDataProvider(ABC):
    """Abstract source of historical candles.

    Implementations (the local candle store, a brokerage client, etc.)
    return an already-materialized series; the indicator engines never
    call a provider themselves.
    """

    @abstractmethod
    def get_candles(
        self,
        symbol: str,
        interval: int,
        start_time: int,
        end_time: int,
        exchange: str = "NSE",
        segment: str = "CASH",
    ) -> CandleSeries:
        """Get historical OHLCV data.

        Args:
            symbol: Trading symbol.
            interval: Candle interval in minutes.
            start_time: Range start (epoch seconds, inclusive).
            end_time: Range end (epoch seconds, inclusive).
            exchange: Exchange code (NSE, BSE).
            segment: Market segment (CASH, FNO).

        Returns:
            Candle series for the range, possibly empty or partial.

        Raises:
            ValueError: If the request cannot be served.
        """
        pass
