"""Market-data providers for groww-ta."""

from growwta.providers.base import MarketDataProvider
from growwta.providers.store import CandleStore

__all__ = ["MarketDataProvider", "CandleStore"]
