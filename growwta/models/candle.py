"""Candle (OHLCV) and CandleSeries data models."""

from typing import Union, overload

from pydantic import BaseModel, Field, field_validator, model_validator


class Candle(BaseModel):
    """Represents a single OHLCV candle."""

    timestamp: int = Field(..., ge=0, description="Candle start time (epoch seconds)")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: int = Field(..., ge=0, description="Trading volume")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_price_order(self) -> "Candle":
        if not (self.low <= min(self.open, self.close) and max(self.open, self.close) <= self.high):
            raise ValueError(
                f"Candle at {self.timestamp} violates low <= open/close <= high "
                f"(o={self.open}, h={self.high}, l={self.low}, c={self.close})"
            )
        return self

    @property
    def body_size(self) -> float:
        return abs(self.close - self.open)

    @property
    def upper_shadow(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_shadow(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open


class CandleSeries(BaseModel):
    """An ordered run of candles sampled at a fixed interval.

    Timestamps must be strictly increasing. The series is never re-sorted
    or de-duplicated; a malformed series is rejected at construction.
    """

    interval: int = Field(..., gt=0, description="Sampling interval in minutes")
    candles: tuple[Candle, ...] = Field(default=(), description="Candles, oldest first")

    model_config = {"frozen": True}

    @field_validator("candles")
    @classmethod
    def _check_ordering(cls, candles: tuple[Candle, ...]) -> tuple[Candle, ...]:
        for prev, cur in zip(candles, candles[1:]):
            if cur.timestamp <= prev.timestamp:
                raise ValueError(
                    f"Candle timestamps must be strictly increasing "
                    f"({prev.timestamp} followed by {cur.timestamp})"
                )
        return candles

    def __len__(self) -> int:
        return len(self.candles)

    @overload
    def __getitem__(self, index: int) -> Candle: ...

    @overload
    def __getitem__(self, index: slice) -> "CandleSeries": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Candle, "CandleSeries"]:
        if isinstance(index, slice):
            return CandleSeries(interval=self.interval, candles=self.candles[index])
        return self.candles[index]

    @property
    def timestamps(self) -> list[int]:
        return [c.timestamp for c in self.candles]

    @property
    def opens(self) -> list[float]:
        return [c.open for c in self.candles]

    @property
    def highs(self) -> list[float]:
        return [c.high for c in self.candles]

    @property
    def lows(self) -> list[float]:
        return [c.low for c in self.candles]

    @property
    def closes(self) -> list[float]:
        return [c.close for c in self.candles]

    @property
    def volumes(self) -> list[int]:
        return [c.volume for c in self.candles]

    @property
    def last_price(self) -> float:
        """Close of the most recent candle."""
        if not self.candles:
            raise IndexError("Empty candle series has no last price")
        return self.candles[-1].close
