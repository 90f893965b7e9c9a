"""Candlestick pattern models."""

from typing import Literal

from pydantic import BaseModel, Field


class Pattern(BaseModel):
    """A recognised candlestick pattern."""

    name: str = Field(..., description="Pattern name (e.g. Hammer)")
    polarity: Literal["bullish", "bearish", "neutral"]
    category: Literal["reversal", "continuation"]
    strength: Literal["weak", "moderate", "strong"]
    position: int = Field(..., ge=0, description="Index of the candle in the series")

    model_config = {"frozen": True}


class PatternScan(BaseModel):
    """All patterns found in a scan window, in encounter order."""

    patterns: list[Pattern] = Field(default_factory=list)
    window_start: int = Field(..., ge=0, description="First candle index examined")
    window_end: int = Field(..., ge=0, description="Last candle index examined")

    model_config = {"frozen": True}

    def latest(self, count: int = 3) -> list[Pattern]:
        """Most recent patterns first."""
        return list(reversed(self.patterns))[:count]

    @property
    def bias(self) -> Literal["bullish", "bearish", "neutral"]:
        bullish = sum(1 for p in self.patterns if p.polarity == "bullish")
        bearish = sum(1 for p in self.patterns if p.polarity == "bearish")
        if bullish > bearish:
            return "bullish"
        if bearish > bullish:
            return "bearish"
        return "neutral"
