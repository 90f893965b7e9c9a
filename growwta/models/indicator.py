"""Indicator values and per-engine readings."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class IndicatorValue(BaseModel):
    """A named numeric result, optionally with its backing series."""

    name: str = Field(..., description="Indicator name (e.g. RSI, EMA)")
    value: float = Field(..., description="Latest indicator value")
    period: Optional[int] = Field(default=None, ge=1, description="Window length")
    series: list[float] = Field(
        default_factory=list,
        description="Full computed series, oldest first (latest value last)",
    )

    model_config = {"frozen": True}


class RSIReading(BaseModel):
    """RSI value with its band classification."""

    rsi: IndicatorValue
    zone: Literal["overbought", "oversold", "bullish", "bearish"]
    interpretation: str

    model_config = {"frozen": True}


class StochasticReading(BaseModel):
    """Stochastic %K/%D with band and crossover classification."""

    k: IndicatorValue
    d: IndicatorValue
    zone: Literal["overbought", "oversold", "neutral"]
    crossover: Optional[Literal["bullish", "bearish"]] = None
    interpretation: str

    model_config = {"frozen": True}


class WilliamsReading(BaseModel):
    """Williams %R value with its band classification."""

    williams_r: IndicatorValue
    zone: Literal["overbought", "oversold", "neutral"]
    interpretation: str

    model_config = {"frozen": True}


class MACDReading(BaseModel):
    """MACD line, signal line and histogram."""

    macd: IndicatorValue
    signal: IndicatorValue
    histogram: IndicatorValue
    trend: Literal["bullish", "bearish", "neutral"]
    crossover: Optional[Literal["bullish", "bearish"]] = None
    interpretation: str

    model_config = {"frozen": True}


class BollingerReading(BaseModel):
    """Bollinger Bands with price position."""

    upper: IndicatorValue
    middle: IndicatorValue
    lower: IndicatorValue
    std_dev: float = Field(..., ge=0)
    bandwidth: Optional[float] = Field(
        default=None, description="(upper - lower) / middle in percent"
    )
    position: Literal["above_upper", "below_lower", "upper_half", "lower_half", "middle"]
    interpretation: str

    model_config = {"frozen": True}


class ADXReading(BaseModel):
    """ADX and directional indicators with trend-strength classification."""

    adx: IndicatorValue
    plus_di: IndicatorValue
    minus_di: IndicatorValue
    strength: Literal["very strong", "strong", "moderate", "weak"]
    direction: Literal["bullish", "bearish", "neutral"]
    interpretation: str

    model_config = {"frozen": True}


class VolatilityReading(BaseModel):
    """Historical volatility, ATR and risk-adjusted return."""

    annualized_volatility: float = Field(..., ge=0, description="Annualized volatility in percent")
    daily_volatility: float = Field(..., ge=0, description="Sample stdev of returns")
    mean_return: float = Field(..., description="Mean simple return per candle")
    atr: float = Field(..., ge=0, description="Mean true range over the window")
    atr_percent: Optional[float] = Field(default=None, description="ATR as percent of last close")
    sharpe_ratio: Optional[float] = Field(
        default=None, description="None when returns have zero deviation"
    )
    risk: Literal["low", "moderate", "high", "very high"]
    interpretation: str

    model_config = {"frozen": True}
