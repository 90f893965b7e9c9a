"""Price-level models: pivots, support/resistance and Fibonacci projections."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class PivotPoint(BaseModel):
    """A local price extremum."""

    price: float = Field(..., ge=0, description="Pivot price")
    timestamp: int = Field(..., ge=0, description="Timestamp of the pivot candle")
    kind: Literal["high", "low"] = Field(..., description="Pivot high or pivot low")

    model_config = {"frozen": True}


class Level(BaseModel):
    """A cluster of pivots acting as support or resistance."""

    price: float = Field(..., description="Mean price of the cluster")
    touches: int = Field(..., ge=1, description="Number of pivots in the cluster")
    last_touch: int = Field(..., description="Most recent pivot timestamp")

    model_config = {"frozen": True}


class SupportResistance(BaseModel):
    """Clustered levels around the current price."""

    current_price: float
    support: list[Level] = Field(default_factory=list, description="Levels below price")
    resistance: list[Level] = Field(default_factory=list, description="Levels above price")
    nearest_support: Optional[Level] = None
    nearest_resistance: Optional[Level] = None

    model_config = {"frozen": True}


class FibonacciLevel(BaseModel):
    """One projected Fibonacci price."""

    ratio: float
    price: float
    significant: bool = Field(
        default=False, description="Current price is within 1% of this level"
    )

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.ratio * 100:.1f}%"


class FibonacciProjection(BaseModel):
    """Retracement and extension levels for a swing."""

    high: float
    low: float
    direction: Literal["UP", "DOWN"]
    current_price: Optional[float] = None
    retracements: list[FibonacciLevel]
    extensions: list[FibonacciLevel]

    model_config = {"frozen": True}

    @property
    def significant_levels(self) -> list[FibonacciLevel]:
        return [lvl for lvl in self.retracements + self.extensions if lvl.significant]

    def retracement(self, ratio: float) -> FibonacciLevel:
        """Look up a retracement level by ratio."""
        for lvl in self.retracements:
            if abs(lvl.ratio - ratio) < 1e-9:
                return lvl
        raise KeyError(f"No retracement level for ratio {ratio}")


class FloorPivots(BaseModel):
    """Classic floor-trader pivot levels from one candle."""

    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float

    model_config = {"frozen": True}
