"""Historical-data request validation.

Each supported sampling interval has a fixed maximum request duration and a
maximum look-back age. Requests are checked here before any data fetch so
that known-invalid ranges never reach the market-data provider.
"""

import math
import time
from types import MappingProxyType
from typing import Literal, Optional

from pydantic import BaseModel, Field

from growwta.errors import (
    ConstraintViolationError,
    UnsupportedIntervalError,
)

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30


class IntervalConstraint(BaseModel):
    """Range limits for one sampling interval. None means unbounded."""

    max_duration_days: Optional[int] = Field(default=None, gt=0)
    max_history_months: Optional[int] = Field(default=None, gt=0)

    model_config = {"frozen": True}


INTERVAL_CONSTRAINTS = MappingProxyType({
    1: IntervalConstraint(max_duration_days=3, max_history_months=3),
    5: IntervalConstraint(max_duration_days=15, max_history_months=3),
    10: IntervalConstraint(max_duration_days=30, max_history_months=3),
    60: IntervalConstraint(max_duration_days=150, max_history_months=3),
    240: IntervalConstraint(max_duration_days=365, max_history_months=3),
    1440: IntervalConstraint(max_duration_days=1080),
    10080: IntervalConstraint(),
})

SUPPORTED_INTERVALS = sorted(INTERVAL_CONSTRAINTS)


class RangeCheck(BaseModel):
    """Outcome of a range validation."""

    ok: bool
    reason: Optional[str] = None
    constraint: Optional[
        Literal["unsupported_interval", "range_order", "max_duration", "max_history"]
    ] = None
    limit: Optional[float] = None
    requested: Optional[float] = None

    model_config = {"frozen": True}


def get_constraint(interval_minutes: int) -> IntervalConstraint:
    """Look up the constraint for an interval.

    Raises:
        UnsupportedIntervalError: If the interval is not in the table.
    """
    try:
        return INTERVAL_CONSTRAINTS[interval_minutes]
    except KeyError:
        raise UnsupportedIntervalError(interval_minutes, SUPPORTED_INTERVALS) from None


def validate_range(
    interval_minutes: int,
    start_time: int,
    end_time: int,
    now: Optional[int] = None,
) -> None:
    """Reject a historical-data request that violates its interval's limits.

    Args:
        interval_minutes: Sampling interval in minutes.
        start_time: Range start (epoch seconds).
        end_time: Range end (epoch seconds).
        now: Reference time for the history check; defaults to the clock.

    Raises:
        UnsupportedIntervalError: Interval not in the constraint table.
        ConstraintViolationError: Range inverted, too long, or too old.
    """
    constraint = get_constraint(interval_minutes)
    if now is None:
        now = int(time.time())

    if end_time < start_time:
        raise ConstraintViolationError(
            "range_order",
            limit=start_time,
            requested=end_time,
            message=f"End time {end_time} is before start time {start_time}",
        )

    duration_days = math.ceil((end_time - start_time) / SECONDS_PER_DAY)
    if constraint.max_duration_days is not None and duration_days > constraint.max_duration_days:
        raise ConstraintViolationError(
            "max_duration",
            limit=constraint.max_duration_days,
            requested=duration_days,
            message=(
                f"Requested {duration_days} days of {interval_minutes}-minute candles; "
                f"maximum is {constraint.max_duration_days} days"
            ),
        )

    age_months = (now - start_time) / (DAYS_PER_MONTH * SECONDS_PER_DAY)
    if constraint.max_history_months is not None and age_months > constraint.max_history_months:
        raise ConstraintViolationError(
            "max_history",
            limit=constraint.max_history_months,
            requested=round(age_months, 2),
            message=(
                f"Start time is {age_months:.1f} months old; {interval_minutes}-minute "
                f"candles are only available for the last {constraint.max_history_months} months"
            ),
        )


def check_range(
    interval_minutes: int,
    start_time: int,
    end_time: int,
    now: Optional[int] = None,
) -> RangeCheck:
    """Non-raising form of :func:`validate_range`."""
    try:
        validate_range(interval_minutes, start_time, end_time, now=now)
    except UnsupportedIntervalError as e:
        return RangeCheck(
            ok=False,
            reason=str(e),
            constraint="unsupported_interval",
            requested=interval_minutes,
        )
    except ConstraintViolationError as e:
        return RangeCheck(
            ok=False,
            reason=str(e),
            constraint=e.constraint,
            limit=e.limit,
            requested=e.requested,
        )
    return RangeCheck(ok=True)

