"""
Velocity & Ratio Helpers
────────────────────────
Pure numeric helpers shared by the strategies and by the CLI's velocity column.

  velocity  = lines changed per minute between two commits
  near-int  = whether a ratio sits suspiciously close to a whole number
"""

from dataclasses import dataclass
from datetime import timedelta

from cadence_cli.errors import InvalidTimeDeltaError


@dataclass(frozen=True)
class VelocityMetrics:
    loc_per_minute: float


def calculate_velocity(loc: int, time_delta: timedelta) -> float:
    """Lines per minute over ``time_delta``.

    A zero or negative gap is an error, never a zero velocity.
    """
    seconds = time_delta.total_seconds()
    if seconds <= 0:
        raise InvalidTimeDeltaError(f"invalid time delta: {time_delta} (must be positive)")
    return loc / (seconds / 60.0)


def calculate_velocity_metrics(loc: int, time_delta: timedelta) -> VelocityMetrics:
    return VelocityMetrics(loc_per_minute=calculate_velocity(loc, time_delta))


def is_near_integer(value: float, tolerance: float) -> bool:
    remainder = value - int(value)
    return remainder < tolerance or remainder > (1.0 - tolerance)


def safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0
