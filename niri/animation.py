"""Time-based animations with an ease-out-cubic curve."""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass
class _Slowdown:
    factor: float = 1.0


_SLOWDOWN = _Slowdown()


def monotonic_time_ns() -> int:
    """Return the current monotonic clock time in nanoseconds."""
    return time.monotonic_ns()


def animation_slowdown() -> float:
    """Return the global factor by which animation durations are multiplied."""
    return _SLOWDOWN.factor


def set_animation_slowdown(factor: float) -> None:
    """Set the global factor by which new animation durations are multiplied."""
    _SLOWDOWN.factor = float(factor)


def ease_out_cubic(x: float) -> float:
    """Ease-out cubic curve mapping [0, 1] onto [0, 1]."""
    x_minus_one = x - 1.0
    return x_minus_one**3 + 1.0


class Animation:
    """An animation of a value from one number to another over a duration."""

    def __init__(
        self,
        from_value: float,
        to_value: float,
        duration_ns: int,
        now_ns: int | None = None,
    ) -> None:
        if now_ns is None:
            now_ns = monotonic_time_ns()
        self.from_value = float(from_value)
        self.to_value = float(to_value)
        self.duration_ns = int(duration_ns * animation_slowdown())
        self.start_time_ns = now_ns
        self.current_time_ns = now_ns

    def __repr__(self) -> str:
        return (
            f"Animation(from_value={self.from_value}, to_value={self.to_value}, "
            f"duration_ns={self.duration_ns}, start_time_ns={self.start_time_ns}, "
            f"current_time_ns={self.current_time_ns})"
        )

    def set_current_time(self, time_ns: int) -> None:
        """Set the time at which the animation is sampled."""
        self.current_time_ns = time_ns

    def is_done(self) -> bool:
        """Whether the current time has reached the end of the animation."""
        return self.current_time_ns >= self.start_time_ns + self.duration_ns

    def value(self) -> float:
        """The animated value at the current time."""
        if self.duration_ns <= 0:
            x = 1.0
        else:
            passed = self.current_time_ns - self.start_time_ns
            x = min(max(passed / self.duration_ns, 0.0), 1.0)
        return ease_out_cubic(x) * (self.to_value - self.from_value) + self.from_value