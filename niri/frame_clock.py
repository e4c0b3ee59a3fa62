"""Prediction of the next presentation time from past presentations."""

from __future__ import annotations

import logging

from niri.animation import monotonic_time_ns

_log = logging.getLogger(__name__)

_NS_PER_SEC = 1_000_000_000


class FrameClock:
    """Tracks presentation times and predicts the next one."""

    def __init__(self, refresh_interval_ns: int | None) -> None:
        if refresh_interval_ns is not None:
            if refresh_interval_ns >= _NS_PER_SEC:
                raise ValueError("refresh interval must be shorter than one second")
            if refresh_interval_ns <= 0:
                raise ValueError("refresh interval must be positive")
        self._refresh_interval_ns = refresh_interval_ns
        self.last_presentation_time_ns: int | None = None

    def __repr__(self) -> str:
        return (
            f"FrameClock(refresh_interval_ns={self._refresh_interval_ns}, "
            f"last_presentation_time_ns={self.last_presentation_time_ns})"
        )

    def refresh_interval_ns(self) -> int | None:
        """The refresh interval in nanoseconds, if known."""
        return self._refresh_interval_ns

    def presented(self, presentation_time_ns: int) -> None:
        """Record a presentation time; zero times are ignored."""
        if presentation_time_ns == 0:
            return
        self.last_presentation_time_ns = presentation_time_ns

    def next_presentation_time(self, now_ns: int | None = None) -> int:
        """Predict the next presentation time after ``now_ns``."""
        now = monotonic_time_ns() if now_ns is None else now_ns

        interval = self._refresh_interval_ns
        last = self.last_presentation_time_ns
        if interval is None or last is None:
            return now

        if now <= last:
            # Got an early VBlank.
            orig_now = now
            now += interval
            if now < last:
                _log.error(
                    "got a 2+ early VBlank, %d ns until presentation "
                    "(now=%d, last_presentation_time=%d)",
                    last - now,
                    orig_now,
                    last,
                )
                now = last + interval

        since_last = now - last
        to_next = (since_last // interval + 1) * interval
        return last + to_next