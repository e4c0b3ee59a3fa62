"""State and placement of the config error notification and exit dialog."""

from __future__ import annotations

import enum
import math

from niri.animation import Animation

CONFIG_ERROR_TEXT = (
    "Failed to parse the config file. "
    "Please run <span face='monospace' bgcolor='#000000'>niri validate</span> "
    "to see the errors."
)
CONFIG_ERROR_PADDING = 8
CONFIG_ERROR_FONT = "sans 14px"
CONFIG_ERROR_BORDER = 4

EXIT_CONFIRM_TEXT = (
    "Are you sure you want to exit niri?\n\n"
    "Press <span face='mono' bgcolor='#2C2C2C'> Enter </span> to confirm."
)
EXIT_CONFIRM_PADDING = 16
EXIT_CONFIRM_FONT = "sans 14px"
EXIT_CONFIRM_BORDER = 8

ANIMATION_DURATION_NS = 250_000_000
SHOWN_DURATION_NS = 4_000_000_000


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class NotificationState(enum.Enum):
    HIDDEN = "hidden"
    SHOWING = "showing"
    SHOWN = "shown"
    HIDING = "hiding"


class ConfigErrorNotification:
    """A notification that slides in from the top when the config fails to parse."""

    def __init__(self) -> None:
        self.state = NotificationState.HIDDEN
        self._animation: Animation | None = None
        self._deadline_ns: int | None = None

    def show(self, now_ns: int | None = None) -> None:
        """Show the notification, restarting the animation even if already shown."""
        self.state = NotificationState.SHOWING
        self._animation = Animation(0.0, 1.0, ANIMATION_DURATION_NS, now_ns)
        self._deadline_ns = None

    def hide(self, now_ns: int | None = None) -> None:
        """Start hiding the notification unless it is already hidden."""
        if self.state is NotificationState.HIDDEN:
            return
        self.state = NotificationState.HIDING
        self._animation = Animation(1.0, 0.0, ANIMATION_DURATION_NS, now_ns)
        self._deadline_ns = None

    def advance_animations(self, target_presentation_time_ns: int) -> None:
        """Move the state machine forward to the given presentation time."""
        t = target_presentation_time_ns
        if self.state is NotificationState.SHOWING:
            assert self._animation is not None
            self._animation.set_current_time(t)
            if self._animation.is_done():
                self.state = NotificationState.SHOWN
                self._animation = None
                self._deadline_ns = t + SHOWN_DURATION_NS
        elif self.state is NotificationState.SHOWN:
            assert self._deadline_ns is not None
            if t >= self._deadline_ns:
                self.hide(t)
        elif self.state is NotificationState.HIDING:
            assert self._animation is not None
            self._animation.set_current_time(t)
            if self._animation.is_done():
                self.state = NotificationState.HIDDEN
                self._animation = None

    def are_animations_ongoing(self) -> bool:
        return self.state is not NotificationState.HIDDEN

    def position(
        self, output_width: int, buffer_width: int, buffer_height: int, scale: int
    ) -> tuple[int, int] | None:
        """Top-left corner of the notification in physical pixels, or None if hidden."""
        if self.state is NotificationState.HIDDEN:
            return None

        x = max(output_width // 2 - buffer_width // 2, 0)
        if self.state is NotificationState.SHOWN:
            y = CONFIG_ERROR_PADDING * 2 * scale
        else:
            assert self._animation is not None
            y_range = buffer_height + CONFIG_ERROR_PADDING * 2 * scale
            y = _round_half_away(-buffer_height + self._animation.value() * y_range)
        return x, y


class ExitConfirmDialog:
    """A dialog asking the user to confirm exiting."""

    def __init__(self) -> None:
        self._is_open = False

    def show(self) -> bool:
        """Open the dialog; return whether it was closed before."""
        if self._is_open:
            return False
        self._is_open = True
        return True

    def hide(self) -> bool:
        """Close the dialog; return whether it was open before."""
        if not self._is_open:
            return False
        self._is_open = False
        return True

    def is_open(self) -> bool:
        return self._is_open

    def position(
        self,
        output_width: int,
        output_height: int,
        buffer_width: int,
        buffer_height: int,
    ) -> tuple[int, int] | None:
        """Top-left corner that centres the dialog, or None if closed."""
        if not self._is_open:
            return None
        x = max(output_width // 2 - buffer_width // 2, 0)
        y = max(output_height // 2 - buffer_height // 2, 0)
        return x, y