"""Monitor state as reported to display configuration clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

_LAPTOP_PREFIXES = ("eDP-", "LVDS", "DSI-")


@dataclass
class Monitor:
    """A physical monitor: (connector, vendor, product, serial) names and modes."""

    names: tuple[str, str, str, str]
    modes: list[Any] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class LogicalMonitor:
    """A region of the desktop shown on one or more monitors."""

    x: int = 0
    y: int = 0
    scale: float = 1.0
    transform: int = 0
    is_primary: bool = False
    monitors: list[tuple[str, str, str, str]] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)


def is_laptop_panel(connector: str) -> bool:
    """Whether a connector name looks like a built-in laptop panel."""
    return connector[:4] in _LAPTOP_PREFIXES


def current_state(
    connectors: Iterable[str],
) -> tuple[int, list[Monitor], list[LogicalMonitor], dict[str, Any]]:
    """Build the (serial, monitors, logical monitors, properties) state."""
    monitors = []
    for connector in connectors:
        builtin = is_laptop_panel(connector)
        properties: dict[str, Any] = {}
        if builtin:
            properties["display-name"] = "Built-in display"
        properties["is-builtin"] = builtin
        # The connector doubles as the serial, which session restore requires.
        monitors.append(
            Monitor(names=(connector, "", "", connector), properties=properties)
        )

    monitors.sort(key=lambda m: ("display-name" not in m.properties, m.names[0]))

    logical_monitors = [LogicalMonitor(monitors=[m.names]) for m in monitors]
    return 0, monitors, logical_monitors, {}