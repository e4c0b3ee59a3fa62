"""Types and JSON encoding for communicating with the compositor over IPC."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any

SOCKET_PATH_ENV = "NIRI_SOCKET"
"""Name of the environment variable containing the IPC socket path."""

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF


class Request(enum.Enum):
    """Request from a client to the compositor."""

    OUTPUTS = "Outputs"


def _uint(data: dict[str, Any], key: str, maximum: int) -> int:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    if not 0 <= value <= maximum:
        raise ValueError(f"field {key!r} out of range: {value}")
    return value


def _str(data: dict[str, Any], key: str) -> str:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object")
    return data


@dataclass(frozen=True)
class Mode:
    """Output mode."""

    width: int
    height: int
    refresh_rate: int
    """Refresh rate in millihertz."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "refresh_rate": self.refresh_rate,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Mode:
        data = _require_dict(data, "mode")
        return cls(
            width=_uint(data, "width", _U16_MAX),
            height=_uint(data, "height", _U16_MAX),
            refresh_rate=_uint(data, "refresh_rate", _U32_MAX),
        )


@dataclass
class Output:
    """A connected output."""

    name: str
    make: str
    model: str
    physical_size: tuple[int, int] | None = None
    """Physical width and height in millimeters, if known."""
    modes: list[Mode] = field(default_factory=list)
    current_mode: int | None = None
    """Index of the current mode in ``modes``; ``None`` if the output is disabled."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "make": self.make,
            "model": self.model,
            "physical_size": (
                None if self.physical_size is None else list(self.physical_size)
            ),
            "modes": [mode.to_dict() for mode in self.modes],
            "current_mode": self.current_mode,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Output:
        data = _require_dict(data, "output")

        size = data.get("physical_size")
        physical_size: tuple[int, int] | None
        if size is None:
            physical_size = None
        else:
            if not isinstance(size, (list, tuple)) or len(size) != 2:
                raise ValueError("physical_size must be a pair of integers")
            pair = dict(zip(("width", "height"), size))
            physical_size = (
                _uint(pair, "width", _U32_MAX),
                _uint(pair, "height", _U32_MAX),
            )

        modes = data.get("modes")
        if not isinstance(modes, list):
            raise ValueError("field 'modes' must be a list")

        current = data.get("current_mode")
        if current is not None:
            current = _uint(data, "current_mode", 2**64 - 1)

        return cls(
            name=_str(data, "name"),
            make=_str(data, "make"),
            model=_str(data, "model"),
            physical_size=physical_size,
            modes=[Mode.from_dict(mode) for mode in modes],
            current_mode=current,
        )


def encode_request(request: Request) -> str:
    """Encode a request as JSON."""
    return json.dumps(request.value)


def decode_request(text: str) -> Request:
    """Decode a JSON request; raise ValueError if it is not a known request."""
    value = json.loads(text)
    try:
        return Request(value)
    except (ValueError, TypeError):
        raise ValueError(f"unknown request: {value!r}") from None


def encode_outputs_response(outputs: dict[str, Output]) -> str:
    """Encode an outputs response, a map from connector name to output."""
    return json.dumps(
        {"Outputs": {name: output.to_dict() for name, output in outputs.items()}}
    )


def decode_outputs_response(text: str) -> dict[str, Output]:
    """Decode an outputs response into a map from connector name to output."""
    data = _require_dict(json.loads(text), "response")
    if set(data) != {"Outputs"}:
        raise ValueError("expected an Outputs response")
    outputs = _require_dict(data["Outputs"], "outputs")
    return {name: Output.from_dict(value) for name, value in outputs.items()}