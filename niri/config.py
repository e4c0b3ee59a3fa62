"""The compositor configuration and its decoding from a KDL document."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Union

from niri.kdl import ConfigError, KdlNode, parse_document
from niri.keys import Key

_log = logging.getLogger(__name__)

DEFAULT_SCREENSHOT_PATH = "~/Pictures/Screenshots/Screenshot from %Y-%m-%d %H-%M-%S.png"

_U8_MAX = 0xFF
_U16_MAX = 0xFFFF
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

_UINT_RE = re.compile(r"\+?[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)


def _parse_int(text: str, minimum: int, maximum: int, what: str) -> int:
    pattern = _UINT_RE if minimum >= 0 else _INT_RE
    if not pattern.fullmatch(text):
        raise ConfigError(f"error parsing {what}: invalid integer {text!r}")
    value = int(text)
    if not minimum <= value <= maximum:
        raise ConfigError(f"error parsing {what}: {value} out of range")
    return value


def _parse_float(text: str, what: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ConfigError(f"error parsing {what}: invalid number {text!r}")
    return float(text)


class CenterFocusedColumn(enum.Enum):
    """When to center the focused column."""

    NEVER = "never"
    ALWAYS = "always"
    ON_OVERFLOW = "on-overflow"


class TrackLayout(enum.Enum):
    """Whether keyboard layout changes are global or per window."""

    GLOBAL = "global"
    WINDOW = "window"


class AccelProfile(enum.Enum):
    """Pointer acceleration profile."""

    ADAPTIVE = "adaptive"
    FLAT = "flat"

    @classmethod
    def parse(cls, text: str) -> AccelProfile:
        try:
            return cls(text)
        except ValueError:
            raise ConfigError(
                'invalid accel profile, can be "adaptive" or "flat"'
            ) from None


class TapButtonMap(enum.Enum):
    """Mapping of multi-finger taps to buttons."""

    LEFT_RIGHT_MIDDLE = "left-right-middle"
    LEFT_MIDDLE_RIGHT = "left-middle-right"

    @classmethod
    def parse(cls, text: str) -> TapButtonMap:
        try:
            return cls(text)
        except ValueError:
            raise ConfigError(
                'invalid tap button map, can be "left-right-middle" or '
                '"left-middle-right"'
            ) from None


@dataclass
class Xkb:
    rules: str = ""
    model: str = ""
    layout: str | None = None
    variant: str = ""
    options: str | None = None

    def to_xkb_config(self) -> dict[str, Any]:
        """Keymap names, with the layout defaulting to ``us``."""
        return {
            "rules": self.rules,
            "model": self.model,
            "layout": self.layout if self.layout is not None else "us",
            "variant": self.variant,
            "options": self.options,
        }


@dataclass
class Keyboard:
    xkb: Xkb = field(default_factory=Xkb)
    repeat_delay: int = 600
    repeat_rate: int = 25
    track_layout: TrackLayout = TrackLayout.GLOBAL


@dataclass
class Touchpad:
    tap: bool = False
    dwt: bool = False
    natural_scroll: bool = False
    accel_speed: float = 0.0
    accel_profile: AccelProfile | None = None
    tap_button_map: TapButtonMap | None = None


@dataclass
class Mouse:
    natural_scroll: bool = False
    accel_speed: float = 0.0
    accel_profile: AccelProfile | None = None


@dataclass
class Tablet:
    map_to_output: str | None = None


@dataclass
class Input:
    keyboard: Keyboard = field(default_factory=Keyboard)
    touchpad: Touchpad = field(default_factory=Touchpad)
    mouse: Mouse = field(default_factory=Mouse)
    tablet: Tablet = field(default_factory=Tablet)
    disable_power_key_handling: bool = False


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class Mode:
    """An output mode written as ``WIDTHxHEIGHT`` or ``WIDTHxHEIGHT@REFRESH``."""

    width: int
    height: int
    refresh: float | None = None

    @classmethod
    def parse(cls, text: str) -> Mode:
        width, sep, rest = text.partition("x")
        if not sep:
            raise ConfigError("no 'x' separator found")
        height, at, refresh = rest.partition("@")
        return cls(
            width=_parse_int(width, 0, _U16_MAX, "width"),
            height=_parse_int(height, 0, _U16_MAX, "height"),
            refresh=_parse_float(refresh, "refresh rate") if at else None,
        )


@dataclass
class Output:
    name: str = ""
    off: bool = False
    scale: float = 1.0
    position: Position | None = None
    mode: Mode | None = None


@dataclass(frozen=True)
class Color:
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def to_rgba_floats(self) -> tuple[float, float, float, float]:
        """The components scaled to the range [0, 1]."""
        return (self.r / 255, self.g / 255, self.b / 255, self.a / 255)


@dataclass(frozen=True)
class FocusRing:
    off: bool = False
    width: int = 4
    active_color: Color = field(default_factory=lambda: Color(127, 200, 255, 255))
    inactive_color: Color = field(default_factory=lambda: Color(80, 80, 80, 255))


def default_border() -> FocusRing:
    """The border used when the layout does not configure one."""
    return FocusRing(
        off=True,
        width=4,
        active_color=Color(255, 200, 127, 255),
        inactive_color=Color(80, 80, 80, 255),
    )


@dataclass(frozen=True)
class Proportion:
    """A column width as a proportion of the output width."""

    value: float


@dataclass(frozen=True)
class Fixed:
    """A column width in logical pixels."""

    value: int


PresetWidth = Union[Proportion, Fixed]


@dataclass
class DefaultColumnWidth:
    widths: list[PresetWidth] = field(default_factory=list)


@dataclass(frozen=True)
class Struts:
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0


@dataclass
class Layout:
    focus_ring: FocusRing = field(default_factory=FocusRing)
    border: FocusRing = field(default_factory=default_border)
    preset_column_widths: list[PresetWidth] = field(default_factory=list)
    default_column_width: DefaultColumnWidth | None = None
    center_focused_column: CenterFocusedColumn = CenterFocusedColumn.NEVER
    gaps: int = 16
    struts: Struts = field(default_factory=Struts)


@dataclass
class SpawnAtStartup:
    command: list[str] = field(default_factory=list)


@dataclass
class Cursor:
    xcursor_theme: str = "default"
    xcursor_size: int = 24


@dataclass(frozen=True)
class HotkeyOverlay:
    skip_at_startup: bool = False


class SizeChangeKind(enum.Enum):
    SET_FIXED = "set-fixed"
    SET_PROPORTION = "set-proportion"
    ADJUST_FIXED = "adjust-fixed"
    ADJUST_PROPORTION = "adjust-proportion"


@dataclass(frozen=True)
class SizeChange:
    """A size to set or an amount to adjust it by, fixed or in percent."""

    kind: SizeChangeKind
    value: float

    @classmethod
    def parse(cls, text: str) -> SizeChange:
        value, percent, rest = text.partition("%")
        if percent and rest:
            raise ConfigError("trailing characters after '%' are not allowed")
        if not value:
            raise ConfigError("value is missing")
        adjust = value[0] in "+-"
        if percent:
            kind = (
                SizeChangeKind.ADJUST_PROPORTION
                if adjust
                else SizeChangeKind.SET_PROPORTION
            )
            return cls(kind, _parse_float(value, "value"))
        kind = SizeChangeKind.ADJUST_FIXED if adjust else SizeChangeKind.SET_FIXED
        return cls(kind, _parse_int(value, _I32_MIN, _I32_MAX, "value"))


class LayoutAction(enum.Enum):
    NEXT = "next"
    PREV = "prev"


class ActionKind(enum.Enum):
    """Actions a key binding can perform; the value is the node name."""

    def _generate_next_value_(name, start, count, last_values):
        return name.lower().replace("_", "-")

    QUIT = enum.auto()
    CHANGE_VT = enum.auto()
    SUSPEND = enum.auto()
    POWER_OFF_MONITORS = enum.auto()
    TOGGLE_DEBUG_TINT = enum.auto()
    SPAWN = enum.auto()
    CONFIRM_SCREENSHOT = enum.auto()
    CANCEL_SCREENSHOT = enum.auto()
    SCREENSHOT = enum.auto()
    SCREENSHOT_SCREEN = enum.auto()
    SCREENSHOT_WINDOW = enum.auto()
    CLOSE_WINDOW = enum.auto()
    FULLSCREEN_WINDOW = enum.auto()
    FOCUS_COLUMN_LEFT = enum.auto()
    FOCUS_COLUMN_RIGHT = enum.auto()
    FOCUS_COLUMN_FIRST = enum.auto()
    FOCUS_COLUMN_LAST = enum.auto()
    FOCUS_WINDOW_DOWN = enum.auto()
    FOCUS_WINDOW_UP = enum.auto()
    FOCUS_WINDOW_OR_WORKSPACE_DOWN = enum.auto()
    FOCUS_WINDOW_OR_WORKSPACE_UP = enum.auto()
    MOVE_COLUMN_LEFT = enum.auto()
    MOVE_COLUMN_RIGHT = enum.auto()
    MOVE_COLUMN_TO_FIRST = enum.auto()
    MOVE_COLUMN_TO_LAST = enum.auto()
    MOVE_WINDOW_DOWN = enum.auto()
    MOVE_WINDOW_UP = enum.auto()
    MOVE_WINDOW_DOWN_OR_TO_WORKSPACE_DOWN = enum.auto()
    MOVE_WINDOW_UP_OR_TO_WORKSPACE_UP = enum.auto()
    CONSUME_WINDOW_INTO_COLUMN = enum.auto()
    EXPEL_WINDOW_FROM_COLUMN = enum.auto()
    CENTER_COLUMN = enum.auto()
    FOCUS_WORKSPACE_DOWN = enum.auto()
    FOCUS_WORKSPACE_UP = enum.auto()
    FOCUS_WORKSPACE = enum.auto()
    MOVE_WINDOW_TO_WORKSPACE_DOWN = enum.auto()
    MOVE_WINDOW_TO_WORKSPACE_UP = enum.auto()
    MOVE_WINDOW_TO_WORKSPACE = enum.auto()
    MOVE_COLUMN_TO_WORKSPACE_DOWN = enum.auto()
    MOVE_COLUMN_TO_WORKSPACE_UP = enum.auto()
    MOVE_COLUMN_TO_WORKSPACE = enum.auto()
    MOVE_WORKSPACE_DOWN = enum.auto()
    MOVE_WORKSPACE_UP = enum.auto()
    FOCUS_MONITOR_LEFT = enum.auto()
    FOCUS_MONITOR_RIGHT = enum.auto()
    FOCUS_MONITOR_DOWN = enum.auto()
    FOCUS_MONITOR_UP = enum.auto()
    MOVE_WINDOW_TO_MONITOR_LEFT = enum.auto()
    MOVE_WINDOW_TO_MONITOR_RIGHT = enum.auto()
    MOVE_WINDOW_TO_MONITOR_DOWN = enum.auto()
    MOVE_WINDOW_TO_MONITOR_UP = enum.auto()
    MOVE_COLUMN_TO_MONITOR_LEFT = enum.auto()
    MOVE_COLUMN_TO_MONITOR_RIGHT = enum.auto()
    MOVE_COLUMN_TO_MONITOR_DOWN = enum.auto()
    MOVE_COLUMN_TO_MONITOR_UP = enum.auto()
    SET_WINDOW_HEIGHT = enum.auto()
    SWITCH_PRESET_COLUMN_WIDTH = enum.auto()
    MAXIMIZE_COLUMN = enum.auto()
    SET_COLUMN_WIDTH = enum.auto()
    SWITCH_LAYOUT = enum.auto()
    SHOW_HOTKEY_OVERLAY = enum.auto()


@dataclass(frozen=True)
class Action:
    """An action with its argument, if the kind takes one.

    Spawn takes a tuple of strings, workspace actions an index, size actions a
    ``SizeChange`` and layout switching a ``LayoutAction``.
    """

    kind: ActionKind
    argument: Any = None


@dataclass
class Bind:
    key: Key
    actions: list[Action] = field(default_factory=list)


@dataclass
class DebugConfig:
    animation_slowdown: float = 1.0
    dbus_interfaces_in_non_session_instances: bool = False
    wait_for_frame_completion_before_queueing: bool = False
    enable_color_transformations_capability: bool = False
    enable_overlay_planes: bool = False
    disable_cursor_plane: bool = False
    render_drm_device: Path | None = None


@dataclass
class Config:
    input: Input = field(default_factory=Input)
    outputs: list[Output] = field(default_factory=list)
    spawn_at_startup: list[SpawnAtStartup] = field(default_factory=list)
    layout: Layout = field(default_factory=Layout)
    prefer_no_csd: bool = False
    cursor: Cursor = field(default_factory=Cursor)
    screenshot_path: str | None = DEFAULT_SCREENSHOT_PATH
    hotkey_overlay: HotkeyOverlay = field(default_factory=HotkeyOverlay)
    binds: list[Bind] = field(default_factory=list)
    debug: DebugConfig = field(default_factory=DebugConfig)

    @classmethod
    def parse(cls, text: str, filename: str = "config.kdl") -> Config:
        """Parse and decode a configuration document."""
        try:
            return _decode_config(parse_document(text))
        except ConfigError as err:
            raise ConfigError(f"{filename}: {err.message}", err.line, err.column) from err

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """Read and parse the configuration file at ``path``."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise ConfigError(
                f"error loading config: error reading {str(path)!r}: {err}"
            ) from err
        try:
            config = cls.parse(text, "config.kdl")
        except ConfigError as err:
            raise ConfigError(
                f"error loading config: error parsing: {err.message}",
                err.line,
                err.column,
            ) from err
        _log.debug("loaded config from %s", path)
        return config


# Decoding of KDL nodes.

Converter = Callable[[Any, KdlNode], Any]


def _error(node: KdlNode, message: str) -> ConfigError:
    return ConfigError(message, node.line, node.column)


def _reject_arguments(node: KdlNode) -> None:
    if node.arguments:
        raise _error(node, f"unexpected argument in node {node.name!r}")


def _reject_properties(node: KdlNode) -> None:
    if node.properties:
        key = next(iter(node.properties))
        raise _error(node, f"unexpected property {key!r} in node {node.name!r}")


def _reject_children(node: KdlNode) -> None:
    if node.children:
        raise _error(node, f"unexpected children in node {node.name!r}")


def _reject_entries(node: KdlNode) -> None:
    _reject_arguments(node)
    _reject_properties(node)


def _children(
    node: KdlNode, single: Iterable[str], repeated: Iterable[str] = ()
) -> dict[str, KdlNode]:
    single = set(single)
    repeated = set(repeated)
    found: dict[str, KdlNode] = {}
    for child in node.children:
        if child.name in repeated:
            continue
        if child.name not in single:
            raise _error(child, f"unexpected node {child.name!r}")
        if child.name in found:
            raise _error(child, f"duplicate node {child.name!r}")
        found[child.name] = child
    return found


def _single_argument(node: KdlNode) -> Any:
    _reject_properties(node)
    _reject_children(node)
    if len(node.arguments) != 1:
        raise _error(node, f"node {node.name!r} expects exactly one argument")
    return node.arguments[0]


def _integer(minimum: int, maximum: int) -> Converter:
    def convert(value: Any, node: KdlNode) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _error(node, f"expected an integer in node {node.name!r}")
        if not minimum <= value <= maximum:
            raise _error(
                node, f"value {value} out of range {minimum}..={maximum}"
            )
        return value

    return convert


_U8 = _integer(0, _U8_MAX)
_U16 = _integer(0, _U16_MAX)
_I32 = _integer(_I32_MIN, _I32_MAX)


def _float(value: Any, node: KdlNode) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _error(node, f"expected a number in node {node.name!r}")
    return float(value)


def _string(value: Any, node: KdlNode) -> str:
    if not isinstance(value, str):
        raise _error(node, f"expected a string in node {node.name!r}")
    return value


def _path(value: Any, node: KdlNode) -> Path:
    return Path(_string(value, node))


def _optional(convert: Converter) -> Converter:
    def wrapped(value: Any, node: KdlNode) -> Any:
        return None if value is None else convert(value, node)

    return wrapped


def _parsed(parse: Callable[[str], Any]) -> Converter:
    def convert(value: Any, node: KdlNode) -> Any:
        text = _string(value, node)
        try:
            return parse(text)
        except ConfigError as err:
            raise ConfigError(err.message, node.line, node.column) from err

    return convert


def _scalar_enum(enum_cls: type[enum.Enum]) -> Converter:
    def convert(value: Any, node: KdlNode) -> Any:
        if isinstance(value, str):
            try:
                return enum_cls(value)
            except ValueError:
                pass
        names = ", ".join(repr(member.value) for member in enum_cls)
        raise _error(node, f"expected one of {names}")

    return convert


def _flag(found: dict[str, KdlNode], name: str) -> bool:
    node = found.get(name)
    if node is None:
        return False
    _reject_entries(node)
    _reject_children(node)
    return True


def _value(found: dict[str, KdlNode], name: str, convert: Converter, default: Any) -> Any:
    node = found.get(name)
    if node is None:
        return default
    return convert(_single_argument(node), node)


def _child(
    found: dict[str, KdlNode],
    name: str,
    decode: Callable[[KdlNode], Any],
    default: Callable[[], Any],
) -> Any:
    node = found.get(name)
    return default() if node is None else decode(node)


def _decode_xkb(node: KdlNode) -> Xkb:
    _reject_entries(node)
    found = _children(node, ("rules", "model", "layout", "variant", "options"))
    return Xkb(
        rules=_value(found, "rules", _string, ""),
        model=_value(found, "model", _string, ""),
        layout=_value(found, "layout", _optional(_string), None),
        variant=_value(found, "variant", _string, ""),
        options=_value(found, "options", _optional(_string), None),
    )


def _decode_keyboard(node: KdlNode) -> Keyboard:
    _reject_entries(node)
    found = _children(node, ("xkb", "repeat-delay", "repeat-rate", "track-layout"))
    return Keyboard(
        xkb=_child(found, "xkb", _decode_xkb, Xkb),
        repeat_delay=_value(found, "repeat-delay", _U16, 600),
        repeat_rate=_value(found, "repeat-rate", _U8, 25),
        track_layout=_value(
            found, "track-layout", _scalar_enum(TrackLayout), TrackLayout.GLOBAL
        ),
    )


_ACCEL_PROFILE = _optional(_parsed(AccelProfile.parse))


def _decode_touchpad(node: KdlNode) -> Touchpad:
    _reject_entries(node)
    found = _children(
        node,
        ("tap", "dwt", "natural-scroll", "accel-speed", "accel-profile", "tap-button-map"),
    )
    return Touchpad(
        tap=_flag(found, "tap"),
        dwt=_flag(found, "dwt"),
        natural_scroll=_flag(found, "natural-scroll"),
        accel_speed=_value(found, "accel-speed", _float, 0.0),
        accel_profile=_value(found, "accel-profile", _ACCEL_PROFILE, None),
        tap_button_map=_value(
            found, "tap-button-map", _optional(_parsed(TapButtonMap.parse)), None
        ),
    )


def _decode_mouse(node: KdlNode) -> Mouse:
    _reject_entries(node)
    found = _children(node, ("natural-scroll", "accel-speed", "accel-profile"))
    return Mouse(
        natural_scroll=_flag(found, "natural-scroll"),
        accel_speed=_value(found, "accel-speed", _float, 0.0),
        accel_profile=_value(found, "accel-profile", _ACCEL_PROFILE, None),
    )


def _decode_tablet(node: KdlNode) -> Tablet:
    _reject_entries(node)
    found = _children(node, ("map-to-output",))
    return Tablet(map_to_output=_value(found, "map-to-output", _optional(_string), None))


def _decode_input(node: KdlNode) -> Input:
    _reject_entries(node)
    found = _children(
        node, ("keyboard", "touchpad", "mouse", "tablet", "disable-power-key-handling")
    )
    return Input(
        keyboard=_child(found, "keyboard", _decode_keyboard, Keyboard),
        touchpad=_child(found, "touchpad", _decode_touchpad, Touchpad),
        mouse=_child(found, "mouse", _decode_mouse, Mouse),
        tablet=_child(found, "tablet", _decode_tablet, Tablet),
        disable_power_key_handling=_flag(found, "disable-power-key-handling"),
    )


def _decode_position(node: KdlNode) -> Position:
    _reject_arguments(node)
    _reject_children(node)
    for key in node.properties:
        if key not in ("x", "y"):
            raise _error(node, f"unexpected property {key!r} in node {node.name!r}")
    coordinates = []
    for key in ("x", "y"):
        if key not in node.properties:
            raise _error(node, f"property {key!r} is required")
        coordinates.append(_I32(node.properties[key], node))
    return Position(*coordinates)


def _decode_output(node: KdlNode) -> Output:
    _reject_properties(node)
    if len(node.arguments) != 1:
        raise _error(node, "node 'output' expects exactly one argument")
    found = _children(node, ("off", "scale", "position", "mode"))
    return Output(
        name=_string(node.arguments[0], node),
        off=_flag(found, "off"),
        scale=_value(found, "scale", _float, 1.0),
        position=_child(found, "position", _decode_position, lambda: None),
        mode=_value(found, "mode", _optional(_parsed(Mode.parse)), None),
    )


def _decode_color(node: KdlNode) -> Color:
    _reject_properties(node)
    _reject_children(node)
    if len(node.arguments) != 4:
        raise _error(node, f"node {node.name!r} expects four arguments: r g b a")
    return Color(*(_U8(value, node) for value in node.arguments))


def _decode_focus_ring(node: KdlNode) -> FocusRing:
    _reject_entries(node)
    found = _children(node, ("off", "width", "active-color", "inactive-color"))
    base = FocusRing()
    return FocusRing(
        off=_flag(found, "off"),
        width=_value(found, "width", _U16, base.width),
        active_color=_child(
            found, "active-color", _decode_color, lambda: base.active_color
        ),
        inactive_color=_child(
            found, "inactive-color", _decode_color, lambda: base.inactive_color
        ),
    )


def _decode_preset_width(node: KdlNode) -> PresetWidth:
    if node.name == "proportion":
        return Proportion(_float(_single_argument(node), node))
    if node.name == "fixed":
        return Fixed(_I32(_single_argument(node), node))
    raise _error(node, f"unexpected node {node.name!r}, expected 'proportion' or 'fixed'")


def _decode_preset_widths(node: KdlNode) -> list[PresetWidth]:
    _reject_entries(node)
    return [_decode_preset_width(child) for child in node.children]


def _decode_default_column_width(node: KdlNode) -> DefaultColumnWidth:
    return DefaultColumnWidth(_decode_preset_widths(node))


def _decode_struts(node: KdlNode) -> Struts:
    _reject_entries(node)
    found = _children(node, ("left", "right", "top", "bottom"))
    return Struts(
        left=_value(found, "left", _U16, 0),
        right=_value(found, "right", _U16, 0),
        top=_value(found, "top", _U16, 0),
        bottom=_value(found, "bottom", _U16, 0),
    )


def _decode_layout(node: KdlNode) -> Layout:
    _reject_entries(node)
    found = _children(
        node,
        (
            "focus-ring",
            "border",
            "preset-column-widths",
            "default-column-width",
            "center-focused-column",
            "gaps",
            "struts",
        ),
    )
    return Layout(
        focus_ring=_child(found, "focus-ring", _decode_focus_ring, FocusRing),
        border=_child(found, "border", _decode_focus_ring, default_border),
        preset_column_widths=_child(
            found, "preset-column-widths", _decode_preset_widths, list
        ),
        default_column_width=_child(
            found, "default-column-width", _decode_default_column_width, lambda: None
        ),
        center_focused_column=_value(
            found,
            "center-focused-column",
            _scalar_enum(CenterFocusedColumn),
            CenterFocusedColumn.NEVER,
        ),
        gaps=_value(found, "gaps", _U16, 16),
        struts=_child(found, "struts", _decode_struts, Struts),
    )


def _decode_spawn_at_startup(node: KdlNode) -> SpawnAtStartup:
    _reject_properties(node)
    _reject_children(node)
    return SpawnAtStartup([_string(value, node) for value in node.arguments])


def _decode_cursor(node: KdlNode) -> Cursor:
    _reject_entries(node)
    found = _children(node, ("xcursor-theme", "xcursor-size"))
    return Cursor(
        xcursor_theme=_value(found, "xcursor-theme", _string, "default"),
        xcursor_size=_value(found, "xcursor-size", _U8, 24),
    )


def _decode_hotkey_overlay(node: KdlNode) -> HotkeyOverlay:
    _reject_entries(node)
    found = _children(node, ("skip-at-startup",))
    return HotkeyOverlay(skip_at_startup=_flag(found, "skip-at-startup"))


_UNDECODABLE_ACTIONS = frozenset(
    {ActionKind.CHANGE_VT, ActionKind.CONFIRM_SCREENSHOT, ActionKind.CANCEL_SCREENSHOT}
)

_SIZE_CHANGE = _parsed(SizeChange.parse)

_ACTION_ARGUMENTS: dict[ActionKind, Converter] = {
    ActionKind.FOCUS_WORKSPACE: _U8,
    ActionKind.MOVE_WINDOW_TO_WORKSPACE: _U8,
    ActionKind.MOVE_COLUMN_TO_WORKSPACE: _U8,
    ActionKind.SET_WINDOW_HEIGHT: _SIZE_CHANGE,
    ActionKind.SET_COLUMN_WIDTH: _SIZE_CHANGE,
    ActionKind.SWITCH_LAYOUT: _scalar_enum(LayoutAction),
}


def _decode_action(node: KdlNode) -> Action:
    try:
        kind = ActionKind(node.name)
    except ValueError:
        kind = None
    if kind is None or kind in _UNDECODABLE_ACTIONS:
        raise _error(node, f"unexpected node {node.name!r}")

    _reject_children(node)
    if kind is ActionKind.SPAWN:
        _reject_properties(node)
        return Action(kind, tuple(_string(value, node) for value in node.arguments))

    convert = _ACTION_ARGUMENTS.get(kind)
    if convert is None:
        _reject_entries(node)
        return Action(kind)
    return Action(kind, convert(_single_argument(node), node))


def _decode_bind(node: KdlNode) -> Bind:
    _reject_entries(node)
    try:
        key = Key.parse(node.name)
    except ConfigError as err:
        raise ConfigError(err.message, node.line, node.column) from err
    return Bind(key, [_decode_action(child) for child in node.children])


def _decode_binds(node: KdlNode) -> list[Bind]:
    _reject_entries(node)
    return [_decode_bind(child) for child in node.children]


def _decode_debug(node: KdlNode) -> DebugConfig:
    _reject_entries(node)
    found = _children(
        node,
        (
            "animation-slowdown",
            "dbus-interfaces-in-non-session-instances",
            "wait-for-frame-completion-before-queueing",
            "enable-color-transformations-capability",
            "enable-overlay-planes",
            "disable-cursor-plane",
            "render-drm-device",
        ),
    )
    return DebugConfig(
        animation_slowdown=_value(found, "animation-slowdown", _float, 1.0),
        dbus_interfaces_in_non_session_instances=_flag(
            found, "dbus-interfaces-in-non-session-instances"
        ),
        wait_for_frame_completion_before_queueing=_flag(
            found, "wait-for-frame-completion-before-queueing"
        ),
        enable_color_transformations_capability=_flag(
            found, "enable-color-transformations-capability"
        ),
        enable_overlay_planes=_flag(found, "enable-overlay-planes"),
        disable_cursor_plane=_flag(found, "disable-cursor-plane"),
        render_drm_device=_value(found, "render-drm-device", _optional(_path), None),
    )


def _decode_config(nodes: list[KdlNode]) -> Config:
    root = KdlNode("", children=nodes)
    found = _children(
        root,
        (
            "input",
            "layout",
            "prefer-no-csd",
            "cursor",
            "screenshot-path",
            "hotkey-overlay",
            "binds",
            "debug",
        ),
        repeated=("output", "spawn-at-startup"),
    )
    return Config(
        input=_child(found, "input", _decode_input, Input),
        outputs=[_decode_output(n) for n in nodes if n.name == "output"],
        spawn_at_startup=[
            _decode_spawn_at_startup(n) for n in nodes if n.name == "spawn-at-startup"
        ],
        layout=_child(found, "layout", _decode_layout, Layout),
        prefer_no_csd=_flag(found, "prefer-no-csd"),
        cursor=_child(found, "cursor", _decode_cursor, Cursor),
        screenshot_path=_value(
            found, "screenshot-path", _optional(_string), DEFAULT_SCREENSHOT_PATH
        ),
        hotkey_overlay=_child(found, "hotkey-overlay", _decode_hotkey_overlay, HotkeyOverlay),
        binds=_child(found, "binds", _decode_binds, list),
        debug=_child(found, "debug", _decode_debug, DebugConfig),
    )