"""Xcursor theme lookup, parsing and a cache of named cursors."""

from __future__ import annotations

import enum
import logging
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path

_log = logging.getLogger(__name__)

IMAGE_TYPE = 0xFFFD0002
"""Chunk type of an image in an Xcursor file."""

_MAGIC = b"Xcur"
_FILE_HEADER = struct.Struct("<III")
_TOC_ENTRY = struct.Struct("<III")
_IMAGE_HEADER = struct.Struct("<9I")
_MAX_DIMENSION = 0x7FFF
_U32_MODULUS = 2**32


class CursorError(Exception):
    """A cursor could not be found, read or parsed."""


class CursorIcon(enum.Enum):
    """Named cursor icons; the value is the standard cursor name."""

    DEFAULT = "default"
    CONTEXT_MENU = "context-menu"
    HELP = "help"
    POINTER = "pointer"
    PROGRESS = "progress"
    WAIT = "wait"
    CELL = "cell"
    CROSSHAIR = "crosshair"
    TEXT = "text"
    VERTICAL_TEXT = "vertical-text"
    ALIAS = "alias"
    COPY = "copy"
    MOVE = "move"
    NO_DROP = "no-drop"
    NOT_ALLOWED = "not-allowed"
    GRAB = "grab"
    GRABBING = "grabbing"
    E_RESIZE = "e-resize"
    N_RESIZE = "n-resize"
    NE_RESIZE = "ne-resize"
    NW_RESIZE = "nw-resize"
    S_RESIZE = "s-resize"
    SE_RESIZE = "se-resize"
    SW_RESIZE = "sw-resize"
    W_RESIZE = "w-resize"
    EW_RESIZE = "ew-resize"
    NS_RESIZE = "ns-resize"
    NESW_RESIZE = "nesw-resize"
    NWSE_RESIZE = "nwse-resize"
    COL_RESIZE = "col-resize"
    ROW_RESIZE = "row-resize"
    ALL_SCROLL = "all-scroll"
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"

    def alt_names(self) -> tuple[str, ...]:
        """Legacy names used by themes that do not follow the standard names."""
        return _ALT_NAMES.get(self, ())


_ALT_NAMES: dict[CursorIcon, tuple[str, ...]] = {
    CursorIcon.DEFAULT: ("left_ptr", "arrow", "top_left_arrow", "left_arrow"),
    CursorIcon.HELP: ("question_arrow",),
    CursorIcon.POINTER: ("hand", "hand1", "hand2", "pointing_hand"),
    CursorIcon.PROGRESS: ("left_ptr_watch",),
    CursorIcon.WAIT: ("watch",),
    CursorIcon.CELL: ("plus",),
    CursorIcon.CROSSHAIR: ("cross",),
    CursorIcon.TEXT: ("xterm", "ibeam"),
    CursorIcon.ALIAS: ("link",),
    CursorIcon.NO_DROP: ("circle",),
    CursorIcon.NOT_ALLOWED: ("crossed_circle",),
    CursorIcon.GRAB: ("openhand", "fleur"),
    CursorIcon.GRABBING: ("closedhand", "fleur"),
    CursorIcon.E_RESIZE: ("right_side",),
    CursorIcon.N_RESIZE: ("top_side",),
    CursorIcon.NE_RESIZE: ("top_right_corner",),
    CursorIcon.NW_RESIZE: ("top_left_corner",),
    CursorIcon.S_RESIZE: ("bottom_side",),
    CursorIcon.SE_RESIZE: ("bottom_right_corner",),
    CursorIcon.SW_RESIZE: ("bottom_left_corner",),
    CursorIcon.W_RESIZE: ("left_side",),
    CursorIcon.EW_RESIZE: ("h_double_arrow", "sb_h_double_arrow"),
    CursorIcon.NS_RESIZE: ("v_double_arrow", "sb_v_double_arrow"),
    CursorIcon.NESW_RESIZE: ("fd_double_arrow", "size_bdiag"),
    CursorIcon.NWSE_RESIZE: ("bd_double_arrow", "size_fdiag"),
    CursorIcon.COL_RESIZE: ("split_h", "h_double_arrow", "sb_h_double_arrow"),
    CursorIcon.ROW_RESIZE: ("split_v", "v_double_arrow", "sb_v_double_arrow"),
    CursorIcon.ALL_SCROLL: ("size_all",),
}


@dataclass(frozen=True)
class XCursorImage:
    """One image of an Xcursor file."""

    size: int
    width: int
    height: int
    xhot: int
    yhot: int
    delay: int
    pixels_rgba: bytes = field(repr=False)
    pixels_argb: bytes = field(default=b"", repr=False)

    def hotspot(self) -> tuple[int, int]:
        """The hotspot of the image in physical pixels."""
        return self.xhot, self.yhot


def _reorder_to_argb(pixels: bytes) -> bytes:
    out = bytearray(len(pixels))
    out[0::4] = pixels[3::4]
    out[1::4] = pixels[0::4]
    out[2::4] = pixels[1::4]
    out[3::4] = pixels[2::4]
    return bytes(out)


def _parse_image(data: bytes, position: int) -> XCursorImage:
    if position + _IMAGE_HEADER.size > len(data):
        raise CursorError("image chunk header out of bounds")
    (
        header_size,
        chunk_type,
        nominal_size,
        _version,
        width,
        height,
        xhot,
        yhot,
        delay,
    ) = _IMAGE_HEADER.unpack_from(data, position)
    if chunk_type != IMAGE_TYPE:
        raise CursorError("table of contents points at a non-image chunk")
    if width > _MAX_DIMENSION or height > _MAX_DIMENSION:
        raise CursorError(f"image too large: {width}x{height}")
    start = position + header_size
    end = start + width * height * 4
    if end > len(data):
        raise CursorError("image pixels out of bounds")
    pixels = data[start:end]
    return XCursorImage(
        size=nominal_size,
        width=width,
        height=height,
        xhot=xhot,
        yhot=yhot,
        delay=delay,
        pixels_rgba=pixels,
        pixels_argb=_reorder_to_argb(pixels),
    )


def parse_xcursor(data: bytes) -> list[XCursorImage]:
    """Parse the images out of the contents of an Xcursor file."""
    data = bytes(data)
    if len(data) < len(_MAGIC) + _FILE_HEADER.size or not data.startswith(_MAGIC):
        raise CursorError("not an Xcursor file")
    header_size, _version, ntoc = _FILE_HEADER.unpack_from(data, len(_MAGIC))
    toc_end = header_size + ntoc * _TOC_ENTRY.size
    if toc_end > len(data):
        raise CursorError("table of contents out of bounds")
    return [
        _parse_image(data, position)
        for chunk_type, _subtype, position in _TOC_ENTRY.iter_unpack(
            data[header_size:toc_end]
        )
        if chunk_type == IMAGE_TYPE
    ]


@dataclass
class XCursor:
    """The frames of a named cursor at one size."""

    images: list[XCursorImage]
    animation_duration: int = 0
    """Total duration of the animation in milliseconds."""

    def __post_init__(self) -> None:
        if not self.images:
            raise CursorError("cursor has no images")

    def frame(self, millis: int) -> tuple[int, XCursorImage]:
        """The index and image to show at the given time; time wraps around."""
        if self.animation_duration == 0:
            return 0, self.images[0]

        millis = (millis % _U32_MODULUS) % self.animation_duration
        result = 0
        for index, image in enumerate(self.images):
            if millis < image.delay:
                result = index
                break
            millis -= image.delay
        return result, self.images[result]

    def frames(self) -> list[XCursorImage]:
        return self.images

    def is_animated_cursor(self) -> bool:
        return len(self.images) > 1


def _default_search_paths() -> list[Path]:
    env = os.environ.get("XCURSOR_PATH")
    if env:
        return [Path(part).expanduser() for part in env.split(":") if part]

    home = Path.home()
    data_home = os.environ.get("XDG_DATA_HOME") or str(home / ".local" / "share")
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    paths = [Path(data_home) / "icons", home / ".icons"]
    paths.extend(Path(d) / "icons" for d in data_dirs.split(":") if d)
    paths.extend(
        [
            Path("/usr/share/pixmaps"),
            home / ".cursors",
            Path("/usr/share/cursors/xorg-x11"),
        ]
    )
    return paths


class CursorTheme:
    """An Xcursor theme found in the icon search paths, with inherited themes."""

    def __init__(self, name: str, search_paths: list[Path] | None = None) -> None:
        self.name = name
        self.search_paths = (
            [Path(p) for p in search_paths]
            if search_paths is not None
            else _default_search_paths()
        )

    def __repr__(self) -> str:
        return f"CursorTheme(name={self.name!r})"

    def load_icon(self, name: str) -> Path | None:
        """Path of the cursor file with the given name, or None if not found."""
        return self._find(self.name, name, set())

    def _find(self, theme: str, icon: str, visited: set[str]) -> Path | None:
        if theme in visited:
            return None
        visited.add(theme)

        for base in self.search_paths:
            candidate = base / theme / "cursors" / icon
            if candidate.is_file():
                return candidate

        for parent in self._inherits(theme):
            found = self._find(parent, icon, visited)
            if found is not None:
                return found
        return None

    def _inherits(self, theme: str) -> list[str]:
        parents: list[str] = []
        for base in self.search_paths:
            index = base / theme / "index.theme"
            try:
                text = index.read_text(encoding="utf-8", errors="replace")
            except OSError:
                continue
            for line in text.splitlines():
                key, sep, value = line.partition("=")
                if not sep or key.strip() != "Inherits":
                    continue
                for part in value.replace(";", ",").split(","):
                    part = part.strip()
                    if part and part not in parents:
                        parents.append(part)
        return parents


def load_xcursor(theme: CursorTheme, name: str, size: int) -> XCursor:
    """Load the named cursor, keeping the images closest to the given size."""
    path = theme.load_icon(name)
    if path is None:
        raise CursorError("no default icon")

    try:
        data = path.read_bytes()
    except OSError as err:
        raise CursorError(f"error reading cursor icon file: {err}") from err

    try:
        images = parse_xcursor(data)
    except CursorError as err:
        raise CursorError(f"error parsing cursor icon file: {err}") from err
    if not images:
        raise CursorError("cursor icon file has no images")

    nearest = min(images, key=lambda image: abs(size - image.size))
    kept = [
        image
        for image in images
        if image.width == nearest.width and image.height == nearest.height
    ]
    return XCursor(kept, sum(image.delay for image in kept))


_FALLBACK_SIZE = 64


def _fallback_pixels() -> bytes:
    transparent = b"\x00\x00\x00\x00"
    black = b"\x00\x00\x00\xff"
    white = b"\xff\xff\xff\xff"
    tip_height = 36

    rows = []
    for y in range(_FALLBACK_SIZE):
        row = bytearray()
        limit = 1 + (y - 1) * 2 // 3
        for x in range(_FALLBACK_SIZE):
            inside = 1 <= y <= tip_height and 1 <= x <= limit
            if not inside:
                row += transparent
            elif x in (1, limit) or y == tip_height:
                row += white
            else:
                row += black
        rows.append(bytes(row))
    return b"".join(rows)


def fallback_cursor() -> XCursor:
    """A built-in arrow used when the theme has no default cursor."""
    pixels = _fallback_pixels()
    image = XCursorImage(
        size=32,
        width=_FALLBACK_SIZE,
        height=_FALLBACK_SIZE,
        xhot=1,
        yhot=1,
        delay=0,
        pixels_rgba=pixels,
        pixels_argb=b"",
    )
    return XCursor([image], 0)


class CursorManager:
    """Holds the cursor theme, the current cursor image and a cache of named cursors.

    The current cursor image is a ``CursorIcon`` for a named cursor, ``None`` when
    hidden, or any other object standing for a client surface.
    """

    def __init__(
        self, theme: str, size: int, search_paths: list[Path] | None = None
    ) -> None:
        self._search_paths = search_paths
        self._current: object = CursorIcon.DEFAULT
        self._configure(theme, size)

    def _configure(self, theme: str, size: int) -> None:
        if not 0 <= size <= 255:
            raise ValueError(f"cursor size out of range: {size}")
        os.environ["XCURSOR_THEME"] = theme
        os.environ["XCURSOR_SIZE"] = str(size)
        self.theme = CursorTheme(theme, self._search_paths)
        self.size = size
        self._cache: dict[tuple[CursorIcon, int], XCursor | None] = {}

    def reload(self, theme: str, size: int) -> None:
        """Reload the cursor theme, dropping all cached cursors."""
        self._configure(theme, size)

    def get_cursor_with_name(self, icon: CursorIcon, scale: int) -> XCursor | None:
        """The named cursor at the given scale, loaded once and cached."""
        key = (icon, scale)
        if key in self._cache:
            return self._cache[key]

        size = self.size * scale
        cursor: XCursor | None = None
        error: CursorError | None = None
        # Alternative names account for non-compliant themes.
        for name in (icon.value, *icon.alt_names()):
            try:
                cursor = load_xcursor(self.theme, name, size)
            except CursorError as err:
                error = err
                continue
            break

        if cursor is None:
            _log.warning("error loading xcursor %s@%d: %s", icon.value, size, error)
            if icon is CursorIcon.DEFAULT:
                cursor = fallback_cursor()

        self._cache[key] = cursor
        return cursor

    def get_default_cursor(self, scale: int) -> XCursor:
        cursor = self.get_cursor_with_name(CursorIcon.DEFAULT, scale)
        assert cursor is not None
        return cursor

    def is_current_cursor_animated(self, scale: int) -> bool:
        if not isinstance(self._current, CursorIcon):
            return False
        cursor = self.get_cursor_with_name(self._current, scale)
        if cursor is None:
            cursor = self.get_default_cursor(scale)
        return cursor.is_animated_cursor()

    def cursor_image(self) -> object:
        return self._current

    def set_cursor_image(self, cursor: object) -> None:
        self._current = cursor