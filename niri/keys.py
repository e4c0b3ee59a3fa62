"""Key bindings: keysym lookup and parsing of key combinations."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass

from niri.kdl import ConfigError

NO_SYMBOL = 0
"""The keysym returned for names that do not match any key."""


class Modifiers(enum.Flag):
    """Modifier keys of a binding."""

    CTRL = 1
    SHIFT = 2
    ALT = 4
    SUPER = 8
    COMPOSITOR = 16


_MODIFIER_NAMES = {
    "mod": Modifiers.COMPOSITOR,
    "ctrl": Modifiers.CTRL,
    "control": Modifiers.CTRL,
    "shift": Modifiers.SHIFT,
    "alt": Modifiers.ALT,
    "super": Modifiers.SUPER,
    "win": Modifiers.SUPER,
}

_PUNCTUATION = {
    "space": 0x20,
    "exclam": 0x21,
    "quotedbl": 0x22,
    "numbersign": 0x23,
    "dollar": 0x24,
    "percent": 0x25,
    "ampersand": 0x26,
    "apostrophe": 0x27,
    "parenleft": 0x28,
    "parenright": 0x29,
    "asterisk": 0x2A,
    "plus": 0x2B,
    "comma": 0x2C,
    "minus": 0x2D,
    "period": 0x2E,
    "slash": 0x2F,
    "colon": 0x3A,
    "semicolon": 0x3B,
    "less": 0x3C,
    "equal": 0x3D,
    "greater": 0x3E,
    "question": 0x3F,
    "at": 0x40,
    "bracketleft": 0x5B,
    "backslash": 0x5C,
    "bracketright": 0x5D,
    "asciicircum": 0x5E,
    "underscore": 0x5F,
    "grave": 0x60,
    "braceleft": 0x7B,
    "bar": 0x7C,
    "braceright": 0x7D,
    "asciitilde": 0x7E,
}

_NAMED = {
    "BackSpace": 0xFF08,
    "Tab": 0xFF09,
    "Linefeed": 0xFF0A,
    "Clear": 0xFF0B,
    "Return": 0xFF0D,
    "Pause": 0xFF13,
    "Scroll_Lock": 0xFF14,
    "Sys_Req": 0xFF15,
    "Escape": 0xFF1B,
    "Delete": 0xFFFF,
    "Home": 0xFF50,
    "Left": 0xFF51,
    "Up": 0xFF52,
    "Right": 0xFF53,
    "Down": 0xFF54,
    "Prior": 0xFF55,
    "Page_Up": 0xFF55,
    "Next": 0xFF56,
    "Page_Down": 0xFF56,
    "End": 0xFF57,
    "Begin": 0xFF58,
    "Select": 0xFF60,
    "Print": 0xFF61,
    "Execute": 0xFF62,
    "Insert": 0xFF63,
    "Undo": 0xFF65,
    "Redo": 0xFF66,
    "Menu": 0xFF67,
    "Find": 0xFF68,
    "Cancel": 0xFF69,
    "Help": 0xFF6A,
    "Break": 0xFF6B,
    "Num_Lock": 0xFF7F,
    "KP_Enter": 0xFF8D,
    "KP_Multiply": 0xFFAA,
    "KP_Add": 0xFFAB,
    "KP_Subtract": 0xFFAD,
    "KP_Decimal": 0xFFAE,
    "KP_Divide": 0xFFAF,
    "Shift_L": 0xFFE1,
    "Shift_R": 0xFFE2,
    "Control_L": 0xFFE3,
    "Control_R": 0xFFE4,
    "Caps_Lock": 0xFFE5,
    "Meta_L": 0xFFE7,
    "Meta_R": 0xFFE8,
    "Alt_L": 0xFFE9,
    "Alt_R": 0xFFEA,
    "Super_L": 0xFFEB,
    "Super_R": 0xFFEC,
    "XF86MonBrightnessUp": 0x1008FF02,
    "XF86MonBrightnessDown": 0x1008FF03,
    "XF86AudioLowerVolume": 0x1008FF11,
    "XF86AudioMute": 0x1008FF12,
    "XF86AudioRaiseVolume": 0x1008FF13,
    "XF86AudioPlay": 0x1008FF14,
    "XF86AudioStop": 0x1008FF15,
    "XF86AudioPrev": 0x1008FF16,
    "XF86AudioNext": 0x1008FF17,
    "XF86AudioPause": 0x1008FF31,
    "XF86AudioMicMute": 0x1008FFB2,
}


def _build_table() -> dict[str, int]:
    table = {c: ord(c) for c in string.ascii_letters + string.digits}
    table.update(_PUNCTUATION)
    table.update(_NAMED)
    table.update({f"F{n}": 0xFFBE + n - 1 for n in range(1, 36)})
    table.update({f"KP_{n}": 0xFFB0 + n for n in range(10)})
    return table


def _build_index(table: dict[str, int]) -> dict[str, int]:
    candidates: dict[str, list[tuple[str, int]]] = {}
    for name, keysym in table.items():
        candidates.setdefault(name.lower(), []).append((name, keysym))
    # When a name matches several keysyms ignoring case, the lower-case one wins.
    return {
        lowered: min(matches, key=lambda item: item[0] != item[0].lower())[1]
        for lowered, matches in candidates.items()
    }


_KEYSYMS = _build_index(_build_table())
_HEX_DIGITS = frozenset(string.hexdigits)


def _parse_hex(text: str) -> int | None:
    if not text or any(c not in _HEX_DIGITS for c in text):
        return None
    return int(text, 16)


def keysym_from_name(name: str) -> int:
    """Look up a keysym by name, ignoring case; return NO_SYMBOL if unknown.

    Besides key names, ``U<hex>`` names a Unicode character and ``0x<hex>``
    names a raw keysym value.
    """
    keysym = _KEYSYMS.get(name.lower())
    if keysym is not None:
        return keysym

    if name[:1] in ("U", "u"):
        code = _parse_hex(name[1:])
        if code is None:
            return NO_SYMBOL
        if code < 0x20 or 0x7E < code < 0xA0 or code > 0x10FFFF:
            return NO_SYMBOL
        if code < 0x100:
            return code
        return code | 0x01000000

    if name[:2] in ("0x", "0X"):
        value = _parse_hex(name[2:])
        if value is None or value > 0xFFFFFFFF:
            return NO_SYMBOL
        return value

    return NO_SYMBOL


@dataclass(frozen=True)
class Key:
    """A key combined with modifiers, as written in a binding."""

    keysym: int
    modifiers: Modifiers

    @classmethod
    def parse(cls, text: str) -> Key:
        """Parse a combination such as ``Mod+Shift+H``."""
        *parts, key = text.split("+")

        modifiers = Modifiers(0)
        for part in parts:
            part = part.strip()
            flag = _MODIFIER_NAMES.get(part.lower()) if part.isascii() else None
            if flag is None:
                raise ConfigError(f"invalid modifier: {part}")
            modifiers |= flag

        keysym = keysym_from_name(key)
        if keysym == NO_SYMBOL:
            raise ConfigError(f"invalid key: {key}")
        return cls(keysym, modifiers)