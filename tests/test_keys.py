import pytest

from niri.kdl import ConfigError
from niri.keys import NO_SYMBOL, Key, Modifiers, keysym_from_name


@pytest.mark.parametrize(
    ("text", "keysym", "modifiers"),
    [
        ("Mod+T", ord("t"), Modifiers.COMPOSITOR),
        ("Mod+Q", ord("q"), Modifiers.COMPOSITOR),
        ("Mod+Shift+H", ord("h"), Modifiers.COMPOSITOR | Modifiers.SHIFT),
        (
            "Mod+Ctrl+Shift+L",
            ord("l"),
            Modifiers.COMPOSITOR | Modifiers.SHIFT | Modifiers.CTRL,
        ),
        ("Mod+Comma", ord(","), Modifiers.COMPOSITOR),
        ("Mod+1", ord("1"), Modifiers.COMPOSITOR),
    ],
)
def test_parse_binds_from_config(text, keysym, modifiers):
    assert Key.parse(text) == Key(keysym, modifiers)


@pytest.mark.parametrize(
    ("text", "modifiers"),
    [
        ("Ctrl+a", Modifiers.CTRL),
        ("Control+a", Modifiers.CTRL),
        ("shift+a", Modifiers.SHIFT),
        ("ALT+a", Modifiers.ALT),
        ("Super+a", Modifiers.SUPER),
        ("Win+a", Modifiers.SUPER),
        ("mod+a", Modifiers.COMPOSITOR),
    ],
)
def test_modifier_aliases(text, modifiers):
    assert Key.parse(text).modifiers == modifiers


def test_key_without_modifiers():
    assert Key.parse("Return") == Key(keysym_from_name("Return"), Modifiers(0))


def test_modifier_order_and_case_do_not_matter():
    assert Key.parse("Mod+Shift+h") == Key.parse("shift+MOD+H")


def test_modifiers_are_trimmed():
    assert Key.parse("Mod + Shift+H") == Key.parse("Mod+Shift+H")


def test_key_is_not_trimmed():
    with pytest.raises(ConfigError, match="invalid key"):
        Key.parse("Mod+ H")


@pytest.mark.parametrize("text", ["Hyper+A", "Mod+Foo+A", "Mod++"])
def test_invalid_modifier(text):
    with pytest.raises(ConfigError, match="invalid modifier"):
        Key.parse(text)


@pytest.mark.parametrize("text", ["Mod+NotAKey", "Mod+", ""])
def test_invalid_key(text):
    with pytest.raises(ConfigError, match="invalid key"):
        Key.parse(text)


def test_keys_are_hashable():
    binds = {Key.parse("Mod+T"): "spawn"}
    assert binds[Key.parse("mod+t")] == "spawn"


def test_keysym_lookup_ignores_case():
    assert keysym_from_name("RETURN") == keysym_from_name("Return")
    assert keysym_from_name("page_up") == keysym_from_name("Page_Up")


def test_case_insensitive_letters_prefer_lowercase():
    assert keysym_from_name("A") == ord("a")
    assert keysym_from_name("a") == ord("a")


def test_aliases_share_keysym():
    assert keysym_from_name("Prior") == keysym_from_name("Page_Up")
    assert keysym_from_name("Next") == keysym_from_name("Page_Down")


def test_unknown_name_gives_no_symbol():
    assert keysym_from_name("nonsense") == NO_SYMBOL
    assert keysym_from_name("") == NO_SYMBOL


def test_unicode_and_hex_names():
    assert keysym_from_name("U0041") == ord("A")
    assert keysym_from_name("U0430") == 0x01000430
    assert keysym_from_name("0xff0d") == keysym_from_name("Return")
    assert keysym_from_name("U001F") == NO_SYMBOL
    assert keysym_from_name("0xzz") == NO_SYMBOL


def test_function_keys_are_consecutive():
    values = [keysym_from_name(f"F{n}") for n in range(1, 13)]
    assert all(b - a == 1 for a, b in zip(values, values[1:]))
    assert NO_SYMBOL not in values