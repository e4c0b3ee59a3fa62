import os
import struct

import pytest

from niri.cursor import (
    IMAGE_TYPE,
    CursorError,
    CursorIcon,
    CursorManager,
    CursorTheme,
    XCursor,
    XCursorImage,
    fallback_cursor,
    load_xcursor,
    parse_xcursor,
)


def make_xcursor(images):
    """images: list of (nominal, width, height, xhot, yhot, delay, pixels)."""
    header = b"Xcur" + struct.pack("<III", 16, 0x10000, len(images))
    position = 16 + 12 * len(images)
    toc = b""
    chunks = b""
    for nominal, w, h, xhot, yhot, delay, pixels in images:
        toc += struct.pack("<III", IMAGE_TYPE, nominal, position)
        chunk = (
            struct.pack("<9I", 36, IMAGE_TYPE, nominal, 1, w, h, xhot, yhot, delay)
            + pixels
        )
        chunks += chunk
        position += len(chunk)
    return header + toc + chunks


def solid(w, h, value=7):
    return bytes([value]) * (w * h * 4)


def make_image(delay, size=1):
    return XCursorImage(size, 1, 1, 0, 0, delay, b"\x00" * 4)


def write_cursor(base, theme, name, images):
    directory = base / theme / "cursors"
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_bytes(make_xcursor(images))


def test_parse_round_trip():
    pixels = bytes([1, 2, 3, 4, 5, 6, 7, 8])
    data = make_xcursor([(24, 2, 1, 1, 0, 50, pixels)])
    (image,) = parse_xcursor(data)
    assert (image.size, image.width, image.height) == (24, 2, 1)
    assert image.hotspot() == (1, 0)
    assert image.delay == 50
    assert image.pixels_rgba == pixels
    assert image.pixels_argb == bytes([4, 1, 2, 3, 8, 5, 6, 7])


def test_parse_rejects_bad_magic():
    data = make_xcursor([(24, 1, 1, 0, 0, 0, solid(1, 1))])
    with pytest.raises(CursorError):
        parse_xcursor(b"Xbad" + data[4:])


def test_parse_rejects_truncated_pixels():
    data = make_xcursor([(24, 4, 4, 0, 0, 0, solid(4, 4))])
    with pytest.raises(CursorError):
        parse_xcursor(data[:-1])


def test_parse_skips_non_image_chunks():
    data = make_xcursor([(24, 1, 1, 0, 0, 0, solid(1, 1))])
    # Change the TOC entry type to a comment chunk.
    patched = data[:16] + struct.pack("<I", 0xFFFE0001) + data[20:]
    assert parse_xcursor(patched) == []


def test_frame_wraps_around_animation():
    cursor = XCursor([make_image(10), make_image(20)], 30)
    assert cursor.frame(5)[0] == 0
    assert cursor.frame(15)[0] == 1
    assert cursor.frame(35) == cursor.frame(5)
    assert cursor.frame(45) == cursor.frame(15)


def test_frame_static_cursor():
    cursor = XCursor([make_image(0)], 0)
    index, image = cursor.frame(12345)
    assert index == 0
    assert image is cursor.frames()[0]
    assert not cursor.is_animated_cursor()


def test_empty_cursor_rejected():
    with pytest.raises(CursorError):
        XCursor([], 0)


def test_alt_names():
    assert "left_ptr" in CursorIcon.DEFAULT.alt_names()
    assert CursorIcon.ZOOM_IN.alt_names() == ()
    assert CursorIcon.DEFAULT.value == "default"


def test_theme_lookup_follows_inherits(tmp_path):
    write_cursor(tmp_path, "base", "default", [(24, 1, 1, 0, 0, 0, solid(1, 1))])
    child = tmp_path / "child"
    child.mkdir()
    (child / "index.theme").write_text("[Icon Theme]\nInherits=base\n")
    theme = CursorTheme("child", [tmp_path])
    assert theme.load_icon("default") == tmp_path / "base" / "cursors" / "default"
    assert theme.load_icon("missing") is None


def test_theme_inherit_cycle_terminates(tmp_path):
    for name, parent in (("a", "b"), ("b", "a")):
        (tmp_path / name).mkdir()
        (tmp_path / name / "index.theme").write_text(f"Inherits={parent}\n")
    assert CursorTheme("a", [tmp_path]).load_icon("default") is None


def test_load_xcursor_picks_closest_size(tmp_path):
    write_cursor(
        tmp_path,
        "t",
        "default",
        [
            (24, 24, 24, 0, 0, 0, solid(24, 24)),
            (32, 32, 32, 0, 0, 10, solid(32, 32)),
            (32, 32, 32, 0, 0, 15, solid(32, 32)),
            (48, 48, 48, 0, 0, 0, solid(48, 48)),
        ],
    )
    cursor = load_xcursor(CursorTheme("t", [tmp_path]), "default", 30)
    assert [image.width for image in cursor.frames()] == [32, 32]
    assert cursor.animation_duration == 25
    assert cursor.is_animated_cursor()


def test_load_xcursor_missing(tmp_path):
    with pytest.raises(CursorError):
        load_xcursor(CursorTheme("t", [tmp_path]), "default", 24)


def test_fallback_cursor():
    cursor = fallback_cursor()
    (image,) = cursor.frames()
    assert (image.width, image.height) == (64, 64)
    assert len(image.pixels_rgba) == 64 * 64 * 4
    assert image.hotspot() == (1, 1)
    assert cursor.animation_duration == 0


@pytest.fixture
def cursor_env(monkeypatch):
    monkeypatch.setenv("XCURSOR_THEME", "unset")
    monkeypatch.setenv("XCURSOR_SIZE", "0")


def test_manager_sets_env_and_uses_alt_names(tmp_path, cursor_env):
    write_cursor(tmp_path, "t", "left_ptr", [(24, 2, 2, 0, 0, 0, solid(2, 2))])
    manager = CursorManager("t", 24, [tmp_path])
    assert os.environ["XCURSOR_THEME"] == "t"
    assert os.environ["XCURSOR_SIZE"] == "24"
    cursor = manager.get_cursor_with_name(CursorIcon.DEFAULT, 1)
    assert cursor.frames()[0].width == 2
    assert manager.get_cursor_with_name(CursorIcon.DEFAULT, 1) is cursor


def test_manager_default_falls_back(tmp_path, cursor_env):
    manager = CursorManager("t", 24, [tmp_path])
    assert manager.get_cursor_with_name(CursorIcon.POINTER, 1) is None
    assert manager.get_default_cursor(1).frames()[0].width == 64


def test_manager_reload_clears_cache(tmp_path, cursor_env):
    manager = CursorManager("t", 24, [tmp_path])
    assert manager.get_cursor_with_name(CursorIcon.TEXT, 1) is None
    write_cursor(tmp_path, "u", "text", [(16, 3, 3, 0, 0, 0, solid(3, 3))])
    manager.reload("u", 16)
    assert manager.size == 16
    assert os.environ["XCURSOR_THEME"] == "u"
    assert manager.get_cursor_with_name(CursorIcon.TEXT, 1).frames()[0].width == 3


def test_manager_rejects_bad_size(tmp_path, cursor_env):
    with pytest.raises(ValueError):
        CursorManager("t", 256, [tmp_path])


def test_manager_animation_state(tmp_path, cursor_env):
    write_cursor(
        tmp_path,
        "t",
        "wait",
        [(24, 1, 1, 0, 0, 10, solid(1, 1)), (24, 1, 1, 0, 0, 10, solid(1, 1))],
    )
    manager = CursorManager("t", 24, [tmp_path])
    assert manager.cursor_image() is CursorIcon.DEFAULT
    assert manager.is_current_cursor_animated(1) is False
    manager.set_cursor_image(CursorIcon.WAIT)
    assert manager.cursor_image() is CursorIcon.WAIT
    assert manager.is_current_cursor_animated(1) is True
    manager.set_cursor_image(None)
    assert manager.is_current_cursor_animated(1) is False