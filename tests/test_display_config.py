import pytest

from niri.display_config import current_state, is_laptop_panel


@pytest.mark.parametrize(
    "connector, expected",
    [
        ("eDP-1", True),
        ("LVDS-1", True),
        ("DSI-1", True),
        ("HDMI-A-1", False),
        ("DP-1", False),
        ("eDP", False),
    ],
)
def test_is_laptop_panel(connector, expected):
    assert is_laptop_panel(connector) is expected


def test_builtin_sorted_first_then_by_name():
    serial, monitors, logical, props = current_state(["HDMI-A-1", "eDP-1", "DP-2"])
    assert serial == 0
    assert props == {}
    assert [m.names[0] for m in monitors] == ["eDP-1", "DP-2", "HDMI-A-1"]


def test_monitor_names_and_properties():
    _, monitors, _, _ = current_state(["eDP-1", "DP-2"])
    builtin, external = monitors
    assert builtin.names == ("eDP-1", "", "", "eDP-1")
    assert builtin.properties == {
        "display-name": "Built-in display",
        "is-builtin": True,
    }
    assert external.properties == {"is-builtin": False}
    assert builtin.modes == [] and external.modes == []


def test_logical_monitor_per_monitor():
    _, monitors, logical, _ = current_state(["DP-2", "DP-1"])
    assert [lm.monitors for lm in logical] == [[m.names] for m in monitors]
    assert all(lm.scale == 1.0 and not lm.is_primary for lm in logical)
    assert all((lm.x, lm.y, lm.transform) == (0, 0, 0) for lm in logical)


def test_empty_state():
    assert current_state([]) == (0, [], [], {})