# niri

The parts of a scrollable-tiling Wayland compositor that need no display
server. The package reads the KDL configuration, parses key binds, times
animations and frames, loads Xcursor themes, and holds the data sent over
the IPC socket.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Configuration

`niri.config.Config.parse(text, filename)` decodes a KDL configuration
document. A setting that is missing gets its default value.

```python
from niri.config import Config

config = Config.parse("""
input {
    keyboard {
        repeat-delay 600
        xkb { layout "us,ru"; }
    }
}

output "eDP-1" {
    scale 2.0
    mode "1920x1080@144"
}

binds {
    Mod+T { spawn "alacritty"; }
    Mod+1 { focus-workspace 1; }
}
""", "config.kdl")

print(config.outputs[0].mode)  # Mode(width=1920, height=1080, refresh=144.0)
```

`Config.load(path)` reads the file and parses it. When the file cannot be
read, is not valid KDL, or holds an unknown node or a bad value, the
package raises `niri.kdl.ConfigError`. The error carries the line and
column where they are known.

Some values are written as strings in the file. Each of these has its own
parser:

- `niri.config.Mode.parse("2560x1600@165.004")`
- `niri.config.SizeChange.parse("+10%")`
- `niri.config.AccelProfile.parse("flat")` and `niri.config.TapButtonMap.parse("left-middle-right")`
- `niri.keys.Key.parse("Mod+Shift+H")`, which uses `niri.keys.keysym_from_name`

`niri.kdl.parse_document` is the KDL parser on its own. It returns a list
of `KdlNode` objects.

## Animations and frame timing

`niri.animation.Animation` moves a value from a start to an end over a
duration given in nanoseconds, with ease-out-cubic easing. Call
`niri.animation.set_animation_slowdown` to scale the duration of every
animation created after the call.

`niri.frame_clock.FrameClock` predicts the next presentation time from the
last time it recorded and the refresh interval.

## Overlays

`niri.notification.ConfigErrorNotification` tracks the banner that reports
a broken configuration. The banner slides in, stays up for four seconds,
and then slides out. `niri.notification.ExitConfirmDialog` tracks whether
the exit prompt is open. Each class's `position` method returns where its
buffer goes on an output.

## Cursors

`niri.cursor.parse_xcursor` decodes Xcursor files. `niri.cursor.CursorTheme`
finds cursor files in the icon search paths, and follows inherited themes.

`niri.cursor.CursorManager` loads named cursors and caches them. When a
theme does not use the standard name for a cursor, it tries the other names
for it. When no default cursor is found, it uses a built-in arrow. Creating
or reloading a manager sets `XCURSOR_THEME` and `XCURSOR_SIZE` in the
environment.

## IPC and display information

`niri.ipc` encodes and decodes the outputs request and the outputs response
as JSON. `niri.display_config.current_state` builds the monitor list that
display configuration clients expect, with built-in panels listed first.

## What this package does not do

The package draws nothing. It does not run a Wayland server and does not
talk to input devices. It opens no IPC socket and registers no D-Bus
services. The notification and dialog classes only track state and
placement. `ipc` and `display_config` only build and decode data.