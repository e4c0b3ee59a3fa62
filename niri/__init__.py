"""Configuration, key binds, animation and frame timing, cursors and IPC data of a scrollable-tiling compositor."""

__version__ = "0.1.0"