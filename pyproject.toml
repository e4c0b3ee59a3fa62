[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "niri"
version = "0.1.0"
description = "Configuration parsing, key binds, animation and frame timing, Xcursor loading and IPC types for a scrollable-tiling compositor"
requires-python = ">=3.10"
dependencies = []
keywords = ["compositor", "wayland", "tiling", "kdl", "config", "xcursor"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["niri"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
