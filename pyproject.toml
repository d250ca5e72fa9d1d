[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "statusblocks"
version = "0.1.0"
description = "Logic for status bar blocks (weather, VPN, screen brightness, ALSA volume, timers, task counts and more) with click handling and Pango escaping"
requires-python = ">=3.10"
dependencies = []
keywords = ["status bar", "blocks", "pango", "weather", "vpn", "xrandr", "alsa"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers :: Applets",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["statusblocks"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
