import pytest

from statusblocks.blocks.xrandr import Monitor, parse_monitors
from statusblocks.errors import BlockError

ACTIVE = (
    "Monitors: 2\n"
    " 0: +*eDP-1 1920/344x1080/194+0+0  eDP-1\n"
    " 1: +HDMI-1 2560/600x1440/340+1920+0  HDMI-1\n"
)
INFO = (
    "Screen 0: minimum 8 x 8, current 4480 x 1440, maximum 32767 x 32767\n"
    "eDP-1 connected primary 1920x1080+0+0 (0x4a) normal\n"
    "\tIdentifier: 0x42\n"
    "\tBrightness: 1.0\n"
    "HDMI-1 connected 2560x1440+1920+0 (0x4b) normal\n"
    "\tBrightness: 0.5\n"
    "HDMI-2 disconnected (normal left inverted right x axis y axis)\n"
)


def test_parse_monitors():
    monitors = parse_monitors(ACTIVE, INFO)
    assert monitors == [
        Monitor("eDP-1", 100, "1920x1080"),
        Monitor("HDMI-1", 50, "2560x1440"),
    ]


def test_parse_monitors_bad_brightness():
    info = "eDP-1 connected 1920x1080+0+0\n\tBrightness: bright\n"
    with pytest.raises(BlockError, match="Failed to parse xrandr output"):
        parse_monitors(ACTIVE, info)


def test_parse_monitors_missing_resolution():
    info = "eDP-1 connected primary\n\tBrightness: 1.0\n"
    with pytest.raises(BlockError, match="Failed to parse xrandr output"):
        parse_monitors(ACTIVE, info)


def test_unpaired_line_is_ignored():
    info = "eDP-1 connected 1920x1080+0+0\n"
    assert parse_monitors(ACTIVE, info) == []


def test_set_brightness_runs_xrandr():
    commands = []
    monitor = Monitor("eDP-1", 100, "1920x1080", spawn=commands.append)
    monitor.set_brightness(50)
    assert monitor.brightness == 50
    assert commands == ["xrandr --output eDP-1 --brightness  0.5"]


def test_brightness_up_is_capped():
    commands = []
    monitor = Monitor("eDP-1", 98, "1920x1080", spawn=commands.append)
    monitor.brightness_up(5)
    assert monitor.brightness == 100
    assert commands == ["xrandr --output eDP-1 --brightness  1"]


def test_brightness_down_stops_at_zero():
    monitor = Monitor("eDP-1", 3, "1920x1080", spawn=lambda cmd: None)
    monitor.brightness_down(5)
    assert monitor.brightness == 0


def test_brightness_round_trip():
    monitor = Monitor("eDP-1", 60, "1920x1080", spawn=lambda cmd: None)
    monitor.brightness_up(5)
    monitor.brightness_down(5)
    assert monitor.brightness == 60


def test_spawn_failure_is_ignored():
    def spawn(cmd):
        raise OSError("no shell")

    monitor = Monitor("eDP-1", 60, "1920x1080", spawn=spawn)
    monitor.set_brightness(40)
    assert monitor.brightness == 40