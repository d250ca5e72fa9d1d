from unittest import mock

import pytest

from statusblocks.click import (
    ClickConfigEntry,
    ClickHandler,
    MouseButton,
    PostActions,
    parse_mouse_button,
    spawn_shell_sync,
)
from statusblocks.errors import BlockError


@pytest.mark.parametrize(
    ("name", "button"),
    [
        ("left", MouseButton.LEFT),
        ("middle", MouseButton.MIDDLE),
        ("right", MouseButton.RIGHT),
        ("up", MouseButton.WHEEL_UP),
        ("down", MouseButton.WHEEL_DOWN),
        ("forward", MouseButton.FORWARD),
        ("back", MouseButton.BACK),
        ("double_left", MouseButton.DOUBLE_LEFT),
    ],
)
def test_parse_by_name(name, button):
    assert parse_mouse_button(name) is button


@pytest.mark.parametrize(
    ("number", "button"),
    [
        (1, MouseButton.LEFT),
        (2, MouseButton.MIDDLE),
        (3, MouseButton.RIGHT),
        (4, MouseButton.WHEEL_UP),
        (5, MouseButton.WHEEL_DOWN),
        (8, MouseButton.BACK),
        (9, MouseButton.FORWARD),
    ],
)
def test_parse_by_number(number, button):
    assert parse_mouse_button(number) is button


@pytest.mark.parametrize("value", ["wheel", 6, 7, 0])
def test_unknown_button(value):
    with pytest.raises(ValueError, match=f"unknown button '{value}'"):
        parse_mouse_button(value)


@pytest.mark.parametrize("value", [1.0, None, True])
def test_wrong_type(value):
    with pytest.raises(ValueError):
        parse_mouse_button(value)


def test_entry_defaults():
    entry = ClickConfigEntry.from_mapping({"button": "left"})
    assert entry == ClickConfigEntry(button=MouseButton.LEFT)
    assert entry.sync is False and entry.update is False


def test_entry_rejects_unknown_field():
    with pytest.raises(ValueError):
        ClickConfigEntry.from_mapping({"button": "left", "bogus": 1})


def test_entry_requires_button():
    with pytest.raises(ValueError):
        ClickConfigEntry.from_mapping({"cmd": "echo"})


def test_find_matches_button_and_widget():
    handler = ClickHandler.from_config(
        [
            {"button": "left", "widget": "a", "action": "first"},
            {"button": "left", "action": "second"},
            {"button": "left", "action": "third"},
        ]
    )
    assert handler.find(MouseButton.LEFT, "a").action == "first"
    assert handler.find(MouseButton.LEFT, None).action == "second"
    assert handler.find(MouseButton.RIGHT, None) is None


def test_handle_returns_post_actions():
    handler = ClickHandler.from_config([{"button": 3, "action": "next_filter", "update": True}])
    assert handler.handle(MouseButton.RIGHT, None) == PostActions("next_filter", True)
    assert handler.handle(MouseButton.LEFT, None) is None


def test_empty_handler():
    assert ClickHandler().handle(MouseButton.LEFT, None) is None


def test_handle_failed_command_raises():
    handler = ClickHandler.from_config([{"button": "left", "cmd": "whatever", "sync": True}])
    with mock.patch("statusblocks.click.subprocess.run", side_effect=OSError("boom")):
        with pytest.raises(BlockError) as info:
            handler.handle(MouseButton.LEFT, None)
    assert "whatever" in str(info.value)
    assert isinstance(info.value.cause, OSError)


def test_spawn_shell_sync_returns_status():
    assert spawn_shell_sync("exit 3") == 3
    assert spawn_shell_sync("true") == 0