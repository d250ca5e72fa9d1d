# statusblocks

The logic behind a set of status bar blocks: weather, VPN status,
screen brightness, ALSA volume, temperature thresholds, a tea timer,
uptime, Taskwarrior counts, shell-driven toggles, speed tests and
clocks. It also provides click handling and Pango markup escaping.

It depends only on the standard library.

## Installation

```
pip install statusblocks
```

To run the tests, install the test extra:

```
pip install "statusblocks[test]"
pytest
```

## Core modules

- `statusblocks.errors`: `BlockError(message=None, cause=None)`. It
  renders as `"<message>. Cause: <cause>"`, and as `"Error"` when it has
  no message.
- `statusblocks.escape`: `pango_escape(text)` and
  `collect_pango_escaped(pieces)`. They replace `&`, `<`, `>` and `'`
  with their entities.
- `statusblocks.formatting`: `State` (idle, info, good, warning,
  critical), `Metadata`, `Fragment` and the errors `FormatError`,
  `PlaceholderNotFound` and `IncompatibleFormatter`.
  `Fragment.formatted_text()` wraps the text in `<i>` and/or `<u>`
  according to its metadata.
- `statusblocks.click`: `MouseButton` and `parse_mouse_button`.
  `parse_mouse_button` accepts names such as `"left"` and `"up"`, and
  the button numbers 1 to 5, 8 and 9. The module also has
  `ClickConfigEntry.from_mapping`, `ClickHandler` (`from_config`,
  `find`, `handle`) and `PostActions`. It includes `spawn_shell` and
  `spawn_shell_sync`, which run commands through `sh -c`.

## Blocks (`statusblocks.blocks`)

- `weather`
  - Weather data classes: `WeatherIcon`, `Wind`, `WeatherMoment`,
    `Forecast`, `WeatherResult`. `WeatherResult.to_values()` builds the
    placeholder values.
  - Helpers: `average_wind`, `convert_wind_direction`,
    `australian_apparent_temp`, `has_forecast_key` and `need_forecast`.
  - `IpLocator` looks up the current location at ipapi.co and caches it
    for `interval` seconds.
- `met_no`: `MetNoConfig.from_mapping` and `MetNoService`.
  `MetNoService.get_weather` fetches the met.no compact forecast.
  `MetNoService.build_result` interprets an already decoded response.
  `translate` and `weather_to_icon` map weather symbols. A legend of
  symbol descriptions can be passed to `MetNoService`. Without one,
  symbols are shown as they are.
- `watson`: `parse_state`, `ActiveState.describe`,
  `format_delta_past`, `format_delta_after`, `default_state_path` and
  `WatsonView`. `WatsonView` reports how long the last frame ran once
  tracking stops.
- `vpn`
  - Parsers for the `status` output: `parse_nordvpn_status` and
    `parse_mullvad_status`. Country flags are given as regional
    indicator glyphs.
  - `NordVpnDriver` and `MullvadDriver` run the tools. `make_driver`
    picks a driver by name.
  - `widget_state` picks the widget state for a status.
- `xrandr`: `get_monitors()` and `parse_monitors`. `Monitor` has
  `set_brightness`, `brightness_up` and `brightness_down`. Brightness
  is clamped to 0–100 and applied with `xrandr --brightness`.
- `sound_alsa`: `AlsaDevice` and `parse_amixer_output`. `AlsaDevice`
  has `get_info`, `set_volume`, `toggle`, `wait_for_update` and
  `close`, and works as a context manager. It uses `amixer` and
  `alsactl monitor`.
- `temperature`: `TemperatureScale`, `Thresholds.for_scale` and
  `Thresholds.state`, plus `in_valid_range` and `summarize`.
- `tea_timer`: `TeaTimer`, with `apply` for the `increment`,
  `decrement` and `reset` actions, and `values` and `tick`. `tick` runs
  `done_cmd` when the timer runs out.
- `uptime`: `read_uptime`, `parse_uptime` and `format_uptime`.
- `taskwarrior`: `TaskwarriorConfig`, `Filter`, `FilterCycle`,
  `get_number_of_tasks`, `parse_task_count`, `task_state` and
  `format_kind`.
- `toggle`: `ToggleConfig`, `Toggle` and `is_toggled`. `Toggle` has
  `check_state`, `toggle` and `icon`, and runs its commands in `$SHELL`
  (or `sh`).
- `speedtest`: `run_speedtest()` and `SpeedtestResult.from_json`. Ping
  is returned in seconds and speeds in bits per second.
- `clock`: `parse_timezones`, `TimezoneCycle` (`next_timezone`,
  `prev_timezone`) and `current_time`. It uses the system time zone
  database through `zoneinfo`.

## Example

```python
from statusblocks.escape import pango_escape
from statusblocks.blocks.uptime import format_uptime

print(pango_escape("&my 'text' <b>"))  # &amp;my &#39;text&#39; &lt;b&gt;
print(format_uptime(90061))             # 1d 1h
```

## External programs

Some blocks call external programs, and those programs must be
installed for the blocks to work:

- `sh`
- `xrandr`
- `amixer` and `alsactl`
- `nordvpn` and `mullvad`
- `task`
- `speedtest-cli`

## What this package does not do

This package is a library of block logic, not a status bar program:

- It has no command, event loop or scheduler that runs blocks and
  writes bar output.
- It does not load a configuration file.
- It has no template engine for format strings such as
  `" $icon $count "`. Blocks return placeholder values and leave
  rendering to the caller.
- It does not read hardware temperature sensors. It only classifies
  and summarizes readings that it is given.
- It does not watch files for changes. The Watson and Taskwarrior
  helpers read or query on demand.
- For sound it supports ALSA only.