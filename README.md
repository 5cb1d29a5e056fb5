# tacd

The decision logic of a test automation controller daemon, as a plain Python
library: update channels and RAUC slot status, NetworkManager enumerations
and link helpers, systemd service types, and digital outputs on simulated
GPIO lines.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Modules

- `tacd.versions.compare_versions(v1, v2)` orders bundle version strings such
  as `"4.0-0-20230428214619"` by the part after the last `-`, compared as
  strings. It returns a negative number, zero or a positive number, or `None`
  if either string has no `-`.
- `tacd.update_channels`
  - `parse_polling_interval(value, file_name)` turns `"30m"`, `"6h"` or `"1d"`
    into seconds; `"0h"` and `None` give `None`. Other suffixes or malformed
    numbers raise `ChannelError`.
  - `Channel.from_file(path, enable_dir)` reads one YAML channel description
    (`name`, `display_name`, `description`, `url`, optional
    `polling_interval`). `Channel.from_directory(directory, enable_dir)` reads
    every `*.yaml` file of a directory in file name order and raises
    `ChannelError` on duplicate channel names.
  - A channel is enabled when `<enable_dir>/<name>.cert.pem` exists
    (`Channel.update_enabled`).
  - `Channel.poll(info, slot_status, enable_dir)` calls `info(url)` for the
    `(compatible, version)` of the upstream bundle when the channel is enabled
    and stores an `UpstreamBundle`.
  - `UpstreamBundle.update_install(slot_status)` sets
    `newer_than_installed` when the bundle is newer than both `rootfs_0` and
    `rootfs_1`.
  - `Channel.to_dict()` gives a JSON-ready dict; the polling interval is
    written as `{"secs": ..., "nanos": 0}`.
- `tacd.rauc`
  - `normalize_slot_status(slots)` turns RAUC's list of `(name, info)` tuples
    into a dict keyed like `"rootfs_0"`, with values as strings, keys renamed
    (`type` → `fs_type`, `class` → `slot_class`, `.` and `-` → `_`) and the
    original slot name under `"name"`. `normalize_slot_info` does this for one
    slot.
  - `booted_older_than_other(slot_status)` tells whether the other rootfs slot
    holds a newer bundle than the booted one, raising `RaucError` when no slot
    or both slots are booted, or when versions cannot be compared.
  - `refresh_newer_than_installed(channels, slot_status)` returns an updated
    copy of the channel list, or `None` if nothing changed.
  - `ReloadRateLimiter(limit).allow(now)` permits a reload at most once per
    `limit` seconds (ten minutes by default).
  - `is_installable_url(url)` accepts only `http://` and `https://` URLs.
  - `Progress.from_tuple((percentage, message, nesting_depth))` and
    `demo_slot_status()`, a fixed slot status for use without RAUC.
- `tacd.nm_types` holds the `IntEnum`s `NMDeviceType`, `NMDeviceState` and
  `NMState`; `parse_enum(enum_cls, value)` raises `TypeError` for values that
  are not unsigned 32-bit integers and `ValueError` for unknown ones.
- `tacd.systemd` holds `ServiceStatus`, `ServiceAction` (with `job_method()`
  giving `"start"`, `"stop"` or `"restart"`), the `SERVICES` table and
  `service_topic_paths(topic_name)`.
- `tacd.networkmanager` holds `LinkInfo`, `find_interface_path(devices,
  interface)`, `first_ip4_address(address_data)` and
  `link_led_brightness(info)`, which is `1.0` at 10 MBit/s and `0.0`
  otherwise.
- `tacd.gpio` is an in-memory GPIO line registry: `find_line(name)` returns a
  `Line`; `Line.request(flags, initial, consumer)` returns a `LineHandle`
  whose `set_value` stores the value, readable again with `Line.stub_get()`.
  `LineEventHandle` iterates over value changes.
- `tacd.digital_io.DigitalIo` sets up the outputs `out_0`, `out_1`,
  `uart_rx_en` and `uart_tx_en` as `DigitalOutput`s. `DigitalOutput.set(value)`
  drives the line (inverted for the UART enable lines) and calls an optional
  LED callable with `1.0` or `0.0`. `DigitalIo.outputs()` maps topic paths to
  outputs.

## Example

```python
from tacd.versions import compare_versions
from tacd.update_channels import UpstreamBundle

slots = {
    "rootfs_0": {"state": "booted", "bundle_version": "4.0-0-20230222111713"},
    "rootfs_1": {"state": "inactive", "bundle_version": "4.0-0-20230222110225"},
}

bundle = UpstreamBundle.create("lxatac-lxatac", "4.0-0-20230428214619", slots)
print(bundle.newer_than_installed)  # True
print(compare_versions("4.0-0-20230101", "4.0-0-20230202") < 0)  # True
```

## What it does not do

This package is a library only. It does not connect to D-Bus, so it does not
talk to RAUC, NetworkManager, systemd or the hostname service; callers supply
the values read from them. It drives no real GPIO hardware, runs no web
server or topic broker, and installs no command to start a daemon.