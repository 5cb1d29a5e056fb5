"""Update channels: descriptions of where newer RAUC bundles can be found."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from tacd.versions import compare_versions

__all__ = [
    "CHANNELS_DIR",
    "ENABLE_DIR",
    "ONE_MINUTE",
    "ONE_HOUR",
    "ONE_DAY",
    "ChannelError",
    "UpstreamBundle",
    "Channel",
    "parse_polling_interval",
]

CHANNELS_DIR = "/usr/share/tacd/update_channels"
ENABLE_DIR = "/etc/rauc/certificates-enabled"

ONE_MINUTE = 60
ONE_HOUR = 60 * 60
ONE_DAY = 24 * 60 * 60

_MULTIPLIERS = {"m": ONE_MINUTE, "h": ONE_HOUR, "d": ONE_DAY}
_NUMBER = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1
_NO_FILENAME = "<no filename>"

SlotStatus = Mapping[str, Mapping[str, str]]


class ChannelError(Exception):
    """An update channel description could not be used."""


def parse_polling_interval(value: str | None, file_name: str = _NO_FILENAME) -> int | None:
    """Parse an interval like ``"6h"`` into seconds.

    The suffix must be one of ``m``, ``h`` or ``d``. An interval of zero
    disables polling and yields ``None``, as does a missing value.
    """
    if value is None:
        return None

    multiplier = _MULTIPLIERS.get(value[-1:])
    if multiplier is None:
        raise ChannelError(
            f'The polling_interval in "{file_name}" does not have one of m, h or d as suffix'
        )

    digits = value[:-1]
    if not _NUMBER.fullmatch(digits):
        raise ChannelError(
            f'Failed to parse polling_interval in "{file_name}": invalid digit found in string'
        )

    count = int(digits)
    if count > _U32_MAX:
        raise ChannelError(
            f'Failed to parse polling_interval in "{file_name}": number too large to fit in target type'
        )

    return count * multiplier if count else None


def _newer_than(version: str, slot: Mapping[str, str] | None) -> bool:
    installed = slot.get("bundle_version") if slot is not None else None
    if installed is None:
        return True
    order = compare_versions(version, installed)
    return True if order is None else order > 0


@dataclass
class UpstreamBundle:
    """A bundle offered on an update server."""

    compatible: str
    version: str
    newer_than_installed: bool = False

    @classmethod
    def create(
        cls, compatible: str, version: str, slot_status: SlotStatus | None = None
    ) -> UpstreamBundle:
        """Build a bundle and rate it against the installed slots if known."""
        bundle = cls(compatible, version)
        if slot_status is not None:
            bundle.update_install(slot_status)
        return bundle

    def update_install(self, slot_status: SlotStatus) -> None:
        """Mark the bundle as newer if it is newer than both rootfs slots."""
        self.newer_than_installed = _newer_than(
            self.version, slot_status.get("rootfs_0")
        ) and _newer_than(self.version, slot_status.get("rootfs_1"))


@dataclass
class Channel:
    """An update channel; ``polling_interval`` is in seconds."""

    name: str
    display_name: str
    description: str
    url: str
    polling_interval: int | None = None
    enabled: bool = False
    bundle: UpstreamBundle | None = None

    @classmethod
    def from_file(cls, path: str | os.PathLike[str], enable_dir: str = ENABLE_DIR) -> Channel:
        """Read a channel description from a YAML file."""
        path = Path(path)
        file_name = path.name or _NO_FILENAME

        content = path.read_text()
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ChannelError(f'Failed to parse "{file_name}": {e}') from e

        if not isinstance(data, dict):
            raise ChannelError(f'"{file_name}" does not hold a channel description')

        fields = {}
        for key in ("name", "display_name", "description", "url"):
            if key not in data:
                raise ChannelError(f'"{file_name}": missing field `{key}`')
            if not isinstance(data[key], str):
                raise ChannelError(f'"{file_name}": field `{key}` must be a string')
            fields[key] = data[key]

        raw_interval = data.get("polling_interval")
        if raw_interval is not None and not isinstance(raw_interval, str):
            raise ChannelError(f'"{file_name}": field `polling_interval` must be a string')

        channel = cls(
            name=fields["name"],
            display_name=fields["display_name"],
            description=fields["description"],
            url=fields["url"].strip(),
            polling_interval=parse_polling_interval(raw_interval, file_name),
        )
        channel.update_enabled(enable_dir)
        return channel

    @classmethod
    def from_directory(
        cls, directory: str | os.PathLike[str] = CHANNELS_DIR, enable_dir: str = ENABLE_DIR
    ) -> list[Channel]:
        """Read all ``*.yaml`` channel files of a directory, in file name order."""
        entries = sorted(
            (entry for entry in os.scandir(directory) if entry.name.endswith(".yaml")),
            key=lambda entry: os.fsencode(entry.name),
        )

        channels: list[Channel] = []
        for entry in entries:
            channel = cls.from_file(entry.path, enable_dir)
            if any(ch.name == channel.name for ch in channels):
                raise ChannelError(f'Encountered duplicate channel name "{channel.name}"')
            channels.append(channel)

        return channels

    def update_enabled(self, enable_dir: str = ENABLE_DIR) -> None:
        """A channel is enabled when its RAUC certificate is enabled."""
        self.enabled = (Path(enable_dir) / f"{self.name}.cert.pem").exists()

    def poll(
        self,
        info: Callable[[str], tuple[str, str]],
        slot_status: SlotStatus | None = None,
        enable_dir: str = ENABLE_DIR,
    ) -> None:
        """Ask ``info`` for the (compatible, version) of the bundle at ``url``."""
        self.update_enabled(enable_dir)
        self.bundle = None

        if self.enabled:
            compatible, version = info(self.url)
            self.bundle = UpstreamBundle.create(compatible, version, slot_status)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the channel the way the web interface expects it."""
        interval = (
            None
            if self.polling_interval is None
            else {"secs": self.polling_interval, "nanos": 0}
        )
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "url": self.url,
            "polling_interval": interval,
            "enabled": self.enabled,
            "bundle": None if self.bundle is None else asdict(self.bundle),
        }