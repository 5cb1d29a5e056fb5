"""Slot status handling and update decisions for the RAUC installer."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from tacd.update_channels import Channel
from tacd.versions import compare_versions

__all__ = [
    "RELOAD_RATE_LIMIT",
    "RaucError",
    "Progress",
    "ReloadRateLimiter",
    "booted_older_than_other",
    "normalize_slot_info",
    "normalize_slot_status",
    "refresh_newer_than_installed",
    "is_installable_url",
    "demo_slot_status",
]

RELOAD_RATE_LIMIT = 10 * 60

_U64_MAX = 2**64 - 1

SlotStatus = dict[str, dict[str, str]]


class RaucError(Exception):
    """The slot status does not allow a decision."""


@dataclass
class Progress:
    """Progress of a running RAUC operation."""

    percentage: int
    message: str
    nesting_depth: int

    @classmethod
    def from_tuple(cls, value: tuple[int, str, int]) -> Progress:
        """Build from RAUC's ``(percentage, message, nesting_depth)`` tuple."""
        percentage, message, nesting_depth = value
        return cls(percentage, message, nesting_depth)


class ReloadRateLimiter:
    """Allows a channel list reload at most once per ``limit`` seconds."""

    def __init__(self, limit: float = RELOAD_RATE_LIMIT) -> None:
        self.limit = limit
        self.previous: float | None = None

    def allow(self, now: float) -> bool:
        """Return whether a reload at time ``now`` is allowed, and record it if so."""
        if self.previous is not None and now - self.previous < self.limit:
            return False
        self.previous = now
        return True


def booted_older_than_other(slot_status: Mapping[str, Mapping[str, str]]) -> bool:
    """Tell whether the other rootfs slot holds a newer bundle than the booted one."""
    rootfs_0 = slot_status.get("rootfs_0")
    rootfs_1 = slot_status.get("rootfs_1")

    booted_0 = rootfs_0 is not None and rootfs_0.get("state") == "booted"
    booted_1 = rootfs_1 is not None and rootfs_1.get("state") == "booted"

    if booted_0 and booted_1:
        raise RaucError("Two booted RAUC slots at the same time")
    if booted_0:
        booted, other = rootfs_0, rootfs_1
    elif booted_1:
        booted, other = rootfs_1, rootfs_0
    else:
        raise RaucError("No booted RAUC slot")

    booted_version = booted.get("bundle_version") if booted is not None else None
    if booted_version is None:
        raise RaucError("No bundle version information for booted slot")

    other_version = other.get("bundle_version") if other is not None else None
    if other_version is None:
        return False

    order = compare_versions(other_version, booted_version)
    if order is None:
        raise RaucError(
            f'Failed to compare date for bundle versions "{other_version}" and "{booted_version}"'
        )
    return order > 0


def _value_to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX:
        return str(value)
    return ""


def _normalize_key(key: str) -> str:
    key = key.replace("type", "fs_type").replace("class", "slot_class")
    return key.replace(".", "_").replace("-", "_")


def normalize_slot_info(
    slot_name: str, slot_info: Mapping[str, Any]
) -> tuple[str, dict[str, str]]:
    """Turn one RAUC slot entry into a ``(key, info)`` pair of plain strings.

    Keys are renamed so they are usable as identifiers, values that are
    neither strings nor unsigned integers become empty strings, and the
    unmangled slot name is stored under ``"name"``.
    """
    info = {_normalize_key(key): _value_to_str(value) for key, value in slot_info.items()}
    info["name"] = slot_name
    return slot_name.replace(".", "_"), info


def normalize_slot_status(
    slots: Iterable[tuple[str, Mapping[str, Any]]],
) -> SlotStatus:
    """Turn RAUC's list of ``(name, info)`` tuples into a dict keyed by slot."""
    return dict(normalize_slot_info(name, info) for name, info in slots)


def refresh_newer_than_installed(
    channels: list[Channel] | None, slot_status: Mapping[str, Mapping[str, str]]
) -> list[Channel] | None:
    """Re-rate the channels' bundles against the slots.

    Returns an updated copy of the channel list, or ``None`` if there are no
    channels or nothing changed.
    """
    if channels is None:
        return None

    updated = copy.deepcopy(channels)
    for channel in updated:
        if channel.bundle is not None:
            channel.bundle.update_install(slot_status)

    return updated if updated != channels else None


def is_installable_url(url: str) -> bool:
    """Only bundles served over HTTP(S) may be installed on request."""
    return url.startswith(("http://", "https://"))


_DEMO_COMPATIBLE = "lxatac-lxatac"
_DEMO_DESCRIPTION = "lxatac-core-bundle-base version 1.0-r0"
_DEMO_DAY = "2023-02-22"


def _demo_slot(
    name: str,
    slot_class: str,
    fs_type: str,
    build: str,
    state: str,
    size: int,
    installed_count: int,
    installed_at: str,
    sha256: str,
    device: str,
) -> dict[str, str]:
    return {
        "name": name,
        "slot_class": slot_class,
        "fs_type": fs_type,
        "bundle_compatible": _DEMO_COMPATIBLE,
        "bundle_build": build,
        "bundle_version": f"4.0-0-{build}",
        "bundle_description": _DEMO_DESCRIPTION,
        "status": "ok",
        "state": state,
        "size": str(size),
        "installed_count": str(installed_count),
        "installed_timestamp": f"{_DEMO_DAY}T{installed_at}Z",
        "sha256": sha256,
        "device": device,
    }


def _demo_rootfs(
    index: int,
    build: str,
    state: str,
    size: int,
    count: int,
    installed_at: str,
    activated_at: str,
    sha256: str,
    partuuid: str,
) -> dict[str, str]:
    slot = _demo_slot(
        f"rootfs.{index}",
        "rootfs",
        "ext4",
        build,
        state,
        size,
        count,
        installed_at,
        sha256,
        f"/dev/disk/by-partuuid/{partuuid}",
    )
    slot.update(
        bootname=f"system{index}",
        boot_status="good",
        activated_count=str(count),
        activated_timestamp=f"{_DEMO_DAY}T{activated_at}Z",
    )
    return slot


def demo_slot_status() -> SlotStatus:
    """A fixed slot status used when no RAUC service is available."""
    return {
        "rootfs_0": _demo_rootfs(
            0,
            "20230222111713",
            "booted",
            983465984,
            5,
            "11:23:36",
            "11:23:43",
            "90bef769359e1ce0a58f10151ff6c7565fb8b1b3955b8cb3dafaa164a7c381fb",
            "00000000-0000-0000-0000-000000000001",
        ),
        "rootfs_1": _demo_rootfs(
            1,
            "20230222110225",
            "inactive",
            983375872,
            3,
            "11:14:16",
            "11:14:25",
            "8136d2ecaee989a125e8f27bd05128ade5dc10270b4cd8a564cbdedaa38f274b",
            "00000000-0000-0000-0000-000000000002",
        ),
        "bootloader_0": _demo_slot(
            "bootloader.0",
            "bootloader",
            "boot-emmc",
            "20230222111713",
            "inactive",
            1310720,
            8,
            "11:23:41",
            "4e840bcf0b498d2aba040a845d0b2329c9b68396802b2214d5256060824a685f",
            "/dev/mmcblk1",
        ),
    }