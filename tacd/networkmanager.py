"""Helpers for following network interfaces through NetworkManager."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

__all__ = [
    "HOSTNAME_TOPIC",
    "BRIDGE_TOPIC",
    "DUT_TOPIC",
    "UPLINK_TOPIC",
    "NetworkError",
    "LinkInfo",
    "find_interface_path",
    "first_ip4_address",
    "link_led_brightness",
]

HOSTNAME_TOPIC = "/v1/tac/network/hostname"
BRIDGE_TOPIC = "/v1/tac/network/interface/tac-bridge"
DUT_TOPIC = "/v1/tac/network/interface/dut"
UPLINK_TOPIC = "/v1/tac/network/interface/uplink"

_UNLIT_SPEED_MBIT = 10
_LED_ON = 1.0
_LED_OFF = 0.0


class NetworkError(Exception):
    """Information about a network interface could not be obtained."""


@dataclass
class LinkInfo:
    """Link speed in MBit/s and whether a carrier is detected."""

    speed: int
    carrier: bool


def find_interface_path(devices: Iterable[tuple[str, str]], interface: str) -> str:
    """Return the object path of the device named ``interface``.

    ``devices`` yields ``(object_path, interface_name)`` pairs in the order
    NetworkManager lists them; the first match wins.
    """
    for path, name in devices:
        if name == interface:
            return path
    raise NetworkError(f"No interface found: {interface}")


def first_ip4_address(address_data: Sequence[Mapping[str, Any]]) -> list[str]:
    """Extract the first IPv4 address from an ``AddressData`` property value."""
    if not address_data:
        raise NetworkError("IP not found")
    address = address_data[0].get("address")
    if not isinstance(address, str):
        raise NetworkError("IP not found")
    return [address]


def link_led_brightness(info: LinkInfo) -> float:
    """Brightness of the extra link LED.

    The switch IC lights the port LED in distinct colors for 100 MBit/s and
    1 GBit/s but leaves it off at 10 MBit/s, so a separate LED is lit for
    that speed only.
    """
    switch_leaves_port_dark = info.speed == _UNLIT_SPEED_MBIT
    if switch_leaves_port_dark:
        return _LED_ON
    return _LED_OFF