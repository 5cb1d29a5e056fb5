"""Enumerations used by the NetworkManager D-Bus interfaces."""

from __future__ import annotations

from enum import IntEnum
from typing import TypeVar

__all__ = [
    "NMDeviceType",
    "NMDeviceState",
    "NMState",
    "parse_enum",
]

_U32_MAX = 2**32 - 1

E = TypeVar("E", bound=IntEnum)


class NMDeviceType(IntEnum):
    """The kind of a network device."""

    UNKNOWN = 0
    GENERIC = 14
    ETHERNET = 1
    WIFI = 2
    UNUSED1 = 3
    UNUSED2 = 4
    BT = 5
    OLPC_MESH = 6
    MODEM = 8
    INFINIBAND = 9
    BOND = 10
    VLAN = 11
    ADSL = 12
    BRIDGE = 13
    TEAM = 15
    TUN = 16
    IP_TUNNEL = 17
    MACVLAN = 18
    VXLAN = 19
    VETH = 20


class NMDeviceState(IntEnum):
    """The state of a network device."""

    UNKNOWN = 0
    UNMANAGED = 10
    UNAVAILABLE = 20
    DISCONNECTED = 30
    PREPARE = 40
    CONFIG = 50
    NEED_AUTH = 60
    IP_CONFIG = 70
    IP_CHECK = 80
    SECONDARIES = 90
    ACTIVATED = 100
    DEACTIVATING = 110
    FAILED = 120


class NMState(IntEnum):
    """The overall networking state."""

    UNKNOWN = 0
    ASLEEP = 10
    DISCONNECTED = 20
    DISCONNECTING = 30
    CONNECTING = 40
    CONNECTED_LOCAL = 50
    CONNECTED_SITE = 60
    CONNECTED_GLOBAL = 70


def parse_enum(enum_cls: type[E], value: object) -> E:
    """Resolve an unsigned 32-bit value received over the bus into ``enum_cls``.

    Raises ``TypeError`` if ``value`` is not an unsigned 32-bit integer and
    ``ValueError`` if it names no member of the enumeration.
    """
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= _U32_MAX:
        raise TypeError(f"Expected an unsigned 32-bit integer, got {value!r}")

    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError("Could not resolve enum") from None