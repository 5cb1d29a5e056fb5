"""Types describing the systemd services the daemon watches and controls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "REBOOT_TOPIC",
    "JOB_MODE",
    "SERVICES",
    "ServiceStatus",
    "ServiceAction",
    "service_topic_paths",
]

REBOOT_TOPIC = "/v1/tac/reboot"
JOB_MODE = "replace"

# Topic name -> systemd unit name
SERVICES = {
    "network-manager": "NetworkManager.service",
    "labgrid-exporter": "labgrid-exporter.service",
    "lxa-iobus": "lxa-iobus.service",
}


@dataclass
class ServiceStatus:
    """The state of a systemd unit as exposed to clients."""

    active_state: str
    sub_state: str
    active_enter_ts: int
    active_exit_ts: int


class ServiceAction(str, Enum):
    """An action a client may request on a service."""

    START = "Start"
    STOP = "Stop"
    RESTART = "Restart"

    def job_method(self) -> str:
        """The name of the unit method that performs this action."""
        return self.value.lower()


def service_topic_paths(topic_name: str) -> tuple[str, str]:
    """Return the ``(action, status)`` topic paths for a service."""
    base = f"/v1/tac/service/{topic_name}"
    return f"{base}/action", f"{base}/status"