"""Core logic of a test automation controller daemon: update channels, RAUC slot status, network and systemd types, and simulated digital I/O."""

__version__ = "0.1.0"