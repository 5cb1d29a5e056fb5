"""Comparison of RAUC bundle version strings."""

from __future__ import annotations

__all__ = ["compare_versions"]


def _date_part(version: str) -> str | None:
    head, sep, tail = version.rpartition("-")
    if not sep:
        return None
    return tail


def compare_versions(v1: str, v2: str) -> int | None:
    """Order two bundle versions by their trailing date part.

    Version strings look like ``"4.0-0-20230428214619"``. The part after the
    last ``-`` is compared as a string. Returns a negative number, zero or a
    positive number like a classic comparison function, or ``None`` if either
    version has no ``-`` in it.
    """
    date_1 = _date_part(v1)
    date_2 = _date_part(v2)

    if date_1 is None or date_2 is None:
        return None

    return (date_1 > date_2) - (date_1 < date_2)