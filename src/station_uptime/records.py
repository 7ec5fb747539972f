"""Validated input records consumed by the uptime engine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

UINT32_MAX = 2**32 - 1
UINT64_MAX = 2**64 - 1


@dataclass(frozen=True)
class Station:
    """A charging station and the chargers it owns."""

    id: int
    charger_ids: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class Report:
    """A status report for one charger covering ``[start, end)`` in nanoseconds."""

    charger_id: int
    start: int
    end: int
    up: bool
