"""Per-station uptime from charger status reports.

Each charger's reports are first merged into two interval sets: the time it
was reporting at all and the time it reported being up.  A station's sets are
the union of its chargers' sets, so simultaneous reports from different
chargers are counted once and the station is up whenever any charger is up.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

from .intervals import Interval, merge_intervals, total_duration
from .options import Options
from .records import Report, Station

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargerIntervals:
    """Merged reporting and up intervals for a charger or a whole station."""

    reporting: List[Interval] = field(default_factory=list)
    up: List[Interval] = field(default_factory=list)

    @property
    def reporting_ns(self) -> int:
        return total_duration(self.reporting)

    @property
    def up_ns(self) -> int:
        return total_duration(self.up)


@dataclass(frozen=True)
class StationUptime:
    station_id: int
    reporting_ns: int
    up_ns: int
    percentage: int

    @property
    def reported(self) -> bool:
        return self.reporting_ns > 0


def build_charger_intervals(reports: Iterable[Report]) -> ChargerIntervals:
    """Merge one charger's reports into reporting and up interval sets."""
    reporting: List[Interval] = []
    up: List[Interval] = []
    for r in reports:
        reporting.append((r.start, r.end))
        if r.up:
            up.append((r.start, r.end))
    return ChargerIntervals(reporting=merge_intervals(reporting), up=merge_intervals(up))


def group_reports(reports: Iterable[Report]) -> Dict[int, List[Report]]:
    grouped: Dict[int, List[Report]] = {}
    for r in reports:
        grouped.setdefault(r.charger_id, []).append(r)
    return grouped


def aggregate_station(
    charger_ids: Iterable[int],
    chargers: Mapping[int, ChargerIntervals],
) -> ChargerIntervals:
    """Union the interval sets of every charger owned by a station.

    Chargers without an entry in ``chargers`` never reported and add nothing.
    """
    reporting: List[Interval] = []
    up: List[Interval] = []
    for charger_id in charger_ids:
        intervals = chargers.get(charger_id)
        if intervals is None:
            continue
        reporting.extend(intervals.reporting)
        up.extend(intervals.up)
    return ChargerIntervals(reporting=merge_intervals(reporting), up=merge_intervals(up))


def uptime_percentage(up_ns: int, reporting_ns: int) -> int:
    """Return ``floor(100 * up_ns / reporting_ns)``, or 0 without reporting time.

    Python integers are unbounded so the scaling cannot overflow even for
    totals close to ``2**64``.
    """
    if reporting_ns == 0:
        return 0
    if not 0 <= up_ns <= reporting_ns:
        raise AssertionError(
            f"up time {up_ns} outside reporting time {reporting_ns}"
        )
    return up_ns * 100 // reporting_ns


def station_uptime(
    station: Station,
    chargers: Mapping[int, ChargerIntervals],
) -> StationUptime:
    merged = aggregate_station(station.charger_ids, chargers)
    reporting_ns = merged.reporting_ns
    up_ns = merged.up_ns
    pct = uptime_percentage(up_ns, reporting_ns)
    logger.debug(
        "Station %d: reporting=%dns up=%dns uptime=%d%%",
        station.id,
        reporting_ns,
        up_ns,
        pct,
    )
    return StationUptime(
        station_id=station.id,
        reporting_ns=reporting_ns,
        up_ns=up_ns,
        percentage=pct,
    )


def compute_uptime(
    stations: Iterable[Station],
    reports: Sequence[Report],
    options: Options | None = None,
) -> List[StationUptime]:
    """Return one result per station ordered by ascending station ID."""
    if options is None:
        options = Options()
    chargers = {
        charger_id: build_charger_intervals(items)
        for charger_id, items in group_reports(reports).items()
    }
    logger.debug("Merged reports for %d chargers", len(chargers))

    results: List[StationUptime] = []
    for station in sorted(stations, key=lambda s: s.id):
        result = station_uptime(station, chargers)
        if not result.reported and not options.include_unreported:
            logger.debug("Skipping station %d with no reporting time", station.id)
            continue
        results.append(result)
    logger.debug("Computed uptime for %d stations", len(results))
    return results
