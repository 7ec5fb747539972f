import logging
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from .options import Options
from .records import UINT32_MAX, UINT64_MAX, Report, Station

logger = logging.getLogger(__name__)

STATIONS_HEADER = "[Stations]"
REPORTS_HEADER = "[Charger Availability Reports]"

_SECTIONS = {
    STATIONS_HEADER: "stations",
    REPORTS_HEADER: "reports",
}

_UNSIGNED = re.compile(r"[0-9]+")

_TRUE_LITERALS = {"true", "True"}
_FALSE_LITERALS = {"false", "False"}


class InputError(ValueError):
    """Raised when the input document cannot be read or fails validation."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.message = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


def fetch_text(source: str | Path | None = None) -> str:
    """Read the input document from stdin, a local file or a URL."""
    from_stdin = source is None or str(source) == "-"
    text_source = "<stdin>" if from_stdin else str(source)
    try:
        if from_stdin:
            logger.debug("Reading input from stdin")
            return sys.stdin.read()
        if text_source.startswith(("http://", "https://")):
            logger.debug("Fetching input from %s", text_source)
            resp = requests.get(text_source, timeout=30)
            resp.raise_for_status()
            logger.debug("Fetched %d bytes from remote", len(resp.content))
            return resp.text
        logger.debug("Loading input from %s", text_source)
        return Path(text_source).read_text(encoding="utf-8")
    except requests.RequestException as exc:
        raise InputError(f"Unable to fetch {text_source}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Unable to read {text_source}: {exc}") from exc


def _parse_uint(token: str, limit: int, what: str, line: int) -> int:
    if not _UNSIGNED.fullmatch(token):
        raise InputError(f"Invalid {what}: '{token}'", line)
    value = int(token)
    if value > limit:
        raise InputError(f"{what.capitalize()} out of range: '{token}'", line)
    return value


def _parse_status(token: str | None, lenient: bool, line: int) -> bool:
    if lenient:
        return token in _TRUE_LITERALS
    if token in _TRUE_LITERALS:
        return True
    if token in _FALSE_LITERALS:
        return False
    if token is None:
        raise InputError("Missing up status", line)
    raise InputError(f"Invalid up status: '{token}'", line)


def parse_station(text: str, line: int = 0) -> Tuple[int, List[int]]:
    """Parse ``<station id> <charger id>...`` into an ID and its chargers."""
    tokens = text.split()
    if not tokens:
        raise InputError("Empty station entry", line)
    station_id = _parse_uint(tokens[0], UINT32_MAX, "station ID", line)
    chargers = [_parse_uint(t, UINT32_MAX, "charger ID", line) for t in tokens[1:]]
    return station_id, chargers


def parse_report(text: str, line: int = 0, lenient: bool = False) -> Report:
    """Parse ``<charger id> <start> <end> <up>`` into a :class:`Report`."""
    tokens = text.split()
    if len(tokens) < 3 or len(tokens) > 4:
        raise InputError(f"Malformed availability report: '{text}'", line)
    charger_id = _parse_uint(tokens[0], UINT32_MAX, "charger ID", line)
    start = _parse_uint(tokens[1], UINT64_MAX, "start time", line)
    end = _parse_uint(tokens[2], UINT64_MAX, "end time", line)
    up = _parse_status(tokens[3] if len(tokens) == 4 else None, lenient, line)
    if end < start:
        raise InputError(
            f"Report for charger {charger_id} ends ({end}) before it starts ({start})",
            line,
        )
    return Report(charger_id=charger_id, start=start, end=end, up=up)


def parse_document(
    text: str, options: Options | None = None
) -> Tuple[List[Tuple[int, int, List[int]]], List[Tuple[int, Report]]]:
    """Tokenize the section based document.

    Returns station entries as ``(line, station_id, charger_ids)`` and
    reports as ``(line, report)``, both in input order.
    """
    lenient = options.lenient_status if options else False
    section: Optional[str] = None
    stations: List[Tuple[int, int, List[int]]] = []
    reports: List[Tuple[int, Report]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped:
            continue
        if stripped in _SECTIONS:
            section = _SECTIONS[stripped]
            continue
        if stripped.startswith("["):
            raise InputError(f"Unknown section header: '{stripped}'", lineno)
        if section is None:
            raise InputError("Content found before any section header", lineno)
        if section == "stations":
            station_id, chargers = parse_station(stripped, lineno)
            stations.append((lineno, station_id, chargers))
        else:
            reports.append((lineno, parse_report(stripped, lineno, lenient)))
    logger.debug(
        "Parsed %d station entries and %d reports", len(stations), len(reports)
    )
    return stations, reports


def build_inputs(
    stations: Sequence[Tuple[int, int, List[int]]],
    reports: Sequence[Tuple[int, Report]],
) -> Tuple[Tuple[Station, ...], Tuple[Report, ...]]:
    """Merge repeated stations and check charger ownership."""
    chargers_by_station: Dict[int, set] = {}
    owner: Dict[int, int] = {}
    for lineno, station_id, chargers in stations:
        owned = chargers_by_station.setdefault(station_id, set())
        for charger_id in chargers:
            current = owner.get(charger_id)
            if current is not None and current != station_id:
                raise InputError(
                    f"Charger {charger_id} is assigned to stations {current} and {station_id}",
                    lineno,
                )
            owner[charger_id] = station_id
            owned.add(charger_id)

    for lineno, report in reports:
        if report.charger_id not in owner:
            raise InputError(
                f"Report for charger {report.charger_id} which belongs to no station",
                lineno,
            )

    records = tuple(
        Station(id=station_id, charger_ids=frozenset(chargers))
        for station_id, chargers in sorted(chargers_by_station.items())
    )
    logger.debug("Validated %d stations and %d chargers", len(records), len(owner))
    return records, tuple(report for _, report in reports)


def load_inputs(
    text: str, options: Options | None = None
) -> Tuple[Tuple[Station, ...], Tuple[Report, ...]]:
    """Parse and validate a whole document."""
    stations, reports = parse_document(text, options)
    return build_inputs(stations, reports)
