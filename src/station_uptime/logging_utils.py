import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(debug: bool) -> int:
    if debug:
        return logging.DEBUG
    name = os.getenv("STATION_UPTIME_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr so results on stdout stay machine readable."""
    logging.basicConfig(
        level=_resolve_level(debug),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
