import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from .data import InputError, fetch_text, load_inputs
from .logging_utils import setup_logging
from .options import Options
from .render import render_html, render_json, render_text
from .uptime import StationUptime, compute_uptime

logger = logging.getLogger(__name__)


def run(source: str | None, options: Options) -> List[StationUptime]:
    """Read, validate and compute uptime for every station in ``source``."""
    text = fetch_text(source)
    stations, reports = load_inputs(text, options)
    logger.info("Loaded %d stations and %d reports", len(stations), len(reports))
    return compute_uptime(stations, reports, options)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Compute per-station uptime from charger availability reports"
    )
    parser.add_argument(
        "source",
        nargs="?",
        default="-",
        help="Input file path or http(s) URL (default: stdin)",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json", "html"),
        default="text",
        help="Output format",
    )
    parser.add_argument("--output", type=Path, help="Write results to this file")
    parser.add_argument(
        "--lenient-status",
        action="store_true",
        help="Treat any up status other than true/True as down",
    )
    parser.add_argument(
        "--omit-unreported",
        action="store_true",
        help="Leave out stations whose chargers never reported",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    setup_logging(args.debug)

    options = Options(
        lenient_status=args.lenient_status,
        include_unreported=not args.omit_unreported,
    )

    start = time.monotonic()
    try:
        results = run(args.source, options)
    except InputError as exc:
        logger.debug("Input rejected", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if args.format == "json":
        output = render_json(results)
    elif args.format == "html":
        output = render_html(
            results,
            updated=datetime.now().astimezone().isoformat(timespec="seconds"),
            elapsed=time.monotonic() - start,
        )
    else:
        output = render_text(results)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        logger.info("Wrote %d stations to %s", len(results), args.output)
    else:
        sys.stdout.write(output)


if __name__ == "__main__":
    main()
