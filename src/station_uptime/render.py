from typing import Iterable, List
import html
import json
import logging

from .uptime import StationUptime

logger = logging.getLogger(__name__)


# Template for the HTML uptime report
REPORT_TEMPLATE = """
<!DOCTYPE html>
<html lang='en'>
<head>
    <meta charset='UTF-8'>
    <title>Station Uptime</title>
    <link href="https://cdn.jsdelivr.net/npm/bootswatch@5.3.2/dist/flatly/bootstrap.min.css" rel="stylesheet">
</head>
<body>
<nav class="navbar navbar-dark bg-primary">
  <div class="container-fluid">
    <span class="navbar-brand">Station Uptime</span>
  </div>
</nav>
<div class="container py-4">
<h1 class="mb-4">Station Uptime</h1>
<ul class="list-group mb-4">
    <li class="list-group-item">Stations: {station_count}</li>
    <li class="list-group-item">Stations without reports: {unreported_count}</li>
</ul>
<div class="table-responsive">
<table class="table table-striped">
    <thead class="table-dark">
        <tr><th>Station</th><th>Uptime (%)</th><th>Reporting (ns)</th><th>Up (ns)</th></tr>
    </thead>
    <tbody>
        {rows}
    </tbody>
</table>
</div>
<div class="text-muted small mt-4">
    <p>Page last updated: {updated}</p>
    <p>Processed in {elapsed:.2f} s</p>
</div>
</div>
</body>
</html>
"""


def render_text(results: Iterable[StationUptime]) -> str:
    """Return one ``<station id> <percentage>`` line per station."""
    lines = [f"{r.station_id} {r.percentage}" for r in results]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def render_json(results: Iterable[StationUptime]) -> str:
    payload = [
        {
            "station_id": r.station_id,
            "uptime_pct": r.percentage,
            "reporting_ns": r.reporting_ns,
            "up_ns": r.up_ns,
        }
        for r in results
    ]
    return json.dumps(payload, indent=2) + "\n"


def _render_rows(results: List[StationUptime]) -> str:
    rows: List[str] = []
    for r in results:
        css = "" if r.reported else " class='text-muted'"
        cells = [
            f"<td>{r.station_id}</td>",
            f"<td>{r.percentage}</td>",
            f"<td>{r.reporting_ns}</td>",
            f"<td>{r.up_ns}</td>",
        ]
        rows.append(f"<tr{css}>" + "".join(cells) + "</tr>")
    return "\n".join(rows)


def render_html(
    results: Iterable[StationUptime],
    updated: str | None = None,
    elapsed: float | None = None,
) -> str:
    """Return the HTML report page for the computed stations."""
    items = list(results)
    page = REPORT_TEMPLATE.format(
        station_count=len(items),
        unreported_count=sum(1 for r in items if not r.reported),
        rows=_render_rows(items),
        updated=html.escape(updated or "N/A"),
        elapsed=(elapsed if elapsed is not None else 0.0),
    )
    logger.debug("Generated report HTML with %d rows", len(items))
    return page
