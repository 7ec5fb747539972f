"""FastAPI service computing station uptime on request."""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .data import InputError, fetch_text, load_inputs
from .logging_utils import setup_logging
from .options import Options
from .uptime import StationUptime, compute_uptime

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Runtime configuration for the API service."""

    data_source: str | None
    options: Options
    cors_origins: list[str]
    debug: bool


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def load_settings() -> Settings:
    """Load service configuration from environment variables."""

    data_source = os.getenv("STATION_UPTIME_DATA_SOURCE") or None
    default_options = Options()
    options = Options(
        lenient_status=_parse_bool(
            os.getenv("STATION_UPTIME_LENIENT_STATUS"), default_options.lenient_status
        ),
        include_unreported=_parse_bool(
            os.getenv("STATION_UPTIME_INCLUDE_UNREPORTED"),
            default_options.include_unreported,
        ),
    )
    cors_env = os.getenv("STATION_UPTIME_CORS_ORIGINS", "*")
    cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
    debug = _parse_bool(os.getenv("STATION_UPTIME_DEBUG"), False)
    return Settings(
        data_source=data_source,
        options=options,
        cors_origins=cors_origins or ["*"],
        debug=debug,
    )


_INITIAL_SETTINGS = load_settings()

app = FastAPI(title="Station Uptime API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_INITIAL_SETTINGS.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.on_event("startup")
async def on_startup() -> None:
    settings = load_settings()
    setup_logging(settings.debug)
    app.state.settings = settings
    logger.info("Station uptime API started (data_source=%s)", settings.data_source)


def _require_settings() -> Settings:
    settings = getattr(app.state, "settings", None)
    if settings is None:  # pragma: no cover - startup should populate
        raise HTTPException(status_code=503, detail="Service not initialised")
    return settings


def _serialise(results: List[StationUptime]) -> Dict[str, Any]:
    return {
        "stations": [
            {
                "station_id": r.station_id,
                "uptime_pct": r.percentage,
                "reporting_ns": r.reporting_ns,
                "up_ns": r.up_ns,
            }
            for r in results
        ]
    }


def _compute(text: str, options: Options) -> Dict[str, Any]:
    stations, reports = load_inputs(text, options)
    return _serialise(compute_uptime(stations, reports, options))


async def _compute_or_422(text: str, options: Options) -> Dict[str, Any]:
    try:
        return await asyncio.to_thread(_compute, text, options)
    except InputError as exc:
        logger.info("Rejected input: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.get("/healthz")
async def healthz() -> Dict[str, Any]:
    settings = _require_settings()
    return {"status": "ok", "data_source": settings.data_source}


@app.post("/api/uptime")
async def uptime_from_body(request: Request) -> Dict[str, Any]:
    settings = _require_settings()
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=422, detail="Body must be UTF-8 text") from exc
    return await _compute_or_422(text, settings.options)


@app.get("/api/uptime")
async def uptime_from_source() -> Dict[str, Any]:
    settings = _require_settings()
    if not settings.data_source:
        raise HTTPException(status_code=404, detail="No data source configured")
    try:
        text = await asyncio.to_thread(fetch_text, settings.data_source)
    except InputError as exc:
        logger.exception("Failed to read %s", settings.data_source)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return await _compute_or_422(text, settings.options)


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(
        "station_uptime.api:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
