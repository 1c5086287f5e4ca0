"""FastAPI application exposing sunrise and sunset computations."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import TWILIGHT_ANGLES, calculate
from core.config import load_settings
from models import ErrorResponse, HealthResponse, SunQueryParams, SunResponse, Twilight

SETTINGS = load_settings()

logging.basicConfig(level=SETTINGS.log_level, format="%(message)s")
LOGGER = logging.getLogger("sunrise-api")

APP_DESCRIPTION = (
    "Nearest sunrise and sunset events, with azimuths, around a UTC instant"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "window_hours": SETTINGS.window_hours,
                "twilight": SETTINGS.twilight,
            }
        )
    )
    yield


app = FastAPI(
    title="Horizon Events API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_utc(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, UTC).isoformat().replace("+00:00", "Z")


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        ok=True,
        window_hours=SETTINGS.window_hours,
        twilight=Twilight(SETTINGS.twilight),
        twilight_angles=dict(TWILIGHT_ANGLES),
    )


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    window_hours = params.window_hours or SETTINGS.window_hours
    try:
        result = calculate(
            params.lat,
            params.lon,
            params.timestamp,
            twilight=params.twilight.value,
            window_hours=window_hours,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        latitude=params.lat,
        longitude=params.lon,
        twilight=params.twilight,
        window_hours=window_hours,
        query_time=result.query_time,
        query_utc=_format_utc(result.query_time),
        has_rise=result.has_rise,
        has_set=result.has_set,
        is_visible=result.is_visible,
        rise_time=result.rise_time if result.has_rise else None,
        set_time=result.set_time if result.has_set else None,
        rise_utc=_format_utc(result.rise_time) if result.has_rise else None,
        set_utc=_format_utc(result.set_time) if result.has_set else None,
        rise_az=round(result.rise_az, 2) if result.has_rise else None,
        set_az=round(result.set_az, 2) if result.has_set else None,
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "timestamp": params.timestamp,
                "twilight": params.twilight.value,
                "has_rise": result.has_rise,
                "has_set": result.has_set,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response
