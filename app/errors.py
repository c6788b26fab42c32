"""Custom exceptions and centralized FastAPI error handlers."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Required environment variable is missing or malformed."""


class WeatherCacheError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(WeatherCacheError):
    """Fetch from api.weather.com failed (network, timeout, status or body)."""

    def __init__(self, resource: str, reason: str):
        super().__init__(f"Upstream fetch for {resource} failed: {reason}", status_code=502)
        self.resource = resource


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(WeatherCacheError)
    async def handle_weather_cache_error(_request: Request, exc: WeatherCacheError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        log.exception("Unhandled error: %s", exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)
