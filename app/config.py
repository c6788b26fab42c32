from __future__ import annotations

import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from app.errors import ConfigError

load_dotenv()

# Fixed listening address
HOST = "0.0.0.0"
PORT = 8080


class Settings(BaseModel):
    """Immutable runtime settings, read once at startup."""

    model_config = ConfigDict(frozen=True)

    cache_duration_secs: int
    pws_id: str
    api_key: str
    units: str = "m"


def _required(environ: Mapping[str, str], key: str) -> str:
    val = environ.get(key)
    if val is None or not val.strip():
        raise ConfigError(f"{key} not defined")
    return val.strip()


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from the environment.

    Raises ``ConfigError`` naming the first missing or malformed variable.
    """
    if environ is None:
        environ = os.environ

    raw_duration = _required(environ, "CACHE_DURATION_SECS")
    # plain ASCII digits only: no sign, underscores or other scripts
    if not (raw_duration.isascii() and raw_duration.isdigit()):
        raise ConfigError(f"CACHE_DURATION_SECS wrong value: {raw_duration!r}")
    cache_duration_secs = int(raw_duration)

    return Settings(
        cache_duration_secs=cache_duration_secs,
        pws_id=_required(environ, "PWS_ID"),
        api_key=_required(environ, "API_KEY"),
        units=environ.get("WEATHER_UNITS", "m").strip() or "m",
    )
