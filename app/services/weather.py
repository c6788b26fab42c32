"""api.weather.com client for PWS observations and the 5-day forecast."""
from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ConfigDict

from app.config import Settings
from app.errors import UpstreamError

log = logging.getLogger(__name__)

USER_AGENT = "wunderground-cache/0.1.0"
FETCH_TIMEOUT = 5.0

CURRENT_URL = "https://api.weather.com/v2/pws/observations/current"
FORECAST_URL = "https://api.weather.com/v3/wx/forecast/daily/5day"


class Resource(BaseModel):
    """One logical upstream resource, described as data."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    # Fixed query flags sent on every call
    params: dict[str, str] = {}
    # Client-supplied query parameters, in cache-key order
    query: tuple[str, ...] = ()
    # Send the configured station id as stationId
    station: bool = False

    def cache_key(self, args: Mapping[str, str]) -> str:
        """``name`` followed by each client argument verbatim, joined by ``_``."""
        return "_".join([self.name, *(args[q] for q in self.query)])


CURRENT = Resource(
    name="current",
    url=CURRENT_URL,
    params={"format": "json", "numericPrecision": "decimal"},
    station=True,
)

FORECAST = Resource(
    name="forecast",
    url=FORECAST_URL,
    params={"format": "json"},
    query=("geocode", "language"),
)


def build_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Shared outbound client with the fixed headers and timeout."""
    return httpx.AsyncClient(
        headers={"Accept-Encoding": "gzip", "User-Agent": USER_AGENT},
        timeout=httpx.Timeout(FETCH_TIMEOUT),
        transport=transport,
    )


def _reject_constant(name: str) -> Any:
    # NaN and Infinity parse but cannot be served back as strict JSON
    raise ValueError(f"non-finite number {name}")


async def fetch_json(
    client: httpx.AsyncClient, resource: str, url: str, params: Mapping[str, str]
) -> Any:
    """Single GET, no retries.  Every failure surfaces as ``UpstreamError``."""
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json(parse_constant=_reject_constant)
    except httpx.HTTPStatusError as e:
        # str(e) carries the full URL, apiKey included
        reason = f"status {e.response.status_code}"
        log.warning("Upstream fetch for %s failed: %s", resource, reason)
        raise UpstreamError(resource, reason) from e
    except httpx.HTTPError as e:
        log.warning("Upstream fetch for %s failed: %s", resource, type(e).__name__)
        raise UpstreamError(resource, type(e).__name__) from e
    except ValueError as e:
        log.warning("Upstream fetch for %s returned invalid JSON: %s", resource, e)
        raise UpstreamError(resource, "invalid JSON body") from e


async def fetch_resource(
    client: httpx.AsyncClient,
    settings: Settings,
    resource: Resource,
    args: Mapping[str, str],
) -> Any:
    """Fetch *resource* with the server-held credentials and client *args*."""
    params: dict[str, str] = {**resource.params, "units": settings.units}
    if resource.station:
        params["stationId"] = settings.pws_id
    params["apiKey"] = settings.api_key
    for q in resource.query:
        params[q] = args[q]
    return await fetch_json(client, resource.name, resource.url, params)
