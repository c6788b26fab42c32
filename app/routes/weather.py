from __future__ import annotations

from typing import Mapping

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.cache import CacheStore, read_through
from app.config import Settings
from app.deps import get_client, get_settings, get_store
from app.services import weather
from app.services.weather import Resource

router = APIRouter()


async def serve(
    resource: Resource,
    args: Mapping[str, str],
    settings: Settings,
    store: CacheStore,
    client: httpx.AsyncClient,
) -> JSONResponse:
    """Read-through on the resource's cache key; body is the upstream JSON as-is."""
    data = await read_through(
        store,
        resource.cache_key(args),
        settings.cache_duration_secs,
        lambda: weather.fetch_resource(client, settings, resource, args),
    )
    return JSONResponse(data)


@router.get("/")
async def get_root(
    settings: Settings = Depends(get_settings),
    store: CacheStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_client),
):
    return await serve(weather.CURRENT, {}, settings, store, client)


@router.get("/current")
async def get_current(
    settings: Settings = Depends(get_settings),
    store: CacheStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_client),
):
    return await serve(weather.CURRENT, {}, settings, store, client)


@router.get("/forecast")
async def get_forecast(
    geocode: str,
    language: str,
    settings: Settings = Depends(get_settings),
    store: CacheStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_client),
):
    args = {"geocode": geocode, "language": language}
    return await serve(weather.FORECAST, args, settings, store, client)
