from __future__ import annotations

import httpx
from fastapi import Request

from app.cache import CacheStore
from app.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> CacheStore:
    return request.app.state.store


def get_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http
