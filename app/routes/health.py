from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from app.cache import CacheStore
from app.deps import get_store

router = APIRouter()

_start_time = time.time()
_VERSION = "0.1.0"


@router.get("/healthz")
async def healthz(store: CacheStore = Depends(get_store)):
    return {
        "status": "ok",
        "version": _VERSION,
        "uptime_seconds": round(time.time() - _start_time),
        "cache_ages": await store.ages(),
    }
