"""wunderground-cache — TTL response cache in front of api.weather.com."""
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI

from app.cache import CacheStore
from app.config import HOST, PORT, Settings, load_settings
from app.errors import ConfigError, register_error_handlers
from app.routes import health
from app.routes import weather as weather_routes
from app.services import weather

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("wunderground_cache")


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app.  *settings* and *transport* are injectable for tests."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings
        if cfg is None:
            try:
                cfg = load_settings()
            except ConfigError as e:
                log.error("Invalid configuration: %s", e)
                sys.exit(1)

        client = weather.build_client(transport)
        app.state.settings = cfg
        app.state.store = CacheStore()
        app.state.http = client

        log.info(
            "wunderground-cache started: cache %ds, port %s",
            cfg.cache_duration_secs,
            PORT,
        )
        yield

        await client.aclose()
        log.info("wunderground-cache shutdown complete")

    app = FastAPI(title="wunderground-cache", version="0.1.0", lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(weather_routes.router)
    return app


app = create_app()


def main() -> None:
    """Validate the environment, then serve.  Exits 1 on bad configuration."""
    try:
        settings = load_settings()
    except ConfigError as e:
        log.error("Invalid configuration: %s", e)
        sys.exit(1)

    uvicorn.run(
        create_app(settings),
        host=HOST,
        port=PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
