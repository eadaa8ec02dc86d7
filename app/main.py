from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.realtime import router as realtime_router
from app.web import router as web_router
from logging_config import configure_logging
from services.relay import build_default_relay


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    relay = build_default_relay()
    try:
        yield
    finally:
        relay.shutdown()
        build_default_relay.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Live Sensors Dashboard",
        description="Stores pushed temperature/humidity readings and streams them to live viewers.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(realtime_router)
    app.include_router(web_router)
    return app

app = create_app()
