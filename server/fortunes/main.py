"""Fortune server main entry point.

This is the only file that knows about concrete implementations.
It wires together the store, the backend, and the API layer.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from fortunes.api.fortunes import router as fortunes_router
from fortunes.config import AppConfig, load_config
from fortunes.core.store import FortuneStore
from fortunes.storage.redis_backend import RedisFortuneBackend

log = structlog.get_logger()


def setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
    )


def build_backend(config: AppConfig) -> RedisFortuneBackend:
    return RedisFortuneBackend(
        host=config.backend.host,
        port=config.backend.port,
        timeout=config.backend.timeout_seconds,
        key=config.backend.key,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    config = load_config()
    setup_logging(config)

    log.info("server_starting",
             env=config.server.env,
             backend_host=config.backend.host,
             backend_port=config.backend.port)

    backend = build_backend(config)
    app.state.config = config
    app.state.store = await FortuneStore.open(backend)

    log.info("server_started",
             host=config.server.host,
             port=config.server.port,
             fortunes=len(app.state.store))

    try:
        yield
    finally:
        await backend.close()
        log.info("server_stopped")


app = FastAPI(
    title="Fortunes",
    description="Fortune cookie API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(fortunes_router)


def run() -> None:
    import uvicorn

    config = load_config()
    uvicorn.run("fortunes.main:app", host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run()
