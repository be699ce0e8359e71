"""FastAPI entrypoint for the suggestion service."""
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import EngineSettings, load_settings
from .datasets import load_content_records, load_trending
from .engine import SuggestionEngine
from .http.suggestions import router as suggestions_router
from .storage import DuckDBKeyValueStore, KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    package_logger = logging.getLogger("typeahead")
    package_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    package_logger.handlers.clear()  # avoid duplicate logs if reloading
    package_logger.addHandler(handler)
    package_logger.propagate = False  # don't let Uvicorn re-handle it


def build_engine(settings: Optional[EngineSettings] = None) -> SuggestionEngine:
    settings = settings or load_settings()
    store: KeyValueStore
    if settings.storage_path is not None:
        store = DuckDBKeyValueStore(settings.storage_path)
    else:
        store = MemoryKeyValueStore()
    records = load_content_records(settings.spots_path)
    engine = SuggestionEngine(
        settings=settings,
        store=store,
        content=records,
        trending=load_trending(settings.trending_path),
    )
    logger.info(
        "suggestion_engine_ready storage=%s spots=%d persist_cache=%s telemetry=%s ttl=%.0fs debounce=%.3fs",
        settings.storage_path or "memory",
        len(records),
        settings.persist_cache,
        settings.telemetry_enabled,
        engine.cache_ttl,
        engine.debounce_delay,
    )
    return engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "engine", None) is None:
        app.state.engine = build_engine()
    try:
        yield
    finally:
        app.state.engine.close()


def create_app(engine: Optional[SuggestionEngine] = None) -> FastAPI:
    app = FastAPI(title="Typeahead Suggestion Service", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.engine = engine
    app.include_router(suggestions_router)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()
