from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from datastore.readings import build_default_store
from logging_config import configure_logging
from services.analysis import build_default_analyzer


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_store()
    build_default_analyzer()
    try:
        yield
    finally:
        build_default_store.cache_clear()
        build_default_analyzer.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Zone Pollution Analyzer",
        description="Pollution risk scoring and geometric operations for monitoring zones.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
