"""FastAPI application entry point and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from backend.api.achievements_router import router as achievements_router
from backend.api.planning_router import router as planning_router
from backend.api.review_router import router as review_router
from backend.api.rewards_router import router as rewards_router
from backend.config import settings
from backend.database import async_session, create_tables, engine
from backend.services import build_services
from backend.storage.kv import SqlKeyValueStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize database and load persisted state on startup."""
    await create_tables()
    app.state.services = await build_services(SqlKeyValueStore(async_session))
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Personal productivity backend: spaced repetition, achievements and rewards",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(review_router)
app.include_router(achievements_router)
app.include_router(rewards_router)
app.include_router(planning_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Check database connectivity and return status."""
    async with async_session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ok"}
