"""
BiteBot - FastAPI application serving Discord interactions
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy import text
import structlog

from app.config import settings
from app.database import engine, SessionLocal
from app.webhooks import discord

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

renderer = (
    structlog.dev.ConsoleRenderer()
    if settings.log_format == "console"
    else structlog.processors.JSONRenderer()
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting BiteBot", version="1.0.0")
    yield
    logger.info("Shutting down BiteBot")
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title="BiteBot",
    description="Discord bot for cataloguing restaurants and coordinating orders",
    version="1.0.0",
    lifespan=lifespan,
)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "bitebot", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with database verification"""
    checks = {}

    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include webhook routers
app.include_router(discord.router, prefix="/interactions", tags=["Discord"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
