"""
Supashim Web - FastAPI application.

Route modules delegate to controllers; controllers talk to Supabase
through the Knex-style query builder in supashim.db.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from supashim import __version__
from supashim.db import db
from supashim.web.routes.auth import router as auth_router

logger = logging.getLogger(__name__)


def _on_db_error(error: Exception) -> None:
    logger.error(f"Database error: {error}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup, release the database on shutdown."""
    from supashim.config import settings

    logger.info("Supashim starting up...")
    logger.info(f"  Environment: {settings.shim_env}")
    logger.info(f"  Strict unsupported operations: {settings.shim_strict_unsupported}")
    db.on("error", _on_db_error)
    yield
    await db.destroy()


app = FastAPI(title="Supashim", version=__version__, lifespan=lifespan)

app.include_router(auth_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/health/db")
async def database_health_check():
    """Check the database answers a ping."""
    try:
        await db.raw("SELECT 1")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "error"},
        )
    return {"status": "healthy", "database": "ok"}
