import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from sqlalchemy import text

import guestlinks.models  # noqa: F401  registers tables on Base.metadata
from guestlinks.core.config import settings
from guestlinks.core.database import Base, SessionLocal, engine
from guestlinks.monitoring.setup import setup_monitoring
from guestlinks.routes import guest_links, guest_sessions

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("guestlinks")

@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        async with engine.begin() as conn:
            await conn.execute(text("PRAGMA journal_mode=WAL;"))
            logger.info("Creating database tables:")
            for table in Base.metadata.tables.values():
                logger.info(" - Table: %s", table.name)

            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Database initialization failed: %s", e)
        raise

    yield

    await engine.dispose()
    logger.info("Application shutdown complete")

app = FastAPI(
    title="Guest Links",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(guest_links, prefix="/api")
app.include_router(guest_sessions, prefix="/api")

setup_monitoring(app)

@app.get("/health")
async def health_check():
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": db_status,
    }

if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
        timeout_keep_alive=60,
        limit_concurrency=100
    )
