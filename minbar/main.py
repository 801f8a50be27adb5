import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from minbar.config import settings
from minbar.database import init_db
from minbar.routes import khutbahs, live

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create SQLite tables on startup; end any live session on shutdown."""
    await init_db()
    try:
        yield
    finally:
        live.shutdown()


app = FastAPI(
    title="minbar",
    description="Khutbah library and Live Minbar delivery engine",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(khutbahs.router)
app.include_router(live.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "live": live.get_host().is_active}
