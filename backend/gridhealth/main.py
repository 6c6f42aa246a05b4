# backend/gridhealth/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gridhealth.api.health import router as health_router
from gridhealth.api.reports import router as reports_router
from gridhealth.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    yield
    # Shutdown


app = FastAPI(title="GridHealth", version="0.1.0", lifespan=lifespan)

# Include routers
app.include_router(health_router)
app.include_router(reports_router)


@app.get("/health")
async def health():
    return {"status": "healthy"}
