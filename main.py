"""
MRV verification engine API.

Run with: uvicorn main:app --reload
"""
import logging
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mrv.core.config import get_settings
from mrv.core.constants import EMISSION_FACTOR_DATASET, METHODOLOGY_ID, METHODOLOGY_VERSION
from mrv.core.database import init_db, close_db
from mrv.routes import health, documents, emissions, verifications, organizations, sessions, tiers

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

ROUTERS = (health, documents, emissions, verifications, organizations, sessions, tiers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, dispose the engine pool on shutdown."""
    await init_db()
    logger.info(
        f"{settings.app_name} {settings.app_version} started "
        f"({METHODOLOGY_ID} {METHODOLOGY_VERSION})"
    )
    yield
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Emissions verification and carbon credit eligibility engine",
    lifespan=lifespan
)

# Dashboards and the extraction service call from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in ROUTERS:
    app.include_router(module.router)


@app.get("/")
async def root():
    """Service identity and the methodology every run is computed with."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "methodology": {
            "id": METHODOLOGY_ID,
            "version": METHODOLOGY_VERSION,
            "emissionFactorDataset": EMISSION_FACTOR_DATASET,
        },
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host='0.0.0.0',
        port=settings.port,
        log_level=settings.log_level.lower()
    )
