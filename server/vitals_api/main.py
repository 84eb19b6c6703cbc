"""Vitals API - FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import db_manager
from .routes import vital_types, readings, alerts

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_manager.init_schema()
    yield


app = FastAPI(
    title="Vitals API",
    description="Vital-sign recording, alert classification and trend analysis",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(vital_types.router)
app.include_router(readings.router)
app.include_router(alerts.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "vitals-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.vitals_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
