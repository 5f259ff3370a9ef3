"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, and includes all route modules.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from screenmap import config
from screenmap.logging_config import get_api_logger

logger = get_api_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Warn about optional integrations
    if not config.FIGMA_TOKEN:
        logger.warning(
            "FIGMA_TOKEN not set, /api/v1/screens/from-figma endpoint will be unavailable. "
            "Set FIGMA_TOKEN in the environment to enable Figma integration."
        )
    yield


app = FastAPI(title="Screen Map API", version="1.0.0", lifespan=lifespan)

CORS_ORIGINS = [o.strip() for o in config.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from .routes.screens import router as screens_router  # noqa: E402

app.include_router(screens_router)
