"""FastAPI application for the email discovery service.

This module provides the main FastAPI application instance with CORS
middleware configuration and router registration.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mailfinder.core.config import (
    CORS_ORIGINS,
    INTER_DOMAIN_DELAY_SECONDS,
    LOG_LEVEL,
    MAX_DOMAINS_PER_BATCH,
)
from mailfinder.routers import candidates, discovery

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Email Discovery API"
API_DESCRIPTION = """
Email Discovery API.

This API provides endpoints for:
- Generating ranked email candidates for people at a domain
- Parsing uploaded domain lists
- Running batch discovery sessions across many domains
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Logs the effective discovery settings on startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    logger.info(f"Inter-domain delay: {INTER_DOMAIN_DELAY_SECONDS}s")
    logger.info(f"Max domains per batch: {MAX_DOMAINS_PER_BATCH}")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# Configure CORS middleware
# Origins come from CORS_ORIGINS (comma-separated list), local dev servers by default
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Email candidate generation and batch discovery",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy"}


# Router registration
app.include_router(candidates.router, prefix="/api")
app.include_router(discovery.router, prefix="/api")
