"""
FastAPI application entry point for RouteDesk.

Back-office API for building delivery routes from pending orders.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routedesk.core.config import settings
from routedesk.core.logging import configure_logging
from routedesk.api.v1 import api_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Schema is managed by Alembic migrations; startup only sets up logging.
    """
    configure_logging(settings.log_level)
    yield


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## RouteDesk

        Back-office API for a small delivery operation:

        - **Orders**: browse orders and the pending pool
        - **Drivers**: driver roster and availability
        - **Routes**: build routes from selected orders, track execution

        ### Route assignment

        Creating or updating a route numbers its stops in selection order,
        replaces any previous stops and marks every selected order ASSIGNED.
        By default the whole operation is a single transaction.
        """,
        version=settings.app_version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_application()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": f"{settings.api_v1_prefix}/docs",
        "openapi": f"{settings.api_v1_prefix}/openapi.json",
    }
