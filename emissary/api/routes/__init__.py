"""API route registration.

This module provides helper functions for registering API routers
with the FastAPI application.
"""

from fastapi import APIRouter, FastAPI

from emissary.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from emissary.api.routes.a2a import router as a2a_router
    from emissary.api.routes.messages import router as messages_router
    from emissary.api.routes.webhooks import router as webhooks_router

    router.include_router(messages_router, tags=["Messages"])
    router.include_router(a2a_router, tags=["A2A"])
    router.include_router(webhooks_router, tags=["Webhooks"])

    logger.debug("v1_router_created", routes=["messages", "a2a", "webhooks"])

    return router


def register_routes(app: FastAPI, *, metrics_enabled: bool = True) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(create_v1_router())

    from emissary.api.routes.health import metrics_router
    from emissary.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])
    if metrics_enabled:
        app.include_router(metrics_router, tags=["Health"])

    logger.info("routes_registered", metrics_enabled=metrics_enabled)
