"""Health check and metrics endpoints."""

from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from emissary import __version__
from emissary.api.dependencies import RuntimeDep
from emissary.api.models.health import ComponentHealth, HealthResponse
from emissary.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter()


def _component(store: object, name: str) -> ComponentHealth:
    if store is None:
        return ComponentHealth(name=name, status="unhealthy", message="Not initialized")
    return ComponentHealth(name=name, status="healthy")


@router.get("/health", response_model=HealthResponse)
async def health_check(runtime: RuntimeDep) -> HealthResponse:
    """Check service health status.

    Returns the overall health status of the service along with
    the status of individual components.
    """
    logger.debug("health_check_request")

    components = [
        _component(runtime.directory, "agent_directory"),
        _component(runtime.memory_store, "memory_store"),
        _component(runtime.knowledge_store, "knowledge_store"),
        _component(runtime.audit_store, "audit_store"),
        _component(runtime.conversations, "conversation_store"),
        _component(runtime.gateway, "provider_gateway"),
    ]
    if not runtime.processors:
        components.append(
            ComponentHealth(
                name="webhook_processors", status="degraded", message="No processors registered"
            )
        )

    overall: Literal["healthy", "degraded", "unhealthy"]
    if any(c.status == "unhealthy" for c in components):
        overall = "unhealthy"
    elif any(c.status == "degraded" for c in components):
        overall = "degraded"
    else:
        overall = "healthy"

    logger.debug("health_check_completed", status=overall)
    return HealthResponse(status=overall, version=__version__, components=components)


@metrics_router.get("/metrics")
async def get_metrics() -> Response:
    """Get Prometheus metrics in text exposition format."""
    logger.debug("metrics_request")
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
