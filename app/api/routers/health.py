"""Health check API router."""

from fastapi import APIRouter, Request

from app.api.rpc import SERVER_NAME, SERVER_VERSION
from app.infra.metrics import get_metrics_response

router = APIRouter()


@router.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Liveness check; does not contact the backend."""
    return {
        "status": "ok",
        "service": SERVER_NAME,
        "version": SERVER_VERSION,
        "tools": request.app.state.registry.names(),
    }


@router.get("/metrics", tags=["Health"])
async def metrics():
    """Prometheus metrics endpoint."""
    return get_metrics_response()
