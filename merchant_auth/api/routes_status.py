"""Service index and liveness endpoints."""

from fastapi import APIRouter

from merchant_auth.api.deps import Secrets, Settings, StartedAt
from merchant_auth.api.status import get_index, get_status
from merchant_auth.api.types import HealthResponse, RootResponse

router = APIRouter(tags=["status"])


@router.get("/")
async def root(settings: Settings) -> RootResponse:
    """GET / -- service banner and endpoint index."""
    return get_index(settings.server.environment)


@router.get("/health")
async def health(
    settings: Settings,
    source: Secrets,
    started_at: StartedAt,
) -> HealthResponse:
    """GET /health -- OK when both the private key and JWKS are present."""
    return get_status(source, started_at, settings.server.environment)
