"""JWKS discovery endpoint."""

import logging

from fastapi import APIRouter
from starlette.responses import JSONResponse, Response

from merchant_auth.api.deps import Secrets
from merchant_auth.core.errors import KeyUnavailableError, error_response

logger = logging.getLogger(__name__)
router = APIRouter(tags=["well-known"])

JWKS_CACHE_CONTROL = "public, max-age=3600"


@router.get("/.well-known/jwks.json", response_model=None)
async def jwks(source: Secrets) -> Response | JSONResponse:
    """JSON Web Key Set, served byte for byte as provisioned."""
    try:
        raw = source.load_discovery_json()
    except KeyUnavailableError as e:
        logger.error("Error serving JWKS: %s", e)
        return error_response(
            e.status_code,
            "Internal Server Error",
            "Unable to load JWKS",
            details=str(e),
        )
    return Response(
        raw,
        media_type="application/json",
        headers={"Cache-Control": JWKS_CACHE_CONTROL},
    )
