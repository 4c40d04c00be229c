"""Liveness and service index."""

import time
from datetime import UTC, datetime

from merchant_auth.api.types import HealthResponse, KeyPresence, RootResponse
from merchant_auth.keystore.sources import SecretSource

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_status(source: SecretSource, started_at: float, environment: str) -> HealthResponse:
    """Report whether key material is resolvable. Never raises."""
    has_private_key = source.has_private_key()
    has_jwks = source.has_discovery_document()
    return HealthResponse(
        status=STATUS_OK if has_private_key and has_jwks else STATUS_ERROR,
        uptime=round(time.monotonic() - started_at, 3),
        timestamp=_now_iso(),
        environment=KeyPresence(
            has_private_key=has_private_key,
            has_jwks=has_jwks,
            environment=environment,
        ),
    )


def get_index(environment: str) -> RootResponse:
    return RootResponse(
        message="Welcome to Merchant Backend API",
        status="Server is running successfully",
        timestamp=_now_iso(),
        environment=environment,
    )
