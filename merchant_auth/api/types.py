"""Request and response schemas for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(name: str) -> str:
    """Convert snake_case to camelCase for JSON serialization."""
    parts = name.split("_")
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


class TokenRequest(BaseModel):
    """Body of POST /generate-token. Both fields are optional."""

    user_id: str | None = None
    bot_id: str | None = None


class TokenPayload(BaseModel):
    user_id: str
    bot_id: str


class TokenHeader(BaseModel):
    alg: str
    kid: str


class TokenResponse(BaseModel):
    """Issued token plus the metadata echoed back to the caller."""

    success: bool = True
    token: str
    expires_in: str
    token_type: str = "Bearer"
    payload: TokenPayload
    header: TokenHeader


class KeyPresence(BaseModel):
    """Which key material the process can currently resolve."""

    model_config = ConfigDict(alias_generator=_to_camel, populate_by_name=True)

    has_private_key: bool
    has_jwks: bool = Field(alias="hasJWKS")
    environment: str


class HealthResponse(BaseModel):
    status: str
    uptime: float
    timestamp: str
    environment: KeyPresence


class EndpointIndex(BaseModel):
    model_config = ConfigDict(alias_generator=_to_camel, populate_by_name=True)

    root: str = "GET /"
    health: str = "GET /health"
    jwks: str = "GET /.well-known/jwks.json"
    generate_token: str = "POST /generate-token"


class RootResponse(BaseModel):
    message: str
    status: str
    timestamp: str
    environment: str
    endpoints: EndpointIndex = Field(default_factory=EndpointIndex)
