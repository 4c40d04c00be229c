"""Application settings loaded from environment variables."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVER_PORT_DEFAULT = 3000
TOKEN_TTL_DEFAULT = 604_800
TOKEN_ISSUER_DEFAULT = "0179465191114887"
TOKEN_AUDIENCE_DEFAULT = "swiftchat"

# Fallback identity used when a token request omits user_id or bot_id.
# Disable with TOKEN_ALLOW_DEFAULT_IDENTITY=false.
DEFAULT_USER_ID = "123456"
DEFAULT_BOT_ID = "0376239051105167"

_SECONDS_PER_UNIT = (("d", 86_400), ("h", 3600), ("m", 60))


class ServerSettings(BaseSettings):
    """HTTP server and process settings."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = SERVER_PORT_DEFAULT
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"

    def get_cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        if not self.cors_origins:
            return []
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class TokenSettings(BaseSettings):
    """Registered claims and request defaults for issued tokens."""

    model_config = SettingsConfigDict(env_prefix="TOKEN_")

    issuer: str = TOKEN_ISSUER_DEFAULT
    audience: str = TOKEN_AUDIENCE_DEFAULT
    ttl_seconds: int = Field(default=TOKEN_TTL_DEFAULT, gt=0)
    default_user_id: str = DEFAULT_USER_ID
    default_bot_id: str = DEFAULT_BOT_ID
    allow_default_identity: bool = True

    @property
    def expires_in_label(self) -> str:
        """Render the TTL the way token responses echo it, e.g. ``7d``."""
        for suffix, seconds in _SECONDS_PER_UNIT:
            if self.ttl_seconds % seconds == 0:
                return f"{self.ttl_seconds // seconds}{suffix}"
        return f"{self.ttl_seconds}s"


class KeySettings(BaseSettings):
    """Where the private key and JWKS document are provisioned.

    Unprefixed so the inline variant keeps the ``PRIVATE_KEY`` and
    ``JWKS_JSON`` variable names.
    """

    model_config = SettingsConfigDict(env_prefix="")

    secret_source: Literal["env", "file"] = "env"
    private_key: str = ""
    jwks_json: str = ""
    private_key_path: Path = Path("private.pem")
    jwks_path: Path = Path("jwks/jwks.json")


class AppSettings(BaseModel):
    """All settings the service needs, built once at startup."""

    server: ServerSettings
    token: TokenSettings
    keys: KeySettings

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Load every settings group from the environment."""
        return cls(
            server=ServerSettings(),
            token=TokenSettings(),
            keys=KeySettings(),
        )
