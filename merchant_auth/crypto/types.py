"""Type definitions for JWK records and the JWKS document."""

from pydantic import BaseModel, ConfigDict, model_validator


class JWKEntry(BaseModel):
    """Single key-discovery record in a JWKS document.

    Field order matches what the builder writes. Unknown members from a
    hand-provisioned document are kept on the model.
    """

    model_config = ConfigDict(extra="allow")

    kty: str = "RSA"
    n: str | None = None
    e: str | None = None
    x5t: str | None = None
    kid: str | None = None
    x5c: list[str] | None = None
    alg: str | None = None
    use: str | None = None


class KeyDiscoveryDocument(BaseModel):
    """JSON Web Key Set: ``{"keys": [...]}``."""

    model_config = ConfigDict(extra="allow")

    keys: list[JWKEntry]

    @model_validator(mode="after")
    def _primary_key_has_kid(self) -> "KeyDiscoveryDocument":
        # Tokens are signed with keys[0]; its kid goes into every header.
        if self.keys and not self.keys[0].kid:
            raise ValueError("the first key must carry a kid")
        return self

    def primary_key(self) -> JWKEntry:
        """Return the record used to sign new tokens."""
        return self.keys[0]

    def find(self, kid: str) -> JWKEntry | None:
        """Look a record up by key id."""
        for entry in self.keys:
            if entry.kid == kid:
                return entry
        return None

    def to_json_dict(self) -> dict:
        """Serialise with only the members present in the source."""
        return self.model_dump(mode="json", exclude_none=True)
