"""JWT creation and verification using RS256."""

from datetime import UTC, datetime, timedelta

import jwt

from merchant_auth.crypto.types import KeyDiscoveryDocument

ALGORITHM = "RS256"


class JWTManager:
    """Signs RS256 bearer tokens with a fixed key id and registered claims."""

    def __init__(
        self,
        private_key_pem: bytes,
        kid: str,
        issuer: str,
        audience: str,
        ttl_seconds: int,
    ) -> None:
        self._private_key_pem = private_key_pem
        self._kid = kid
        self._issuer = issuer
        self._audience = audience
        self._ttl_seconds = ttl_seconds

    @property
    def kid(self) -> str:
        return self._kid

    def sign(self, claims: dict[str, str]) -> str:
        """Create a signed token carrying ``claims`` plus iss/aud/iat/exp."""
        now = datetime.now(UTC)
        payload = {
            **claims,
            "iat": now,
            "exp": now + timedelta(seconds=self._ttl_seconds),
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(
            payload,
            self._private_key_pem,
            algorithm=ALGORITHM,
            headers={"kid": self._kid},
        )


def decode_token(
    token: str,
    document: KeyDiscoveryDocument,
    issuer: str,
    audience: str,
) -> dict:
    """Verify a token against the published JWKS, as a relying party would."""
    header = jwt.get_unverified_header(token)
    kid = header.get("kid")
    entry = document.find(kid) if kid else None
    if entry is None:
        raise jwt.InvalidTokenError(f"no published key with kid {kid!r}")
    jwk = jwt.PyJWK(entry.model_dump(mode="json", exclude_none=True), algorithm=ALGORITHM)
    return jwt.decode(
        token,
        jwk.key,
        algorithms=[ALGORITHM],
        issuer=issuer,
        audience=audience,
    )
