"""Bearer token issuance."""

import logging

import jwt

from merchant_auth.api.types import (
    TokenHeader,
    TokenPayload,
    TokenRequest,
    TokenResponse,
)
from merchant_auth.core.errors import SigningError, ValidationError
from merchant_auth.core.settings import TokenSettings
from merchant_auth.crypto.jwt_manager import ALGORITHM, JWTManager
from merchant_auth.crypto.keys import load_rsa_private_key, public_key_matches
from merchant_auth.keystore.sources import SecretSource

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "user_id and bot_id are required"


def resolve_claims(request: TokenRequest, settings: TokenSettings) -> TokenPayload:
    """Apply the default identity to absent fields and reject blank ones.

    Only ``None`` (field absent) is replaced by a default. An explicit empty
    or whitespace-only string is a validation error.
    """
    user_id = request.user_id
    bot_id = request.bot_id
    if settings.allow_default_identity:
        if user_id is None:
            user_id = settings.default_user_id
        if bot_id is None:
            bot_id = settings.default_bot_id
    if not user_id or not user_id.strip() or not bot_id or not bot_id.strip():
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    return TokenPayload(user_id=user_id, bot_id=bot_id)


def issue_token(
    request: TokenRequest,
    source: SecretSource,
    settings: TokenSettings,
) -> TokenResponse:
    """Sign a token for the request's claims with the published key."""
    payload = resolve_claims(request, settings)
    private_key_pem = source.load_private_key()
    document = source.load_discovery_document()
    record = document.primary_key()

    try:
        private_key = load_rsa_private_key(private_key_pem)
    except (ValueError, TypeError) as e:
        raise SigningError("private key is not a usable RSA PEM key") from e
    if not public_key_matches(private_key, record):
        logger.error("Private key does not match published key kid=%s", record.kid)
        raise SigningError("private key does not match the published JWKS key")

    jwt_mgr = JWTManager(
        private_key_pem=private_key_pem,
        kid=record.kid,
        issuer=settings.issuer,
        audience=settings.audience,
        ttl_seconds=settings.ttl_seconds,
    )
    try:
        token = jwt_mgr.sign(payload.model_dump())
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise SigningError(f"{ALGORITHM} signing failed") from e

    logger.info("Issued token kid=%s user_id=%s bot_id=%s", record.kid, payload.user_id, payload.bot_id)
    return TokenResponse(
        token=token,
        expires_in=settings.expires_in_label,
        payload=payload,
        header=TokenHeader(alg=ALGORITHM, kid=record.kid),
    )
