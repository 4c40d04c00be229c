"""RSA key generation, JWK parameter export, and RFC 7638 thumbprints."""

import base64
import hashlib
import json

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
)

from merchant_auth.crypto.types import JWKEntry

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

# Required members per key type, RFC 7638 section 3.2.
_THUMBPRINT_MEMBERS = {"RSA": ("e", "kty", "n")}


def generate_rsa_private_key() -> RSAPrivateKey:
    """Generate a new RSA-2048 private key for RS256 signing."""
    return rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )


def private_key_to_pem(private_key: RSAPrivateKey) -> bytes:
    """Serialise a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_rsa_private_key(pem: bytes) -> RSAPrivateKey:
    """Load a PEM private key, rejecting anything that is not RSA."""
    loaded = serialization.load_pem_private_key(pem, password=None)
    if not isinstance(loaded, RSAPrivateKey):
        raise TypeError(f"expected an RSA private key, got {type(loaded).__name__}")
    return loaded


def int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def public_key_to_params(public_key: object) -> dict[str, str]:
    """Export an RSA public key as its JWK parameter set."""
    if not isinstance(public_key, RSAPublicKey):
        raise ValueError(f"unsupported public key type {type(public_key).__name__}")
    numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "n": int_to_base64url(numbers.n),
        "e": int_to_base64url(numbers.e),
    }


def jwk_thumbprint(params: dict[str, str]) -> str:
    """Compute the RFC 7638 SHA-256 thumbprint of a public JWK."""
    kty = params.get("kty", "")
    members = _THUMBPRINT_MEMBERS.get(kty)
    if members is None:
        raise ValueError(f"unsupported kty for thumbprint: {kty!r}")
    canonical = {name: params[name] for name in members}
    data = json.dumps(canonical, separators=(",", ":"), sort_keys=True)
    digest = hashlib.sha256(data.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()


def public_key_matches(private_key: RSAPrivateKey, record: JWKEntry) -> bool:
    """Check that a private key is the counterpart of a JWKS record."""
    if record.n is None or record.e is None:
        return False
    params = public_key_to_params(private_key.public_key())
    return params["n"] == record.n and params["e"] == record.e
