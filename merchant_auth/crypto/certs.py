"""X.509 certificate parsing, fingerprints, and self-signed provisioning."""

import base64
import hashlib
from datetime import UTC, datetime, timedelta

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import NameOID

from merchant_auth.core.errors import CertificateParseError

CERT_VALIDITY_DAYS_DEFAULT = 365


def load_certificate(data: bytes) -> x509.Certificate:
    """Parse a PEM certificate."""
    try:
        return x509.load_pem_x509_certificate(data)
    except (ValueError, TypeError) as exc:
        raise CertificateParseError(f"not a valid PEM certificate: {exc}") from exc


def certificate_der(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.DER)


def certificate_x5t(der: bytes) -> str:
    """Base64 of the SHA-1 digest of the DER certificate."""
    return base64.b64encode(hashlib.sha1(der).digest()).decode()


def certificate_x5c(der: bytes) -> list[str]:
    """Single-element chain holding the base64 DER certificate."""
    return [base64.b64encode(der).decode()]


def generate_self_signed_certificate(
    private_key: RSAPrivateKey,
    common_name: str,
    days: int = CERT_VALIDITY_DAYS_DEFAULT,
) -> x509.Certificate:
    """Issue a self-signed certificate for a freshly provisioned key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=days))
        .sign(private_key, hashes.SHA256())
    )


def certificate_to_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)
