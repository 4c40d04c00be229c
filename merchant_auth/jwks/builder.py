"""Key-discovery builder: certificate in, JWKS document out.

Runs once per key provisioning. The document it writes is what the token
service loads and what ``/.well-known/jwks.json`` serves.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from merchant_auth.core.errors import CertificateParseError
from merchant_auth.crypto.certs import (
    certificate_der,
    certificate_x5c,
    certificate_x5t,
    load_certificate,
)
from merchant_auth.crypto.keys import jwk_thumbprint, public_key_to_params
from merchant_auth.crypto.types import JWKEntry, KeyDiscoveryDocument

logger = logging.getLogger(__name__)


def build_jwk(cert_pem: bytes) -> JWKEntry:
    """Derive the JWK record (params, x5t, kid, x5c) for a certificate."""
    cert = load_certificate(cert_pem)
    try:
        params = public_key_to_params(cert.public_key())
    except ValueError as exc:
        raise CertificateParseError(f"certificate key cannot sign RS256: {exc}") from exc
    der = certificate_der(cert)
    return JWKEntry(
        **params,
        x5t=certificate_x5t(der),
        kid=jwk_thumbprint(params),
        x5c=certificate_x5c(der),
    )


def build_discovery_document(cert_pem: bytes) -> KeyDiscoveryDocument:
    return KeyDiscoveryDocument(keys=[build_jwk(cert_pem)])


def render_discovery_document(document: KeyDiscoveryDocument) -> str:
    """Pretty-print the document as JSON."""
    return json.dumps(document.to_json_dict(), indent=2) + "\n"


def write_discovery_document(document: KeyDiscoveryDocument, destination: Path) -> None:
    """Write the document atomically; a failed run leaves no partial file."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(render_discovery_document(document))
        os.replace(tmp_name, destination)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def build_from_file(certificate_path: Path, destination: Path) -> KeyDiscoveryDocument:
    """Read a PEM certificate and write its JWKS document to ``destination``."""
    cert_pem = certificate_path.read_bytes()
    document = build_discovery_document(cert_pem)
    write_discovery_document(document, destination)
    logger.info(
        "Wrote JWKS for %s to %s (kid=%s)",
        certificate_path,
        destination,
        document.primary_key().kid,
    )
    return document
