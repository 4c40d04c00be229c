"""Tests for the key-discovery builder."""

import base64
import hashlib
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from merchant_auth.core.errors import CertificateParseError
from merchant_auth.crypto.certs import certificate_der, load_certificate
from merchant_auth.crypto.keys import jwk_thumbprint
from merchant_auth.crypto.types import KeyDiscoveryDocument
from merchant_auth.jwks.builder import (
    build_discovery_document,
    build_from_file,
    build_jwk,
    render_discovery_document,
    write_discovery_document,
)
from tests.conftest import KeyMaterial


def _ec_certificate_pem() -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "ec")])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM)


class TestBuildJWK:
    """Tests for deriving a JWK record from a certificate."""

    def test_record_members(self, key_material: KeyMaterial) -> None:
        entry = build_jwk(key_material.cert_pem)
        der = certificate_der(load_certificate(key_material.cert_pem))
        assert entry.kty == "RSA"
        assert entry.e == "AQAB"
        assert entry.x5t == base64.b64encode(hashlib.sha1(der).digest()).decode()
        assert entry.x5c == [base64.b64encode(der).decode()]
        assert entry.kid == jwk_thumbprint({"kty": "RSA", "n": entry.n, "e": entry.e})

    def test_kid_is_deterministic(self, key_material: KeyMaterial) -> None:
        assert build_jwk(key_material.cert_pem).kid == build_jwk(key_material.cert_pem).kid

    def test_distinct_keys_distinct_kids(
        self, key_material: KeyMaterial, other_key_material: KeyMaterial
    ) -> None:
        assert build_jwk(key_material.cert_pem).kid != build_jwk(other_key_material.cert_pem).kid

    def test_invalid_certificate(self) -> None:
        with pytest.raises(CertificateParseError):
            build_jwk(b"hello")

    def test_non_rsa_certificate(self) -> None:
        with pytest.raises(CertificateParseError):
            build_jwk(_ec_certificate_pem())


class TestDocument:
    """Tests for document assembly and rendering."""

    def test_single_key(self, key_material: KeyMaterial) -> None:
        doc = build_discovery_document(key_material.cert_pem)
        assert len(doc.keys) == 1

    def test_rendered_json_shape(self, key_material: KeyMaterial) -> None:
        rendered = render_discovery_document(build_discovery_document(key_material.cert_pem))
        assert rendered.startswith('{\n  "keys": [')
        data = json.loads(rendered)
        assert list(data["keys"][0]) == ["kty", "n", "e", "x5t", "kid", "x5c"]

    def test_rendered_document_parses_back(self, key_material: KeyMaterial) -> None:
        doc = build_discovery_document(key_material.cert_pem)
        parsed = KeyDiscoveryDocument.model_validate_json(render_discovery_document(doc))
        assert parsed == doc


class TestWrite:
    """Tests for file output."""

    def test_build_from_file(self, tmp_path: Path, key_material: KeyMaterial) -> None:
        cert = tmp_path / "certificate.pem"
        cert.write_bytes(key_material.cert_pem)
        out = tmp_path / "jwks" / "jwks.json"
        doc = build_from_file(cert, out)
        assert json.loads(out.read_text())["keys"][0]["kid"] == doc.primary_key().kid

    def test_missing_certificate(self, tmp_path: Path) -> None:
        out = tmp_path / "jwks.json"
        with pytest.raises(OSError):
            build_from_file(tmp_path / "missing.pem", out)
        assert not out.exists()

    def test_invalid_certificate_leaves_no_output(self, tmp_path: Path) -> None:
        cert = tmp_path / "certificate.pem"
        cert.write_text("not a certificate")
        out = tmp_path / "jwks.json"
        with pytest.raises(CertificateParseError):
            build_from_file(cert, out)
        assert not out.exists()

    def test_overwrite_is_complete(self, tmp_path: Path, key_material: KeyMaterial) -> None:
        out = tmp_path / "jwks.json"
        out.write_text("stale")
        write_discovery_document(key_material.document, out)
        assert out.read_text() == key_material.jwks_json
        assert [p.name for p in tmp_path.iterdir()] == ["jwks.json"]
