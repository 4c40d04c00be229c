"""Shared test fixtures for merchant-auth."""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from httpx import ASGITransport, AsyncClient

from merchant_auth.core.app import create_app
from merchant_auth.core.settings import (
    AppSettings,
    KeySettings,
    ServerSettings,
    TokenSettings,
)
from merchant_auth.crypto.certs import (
    certificate_to_pem,
    generate_self_signed_certificate,
)
from merchant_auth.crypto.keys import generate_rsa_private_key, private_key_to_pem
from merchant_auth.crypto.types import KeyDiscoveryDocument
from merchant_auth.jwks.builder import (
    build_discovery_document,
    render_discovery_document,
)
from merchant_auth.keystore.sources import EnvSecretSource


@dataclass(frozen=True)
class KeyMaterial:
    """A private key, its certificate, and the JWKS built from it."""

    private_key: RSAPrivateKey
    private_key_pem: bytes
    cert_pem: bytes
    document: KeyDiscoveryDocument
    jwks_json: str


def _make_key_material(common_name: str) -> KeyMaterial:
    private_key = generate_rsa_private_key()
    cert_pem = certificate_to_pem(generate_self_signed_certificate(private_key, common_name))
    document = build_discovery_document(cert_pem)
    return KeyMaterial(
        private_key=private_key,
        private_key_pem=private_key_to_pem(private_key),
        cert_pem=cert_pem,
        document=document,
        jwks_json=render_discovery_document(document),
    )


@pytest.fixture(scope="session")
def key_material() -> KeyMaterial:
    """The provisioned signing key for the service under test."""
    return _make_key_material("merchant-auth-test")


@pytest.fixture(scope="session")
def other_key_material() -> KeyMaterial:
    """An unrelated key pair for negative cases."""
    return _make_key_material("someone-else")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment out of settings under test."""
    for name in ("PRIVATE_KEY", "JWKS_JSON", "SECRET_SOURCE", "PRIVATE_KEY_PATH", "JWKS_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        server=ServerSettings(environment="test"),
        token=TokenSettings(),
        keys=KeySettings(),
    )


@pytest.fixture
def env_source(key_material: KeyMaterial) -> EnvSecretSource:
    return EnvSecretSource(
        private_key=key_material.private_key_pem.decode(),
        jwks_json=key_material.jwks_json,
    )


async def _client_for(settings: AppSettings, source) -> AsyncIterator[AsyncClient]:
    app = create_app(settings=settings, secret_source=source)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def client(settings: AppSettings, env_source: EnvSecretSource) -> AsyncIterator[AsyncClient]:
    """httpx client against an app with fully provisioned key material."""
    async for ac in _client_for(settings, env_source):
        yield ac


@pytest.fixture
async def unprovisioned_client(settings: AppSettings) -> AsyncIterator[AsyncClient]:
    """httpx client against an app with no key material at all."""
    async for ac in _client_for(settings, EnvSecretSource(private_key="", jwks_json="")):
        yield ac
