"""Where the signing key and the JWKS document come from.

Two provisioning variants exist: inline values in the environment
(``PRIVATE_KEY`` / ``JWKS_JSON``) and a key/document file pair on disk.
Both satisfy :class:`SecretSource`; the app only sees the protocol.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from merchant_auth.core.errors import KeyUnavailableError
from merchant_auth.core.settings import KeySettings
from merchant_auth.crypto.types import KeyDiscoveryDocument

logger = logging.getLogger(__name__)


class SecretSource(Protocol):
    """Read-only access to provisioned key material."""

    def load_private_key(self) -> bytes: ...

    def load_discovery_document(self) -> KeyDiscoveryDocument: ...

    def load_discovery_json(self) -> bytes: ...

    def has_private_key(self) -> bool: ...

    def has_discovery_document(self) -> bool: ...


def _parse_document(raw: bytes, origin: str) -> KeyDiscoveryDocument:
    try:
        document = KeyDiscoveryDocument.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise KeyUnavailableError(f"{origin} is not valid JSON") from e
    except PydanticValidationError as e:
        raise KeyUnavailableError(f"{origin} is not a valid JWKS document") from e
    if not document.keys:
        raise KeyUnavailableError(f"{origin} contains no keys")
    return document


class EnvSecretSource:
    """Key material passed inline through configuration."""

    def __init__(self, private_key: str, jwks_json: str) -> None:
        # PEMs pasted into single-line variables arrive with literal "\n".
        self._private_key = private_key.replace("\\n", "\n").strip()
        self._jwks_json = jwks_json

    def _document_bytes(self) -> bytes:
        if not self._jwks_json.strip():
            raise KeyUnavailableError("JWKS_JSON environment variable is not set")
        return self._jwks_json.encode()

    def load_private_key(self) -> bytes:
        if not self._private_key:
            raise KeyUnavailableError("PRIVATE_KEY environment variable is not set")
        return self._private_key.encode()

    def load_discovery_document(self) -> KeyDiscoveryDocument:
        return _parse_document(self._document_bytes(), "JWKS_JSON")

    def load_discovery_json(self) -> bytes:
        """The document exactly as provisioned, after validating it."""
        raw = self._document_bytes()
        _parse_document(raw, "JWKS_JSON")
        return raw

    def has_private_key(self) -> bool:
        return bool(self._private_key)

    def has_discovery_document(self) -> bool:
        return bool(self._jwks_json.strip())


class FileSecretSource:
    """Key material read from a private key file and a jwks.json file."""

    def __init__(self, private_key_path: Path, jwks_path: Path) -> None:
        self._private_key_path = private_key_path
        self._jwks_path = jwks_path

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise KeyUnavailableError(f"cannot read {path}: {e.strerror or e}") from e

    @staticmethod
    def _present(path: Path) -> bool:
        # is_file() raises on EACCES instead of answering.
        try:
            return path.is_file()
        except OSError:
            return False

    def load_private_key(self) -> bytes:
        data = self._read(self._private_key_path)
        if not data.strip():
            raise KeyUnavailableError(f"{self._private_key_path} is empty")
        return data

    def load_discovery_document(self) -> KeyDiscoveryDocument:
        return _parse_document(self._read(self._jwks_path), str(self._jwks_path))

    def load_discovery_json(self) -> bytes:
        """The document exactly as written on disk, after validating it."""
        raw = self._read(self._jwks_path)
        _parse_document(raw, str(self._jwks_path))
        return raw

    def has_private_key(self) -> bool:
        return self._present(self._private_key_path)

    def has_discovery_document(self) -> bool:
        return self._present(self._jwks_path)


def build_secret_source(settings: KeySettings) -> SecretSource:
    """Pick the provisioning variant named by ``SECRET_SOURCE``."""
    if settings.secret_source == "file":
        logger.info(
            "Loading key material from %s and %s",
            settings.private_key_path,
            settings.jwks_path,
        )
        return FileSecretSource(settings.private_key_path, settings.jwks_path)
    logger.info("Loading key material from PRIVATE_KEY and JWKS_JSON")
    return EnvSecretSource(settings.private_key, settings.jwks_json)
