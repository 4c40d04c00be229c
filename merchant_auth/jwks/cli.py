"""
Key provisioning command line.

Usage:
    merchant-jwks build --cert certificate.pem --out jwks/jwks.json
    merchant-jwks keygen --key-out private.pem --cert-out certificate.pem
"""

import argparse
import logging
import sys
from pathlib import Path

from merchant_auth.core.errors import CertificateParseError
from merchant_auth.core.log import configure_logging
from merchant_auth.crypto.certs import (
    CERT_VALIDITY_DAYS_DEFAULT,
    certificate_to_pem,
    generate_self_signed_certificate,
)
from merchant_auth.crypto.keys import generate_rsa_private_key, private_key_to_pem
from merchant_auth.jwks.builder import build_from_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _cmd_build(args: argparse.Namespace) -> int:
    try:
        document = build_from_file(args.cert, args.out)
    except CertificateParseError as e:
        logger.error("Invalid certificate %s: %s", args.cert, e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("JWKS build failed: %s", e)
        return EXIT_FAILURE
    print(document.primary_key().kid)
    return EXIT_OK


def _cmd_keygen(args: argparse.Namespace) -> int:
    if not args.force:
        for path in (args.key_out, args.cert_out):
            if path.exists():
                logger.error("%s already exists (use --force to overwrite)", path)
                return EXIT_FAILURE
    private_key = generate_rsa_private_key()
    cert = generate_self_signed_certificate(private_key, args.common_name, args.days)
    try:
        args.key_out.write_bytes(private_key_to_pem(private_key))
        args.key_out.chmod(0o600)
        args.cert_out.write_bytes(certificate_to_pem(cert))
    except OSError as e:
        logger.error("Could not write key material: %s", e)
        return EXIT_FAILURE
    logger.info("Wrote private key to %s and certificate to %s", args.key_out, args.cert_out)
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="merchant-jwks",
        description="Provision signing keys and build the JWKS document.",
    )
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build jwks.json from a PEM certificate")
    build.add_argument("--cert", type=Path, default=Path("certificate.pem"))
    build.add_argument("--out", type=Path, default=Path("jwks/jwks.json"))
    build.set_defaults(handler=_cmd_build)

    keygen = sub.add_parser("keygen", help="Generate an RSA key and self-signed certificate")
    keygen.add_argument("--key-out", type=Path, default=Path("private.pem"))
    keygen.add_argument("--cert-out", type=Path, default=Path("certificate.pem"))
    keygen.add_argument("--common-name", default="merchant-auth")
    keygen.add_argument("--days", type=int, default=CERT_VALIDITY_DAYS_DEFAULT)
    keygen.add_argument("--force", action="store_true")
    keygen.set_defaults(handler=_cmd_keygen)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
