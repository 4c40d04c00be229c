"""Error taxonomy and the JSON error envelope."""

from starlette.responses import JSONResponse

HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500


class MerchantAuthError(Exception):
    """Base class for errors raised by the token service."""

    status_code = HTTP_INTERNAL_ERROR


class ValidationError(MerchantAuthError):
    """Request fields are missing or invalid."""

    status_code = HTTP_BAD_REQUEST


class KeyUnavailableError(MerchantAuthError):
    """The private key or the JWKS document cannot be loaded."""


class SigningError(MerchantAuthError):
    """A cryptographic failure while signing a token."""


class NotFoundError(MerchantAuthError):
    """No route matches the request."""

    status_code = HTTP_NOT_FOUND


class CertificateParseError(MerchantAuthError):
    """Input is not a well-formed X.509 certificate."""


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: str | None = None,
) -> JSONResponse:
    """Build the ``{error, message[, details]}`` envelope."""
    body = {"error": error, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)
