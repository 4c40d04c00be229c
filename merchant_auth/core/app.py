"""FastAPI application factory for the merchant token service."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from merchant_auth.api.routes_jwks import router as jwks_router
from merchant_auth.api.routes_status import router as status_router
from merchant_auth.api.routes_token import router as token_router
from merchant_auth.core.errors import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_ERROR,
    MerchantAuthError,
    NotFoundError,
    error_response,
)
from merchant_auth.core.settings import AppSettings
from merchant_auth.keystore.sources import SecretSource, build_secret_source

logger = logging.getLogger(__name__)

HTTP_METHOD_NOT_ALLOWED = 405


async def _route_not_found(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code not in (NotFoundError.status_code, HTTP_METHOD_NOT_ALLOWED):
        return error_response(exc.status_code, "Error", str(exc.detail))
    return error_response(
        NotFoundError.status_code,
        "Route not found",
        f"Cannot {request.method} {request.url.path}",
    )


async def _invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in errors
    )
    return error_response(HTTP_BAD_REQUEST, "Bad Request", "Invalid request body", details)


async def _domain_error(_request: Request, exc: MerchantAuthError) -> JSONResponse:
    logger.error("Unhandled %s: %s", type(exc).__name__, exc)
    return error_response(
        exc.status_code, "Internal Server Error", "Something went wrong!", str(exc)
    )


async def _unhandled(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error")
    return error_response(
        HTTP_INTERNAL_ERROR, "Internal Server Error", "Something went wrong!", str(exc)
    )


def create_app(
    settings: AppSettings | None = None,
    secret_source: SecretSource | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = settings or AppSettings.from_env()
    secret_source = secret_source or build_secret_source(settings.keys)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if not (secret_source.has_private_key() and secret_source.has_discovery_document()):
            logger.warning("Key material is incomplete; /generate-token will fail until provisioned")
        yield

    app = FastAPI(
        title="Merchant Backend API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.secret_source = secret_source
    app.state.started_at = time.monotonic()

    origins = settings.server.get_cors_origin_list()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST"],
            allow_headers=["Authorization", "Content-Type"],
        )

    app.add_exception_handler(StarletteHTTPException, _route_not_found)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(MerchantAuthError, _domain_error)
    app.add_exception_handler(Exception, _unhandled)

    app.include_router(status_router)
    app.include_router(jwks_router)
    app.include_router(token_router)

    return app
