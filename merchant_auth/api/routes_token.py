"""Token issuance endpoint."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import JSONResponse

from merchant_auth.api.deps import Secrets, Settings
from merchant_auth.api.token_service import issue_token
from merchant_auth.api.types import TokenRequest, TokenResponse
from merchant_auth.core.errors import (
    MerchantAuthError,
    ValidationError,
    error_response,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["token"])

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TOKEN_REQUEST_FIELDS = ("user_id", "bot_id")


async def read_token_request(request: Request) -> TokenRequest:
    """Accept the identity as a JSON object or as urlencoded form fields."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPE):
            form = await request.form()
            data = {name: form[name] for name in TOKEN_REQUEST_FIELDS if name in form}
        else:
            raw = await request.body()
            data = json.loads(raw) if raw.strip() else None
        return TokenRequest.model_validate(data if data is not None else {})
    except json.JSONDecodeError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body", e.pos), "msg": "JSON decode error"}]
        ) from e
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


@router.post("/generate-token", response_model=None)
async def generate_token(
    settings: Settings,
    source: Secrets,
    body: Annotated[TokenRequest, Depends(read_token_request)],
) -> TokenResponse | JSONResponse:
    """POST /generate-token -- sign a bearer token for user_id/bot_id."""
    try:
        return issue_token(body, source, settings.token)
    except ValidationError as e:
        return error_response(e.status_code, "Bad Request", str(e))
    except MerchantAuthError as e:
        logger.error("Error generating token: %s", e)
        return error_response(
            e.status_code,
            "Internal Server Error",
            "Unable to generate token",
            details=str(e),
        )
