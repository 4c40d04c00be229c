"""FastAPI dependencies for the configuration built at startup."""

from typing import Annotated

from fastapi import Depends, Request

from merchant_auth.core.settings import AppSettings
from merchant_auth.keystore.sources import SecretSource


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_secret_source(request: Request) -> SecretSource:
    return request.app.state.secret_source


def get_started_at(request: Request) -> float:
    return request.app.state.started_at


Settings = Annotated[AppSettings, Depends(get_settings)]
Secrets = Annotated[SecretSource, Depends(get_secret_source)]
StartedAt = Annotated[float, Depends(get_started_at)]
