# storefront/deps.py
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .DB import get_session
from .security import oauth2_scheme
from .services import AuthService, CatalogService
from .settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


T_Session = Annotated[Session, Depends(get_session)]
T_Settings = Annotated[Settings, Depends(get_app_settings)]
# Raw bearer token, or None when the Authorization header is absent
T_Token = Annotated[str | None, Depends(oauth2_scheme)]


def get_auth_service(session: T_Session, settings: T_Settings) -> AuthService:
    return AuthService(session, settings)


T_AuthService = Annotated[AuthService, Depends(get_auth_service)]


def get_catalog_service(session: T_Session, auth: T_AuthService, settings: T_Settings) -> CatalogService:
    return CatalogService(session, auth, settings)


T_CatalogService = Annotated[CatalogService, Depends(get_catalog_service)]
