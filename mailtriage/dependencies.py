from typing import Optional

from fastapi import Depends, Request

from mailtriage.config import DashboardConfig
from mailtriage.errors import AuthenticationFailure
from mailtriage.lib.shared.models.account import SessionClaims
from mailtriage.services.auth.credentials import CredentialStore
from mailtriage.services.email.store import EmailStore
from mailtriage.services.security.tokens import TokenService

def get_config(request: Request) -> DashboardConfig:
    return request.app.state.config

def get_email_store(request: Request) -> EmailStore:
    return request.app.state.email_store

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store

def bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise AuthenticationFailure("No token provided")
    return auth_header[len("Bearer "):]

def require_session(
    request: Request,
    config: DashboardConfig = Depends(get_config),
    token_service: TokenService = Depends(get_token_service),
) -> Optional[SessionClaims]:
    """Guards the email routes when MAILTRIAGE_REQUIRE_AUTH is on; a no-op otherwise."""
    if not config.require_auth:
        return None
    return token_service.verify(bearer_token(request))
