"""
PPOB API - Auth Dependencies
Bearer token validation and admin gating.

Handlers receive an explicit AuthContext instead of reading identity
fields off the request.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ppob_api.exceptions import AuthenticationError, AuthorizationError
from ppob_api.dependencies import get_token_service
from ppob_api.models.user import Role
from ppob_api.services.token_service import TokenService

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    user_id: int
    role: Optional[str]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


async def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Token missing")

    claims = tokens.verify_access(credentials.credentials)
    if not claims:
        raise AuthenticationError("Invalid or expired token")

    return AuthContext(user_id=claims["userId"], role=claims["role"])


async def require_admin(auth: AuthContext = Depends(authenticate)) -> AuthContext:
    if not auth.is_admin:
        raise AuthorizationError("Forbidden")
    return auth
