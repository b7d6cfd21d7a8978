"""
PPOB API - Token Service
Access token signing/verification and rotating refresh tokens
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

import jwt
from sqlalchemy.orm import Session

from ppob_api.config import Settings
from ppob_api.exceptions import AuthenticationError
from ppob_api.models.user import RefreshToken, User

logger = logging.getLogger(__name__)


class TokenService:
    """
    Issues short-lived access tokens and persisted refresh tokens.

    Refresh tokens are single use: ``rotate_refresh`` revokes the presented
    token and issues a new row. Expired rows are never purged here; the
    stored ``expires_at`` is checked on every rotation.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _encode(self, payload: Dict) -> str:
        return jwt.encode(payload, self.settings.JWT_SECRET, algorithm=self.settings.JWT_ALGORITHM)

    def _decode(self, token: str, expected_type: str) -> Optional[Dict]:
        try:
            payload = jwt.decode(token, self.settings.JWT_SECRET, algorithms=[self.settings.JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            return None
        if payload.get("type") != expected_type:
            return None
        return payload

    # ============================================================
    # ACCESS TOKENS
    # ============================================================

    def sign_access(self, claims: Dict, expires_delta: Optional[timedelta] = None) -> str:
        """Sign an access token; ``claims`` must carry ``userId`` and ``role``"""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

        now = datetime.utcnow()
        payload = {
            "sub": str(claims["userId"]),
            "role": claims.get("role"),
            "type": "access",
            "iat": now,
            "exp": now + expires_delta,
        }
        return self._encode(payload)

    def verify_access(self, token: str) -> Optional[Dict]:
        """Return ``{"userId", "role"}`` for a valid access token, else None"""
        payload = self._decode(token, "access")
        if not payload:
            return None
        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return {"userId": user_id, "role": payload.get("role")}

    # ============================================================
    # REFRESH TOKENS
    # ============================================================

    def create_refresh(self, user_id: int) -> str:
        days = self.settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        now = datetime.utcnow()
        expires_at = now + timedelta(days=days)

        token = self._encode({
            "sub": str(user_id),
            "type": "refresh",
            "jti": secrets.token_hex(8),
            "iat": now,
            "exp": expires_at,
        })

        self.db.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at, revoked=False))
        self.db.commit()
        return token

    def verify_refresh(self, token: str) -> Optional[Dict]:
        return self._decode(token, "refresh")

    def find_refresh(self, token: str) -> Optional[RefreshToken]:
        return self.db.query(RefreshToken).filter(RefreshToken.token == token).first()

    def revoke_refresh(self, token: str) -> None:
        """Revoke every stored row for this token; unknown tokens are ignored"""
        self.db.query(RefreshToken).filter(RefreshToken.token == token).update(
            {RefreshToken.revoked: True}, synchronize_session=False
        )
        self.db.commit()

    def rotate_refresh(self, token: str) -> Tuple[str, str]:
        """Exchange a refresh token for a new (access, refresh) pair"""
        record = self.find_refresh(token)
        if not record or record.revoked:
            raise AuthenticationError("Invalid refresh token")
        if record.is_expired:
            raise AuthenticationError("Refresh token expired")

        payload = self.verify_refresh(token)
        if not payload or payload.get("sub") != str(record.user_id):
            raise AuthenticationError("Invalid refresh token")

        user = self.db.get(User, record.user_id)
        if not user:
            raise AuthenticationError("Invalid token payload")

        access_token = self.sign_access({"userId": user.id, "role": user.role})
        new_refresh = self.create_refresh(user.id)
        self.revoke_refresh(token)

        logger.info(f"Rotated refresh token for user {user.id}")
        return access_token, new_refresh
