# supervision/services/token_service.py
"""
Refresh tokens: issued at login, exchanged for new access tokens and revoked
at logout. A refresh token is only honoured while its stored row exists, is
not revoked and has not expired.
"""

import logging
from datetime import datetime
from typing import Dict

from sqlalchemy.orm import Session

from supervision.models import RefreshToken
from supervision.utils.auth import REFRESH_TOKEN_TYPE, create_access_token, create_refresh_token, verify_token
from supervision.utils.errors import NotFoundError, UnauthorizedError
from supervision.utils.transactions import atomic

logger = logging.getLogger(__name__)


class TokenService:
    def __init__(self, db: Session):
        self.db = db

    def issue_refresh_token(self, subject_id: int, role: str) -> str:
        token, expires_at = create_refresh_token(subject_id, role)
        with atomic(self.db, "issue_refresh_token", subject_id=subject_id, role=role):
            self.db.add(RefreshToken(
                token=token,
                subject_id=subject_id,
                role=role,
                expires_at=expires_at,
            ))
        return token

    def _active_row(self, token: str) -> RefreshToken:
        payload = verify_token(token)
        if payload is None or payload.get("type") != REFRESH_TOKEN_TYPE:
            raise UnauthorizedError("Invalid refresh token")

        row = self.db.query(RefreshToken).filter(RefreshToken.token == token).first()
        if not row:
            raise UnauthorizedError("Invalid refresh token")
        if row.revoked:
            raise UnauthorizedError("Refresh token has been revoked")
        if row.expires_at <= datetime.utcnow():
            raise UnauthorizedError("Refresh token has expired")
        if str(row.subject_id) != payload.get("sub") or row.role != payload.get("role"):
            raise UnauthorizedError("Invalid refresh token")
        return row

    def refresh_access_token(self, token: str) -> Dict[str, str]:
        row = self._active_row(token)
        logger.info(f"Access token refreshed for {row.role} {row.subject_id}")
        return {
            "access_token": create_access_token(row.subject_id, [row.role]),
            "token_type": "bearer",
        }

    def revoke_refresh_token(self, token: str, subject_id: int, role: str) -> Dict[str, str]:
        """Revoke one of the caller's own refresh tokens; revoking twice is a no-op"""
        with atomic(self.db, "revoke_refresh_token", subject_id=subject_id, role=role):
            row = self.db.query(RefreshToken).filter(
                RefreshToken.token == token,
                RefreshToken.subject_id == subject_id,
                RefreshToken.role == role,
            ).with_for_update().first()
            if not row:
                raise NotFoundError("Refresh token not found")
            row.revoked = True

        logger.info(f"{role.capitalize()} {subject_id} logged out")
        return {"message": "Logged out successfully"}
