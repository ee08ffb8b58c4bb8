# supervision/utils/auth.py
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from supervision.config.settings import settings

ROLE_STUDENT = "student"
ROLE_SUPERVISOR = "supervisor"
ROLE_ADMIN = "admin"

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/student/login")


class CurrentUser(BaseModel):
    """Verified identity: subject id plus its roles"""
    id: int
    roles: List[str]


def create_access_token(subject_id: int, roles: List[str], expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(subject_id), "roles": list(roles), "type": ACCESS_TOKEN_TYPE, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(subject_id: int, role: str, expires_delta: Optional[timedelta] = None) -> Tuple[str, datetime]:
    """Signed refresh token and its expiry; the caller persists it so it can be revoked"""
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    to_encode = {
        "sub": str(subject_id),
        "role": role,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM), expire


def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload without raising exceptions"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = verify_token(token)
    if payload is None:
        raise credentials_exception

    if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise credentials_exception

    subject = payload.get("sub")
    roles = payload.get("roles") or []
    if subject is None or not isinstance(roles, list):
        raise credentials_exception
    try:
        subject_id = int(subject)
    except (TypeError, ValueError):
        raise credentials_exception

    return CurrentUser(id=subject_id, roles=roles)


def require_role(role: str):
    """Dependency factory gating a route to callers holding ``role``"""

    def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if role not in current_user.roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires the '{role}' role",
            )
        return current_user

    return checker
