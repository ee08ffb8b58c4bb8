import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from supervision.database import get_db
from supervision.schemas.user import StudentLogin, SupervisorLogin, AdminLogin
from supervision.schemas.tokens import Token, AccessToken, RefreshTokenRequest, MessageOut
from supervision.services.token_service import TokenService
from supervision.services.user_service import UserService
from supervision.utils.auth import (
    CurrentUser, create_access_token, oauth2_scheme, require_role, ROLE_STUDENT, ROLE_SUPERVISOR, ROLE_ADMIN
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_response(db: Session, subject_id: int, role: str, user: dict) -> dict:
    return {
        "access_token": create_access_token(subject_id, [role]),
        "refresh_token": TokenService(db).issue_refresh_token(subject_id, role),
        "token_type": "bearer",
        "roles": [role],
        "user": user,
    }


@router.post("/student/login", response_model=Token)
def student_login(credentials: StudentLogin, db: Session = Depends(get_db)):
    student = UserService(db).find_student_by_matric(credentials.matric_number.strip())
    if not student:
        raise HTTPException(status_code=400, detail="Invalid credentials")

    logger.info(f"Student {student.id} logged in")
    return _token_response(db, student.id, ROLE_STUDENT, {
        "id": student.id,
        "matric_number": student.matric_number,
        "name": student.full_name,
        "email": student.email,
        "supervisor_id": student.supervisor_id,
    })


@router.post("/supervisor/login", response_model=Token)
def supervisor_login(credentials: SupervisorLogin, db: Session = Depends(get_db)):
    supervisor = UserService(db).find_supervisor_by_email(credentials.email)
    if not supervisor:
        raise HTTPException(status_code=400, detail="Invalid credentials")

    logger.info(f"Supervisor {supervisor.id} logged in")
    return _token_response(db, supervisor.id, ROLE_SUPERVISOR, {
        "id": supervisor.id,
        "name": supervisor.full_name,
        "email": supervisor.email,
    })


@router.post("/admin/login", response_model=Token)
def admin_login(credentials: AdminLogin, db: Session = Depends(get_db)):
    admin = UserService(db).find_admin_by_email(credentials.email)
    if not admin:
        raise HTTPException(status_code=400, detail="Invalid credentials")

    logger.info(f"Admin {admin.id} logged in")
    return _token_response(db, admin.id, ROLE_ADMIN, {
        "id": admin.id,
        "name": admin.name,
        "email": admin.email,
    })


@router.get("/refresh-token", response_model=AccessToken)
def refresh_token(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Exchange the refresh token sent as the Bearer credential for a new access token"""
    return TokenService(db).refresh_access_token(token)


@router.post("/student/logout", response_model=MessageOut)
def student_logout(
    body: RefreshTokenRequest,
    current_user: CurrentUser = Depends(require_role(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    return TokenService(db).revoke_refresh_token(body.refresh_token, current_user.id, ROLE_STUDENT)


@router.post("/supervisor/logout", response_model=MessageOut)
def supervisor_logout(
    body: RefreshTokenRequest,
    current_user: CurrentUser = Depends(require_role(ROLE_SUPERVISOR)),
    db: Session = Depends(get_db),
):
    return TokenService(db).revoke_refresh_token(body.refresh_token, current_user.id, ROLE_SUPERVISOR)


@router.post("/admin/logout", response_model=MessageOut)
def admin_logout(
    body: RefreshTokenRequest,
    current_user: CurrentUser = Depends(require_role(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    return TokenService(db).revoke_refresh_token(body.refresh_token, current_user.id, ROLE_ADMIN)
