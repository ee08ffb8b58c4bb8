import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from supervision.database import get_db
from supervision.schemas.user import StudentCreate, SupervisorCreate, AssignSupervisorRequest, StudentOut, SupervisorOut
from supervision.services.user_service import UserService
from supervision.utils.auth import CurrentUser, require_role, ROLE_ADMIN

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/supervisors", response_model=SupervisorOut, status_code=201)
def add_supervisor(
    payload: SupervisorCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(ROLE_ADMIN)),
):
    try:
        return UserService(db).add_supervisor(payload.email, payload.first_name, payload.last_name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in add_supervisor: {e}")
        raise HTTPException(status_code=500, detail="Could not add supervisor")


@router.post("/students", response_model=StudentOut, status_code=201)
def add_student(
    payload: StudentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(ROLE_ADMIN)),
):
    try:
        return UserService(db).add_student(**payload.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in add_student: {e}")
        raise HTTPException(status_code=500, detail="Could not add student")


@router.patch("/students/{student_id}/supervisor", response_model=StudentOut)
def assign_supervisor(
    student_id: int,
    payload: AssignSupervisorRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(ROLE_ADMIN)),
):
    try:
        return UserService(db).assign_supervisor(student_id, payload.supervisor_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in assign_supervisor: {e}")
        raise HTTPException(status_code=500, detail="Could not assign supervisor")
