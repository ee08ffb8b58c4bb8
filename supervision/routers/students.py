import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from supervision.database import get_db
from supervision.models import RecipientKind
from supervision.schemas.dashboard import StudentDashboard
from supervision.schemas.notification import NotificationOut, UnreadCount
from supervision.schemas.project import ProjectOut, StudentProjectView, SubmitProjectRequest, WorkOut
from supervision.schemas.schedule import ScheduleOut
from supervision.schemas.task import SubmissionOut, SubmitTaskRequest, TaskDetailOut, TaskOut
from supervision.services.metrics_service import MetricsAggregator
from supervision.services.notification_service import NotificationService
from supervision.services.project_service import ProjectLifecycle
from supervision.services.schedule_service import ScheduleService, serialize_schedule
from supervision.services.task_service import TaskLifecycle
from supervision.utils.auth import CurrentUser, require_role, ROLE_STUDENT

logger = logging.getLogger(__name__)

router = APIRouter()

current_student = require_role(ROLE_STUDENT)


# Tasks

@router.get("/tasks", response_model=List[TaskOut])
def get_my_tasks(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return TaskLifecycle(db).get_student_tasks(current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_tasks: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch tasks")


@router.get("/tasks/status/{status}", response_model=List[TaskOut])
def get_my_tasks_by_status(
    status: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return TaskLifecycle(db).get_student_tasks(current_user.id, status=status)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_tasks_by_status: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch tasks")


@router.get("/tasks/{task_id}", response_model=TaskDetailOut)
def get_my_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return TaskLifecycle(db).get_student_task(current_user.id, task_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_task: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch task")


@router.post("/tasks/{task_id}/submit", response_model=SubmissionOut, status_code=201)
def submit_task(
    task_id: int,
    payload: SubmitTaskRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return TaskLifecycle(db).submit_task(current_user.id, task_id, payload.link, payload.short_description)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in submit_task: {e}")
        raise HTTPException(status_code=500, detail="Could not submit task")


# Dashboard and project

@router.get("/dashboard-stats", response_model=StudentDashboard)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return MetricsAggregator(db).student_dashboard(current_user.id)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=500, detail="Could not fetch dashboard stats")


@router.get("/project", response_model=StudentProjectView)
def get_my_project(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return ProjectLifecycle(db).get_student_project(current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_project: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch project")


@router.post("/project/submit", response_model=ProjectOut)
def submit_project(
    payload: SubmitProjectRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return ProjectLifecycle(db).submit_project(current_user.id, payload.final_project_link.strip())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in submit_project: {e}")
        raise HTTPException(status_code=500, detail="Could not submit project")


@router.get("/works", response_model=List[WorkOut])
def get_completed_works(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    return ProjectLifecycle(db).list_completed_works()


@router.get("/schedules", response_model=List[ScheduleOut])
def get_my_schedules(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        schedules = ScheduleService(db).get_student_schedules(current_user.id)
        return [serialize_schedule(schedule) for schedule in schedules]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_schedules: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch schedules")


# Notifications

@router.get("/notifications", response_model=List[NotificationOut])
def get_my_notifications(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    return NotificationService.get_notifications(db, current_user.id, RecipientKind.STUDENT)


@router.get("/notifications/unread-count", response_model=UnreadCount)
def get_my_unread_count(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    return {"unread_count": NotificationService.get_unread_count(db, current_user.id, RecipientKind.STUDENT)}


@router.patch("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_my_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_student),
):
    try:
        return NotificationService.mark_as_read(db, notification_id, current_user.id, RecipientKind.STUDENT)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=500, detail="Could not update notification")
