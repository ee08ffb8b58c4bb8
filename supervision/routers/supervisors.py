import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from supervision.database import get_db
from supervision.models import RecipientKind
from supervision.schemas.dashboard import SupervisorDashboard
from supervision.schemas.notification import NotificationOut, UnreadCount
from supervision.schemas.project import WorkOut
from supervision.schemas.schedule import ScheduleCreate, ScheduleOut, ScheduleUpdate
from supervision.schemas.task import (
    AssignTaskRequest, AssignedTaskOut, CreateTaskRequest, ReviewTaskRequest, TaskDetailOut, TaskOut, TaskUpdate
)
from supervision.schemas.user import StudentWithWork
from supervision.services.metrics_service import MetricsAggregator
from supervision.services.notification_service import NotificationService
from supervision.services.project_service import ProjectLifecycle
from supervision.services.schedule_service import ScheduleService, serialize_schedule
from supervision.services.task_service import TaskLifecycle
from supervision.utils.auth import CurrentUser, require_role, ROLE_SUPERVISOR

logger = logging.getLogger(__name__)

router = APIRouter()

current_supervisor = require_role(ROLE_SUPERVISOR)


# Students

@router.get("/students", response_model=List[StudentWithWork])
def get_my_students(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return TaskLifecycle(db).get_supervisor_students(current_user.id)
    except Exception as e:
        logger.error(f"Error in get_my_students: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch students")


@router.get("/students/{student_id}", response_model=StudentWithWork)
def get_my_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return TaskLifecycle(db).get_student_for_supervisor(current_user.id, student_id)


@router.get("/students/{student_id}/tasks", response_model=List[TaskOut])
def get_student_tasks(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return TaskLifecycle(db).get_student_tasks_for_supervisor(current_user.id, student_id)


@router.post("/students/{student_id}/tasks", response_model=TaskOut, status_code=201)
def create_student_task(
    student_id: int,
    payload: CreateTaskRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return TaskLifecycle(db).create_task(
            current_user.id, student_id, payload.title, payload.description, payload.due_date
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in create_student_task: {e}")
        raise HTTPException(status_code=500, detail="Could not create task")


@router.get("/students/{student_id}/tasks/{task_id}", response_model=TaskDetailOut)
def get_student_task(
    student_id: int,
    task_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return TaskLifecycle(db).get_task_for_supervisor(current_user.id, student_id, task_id)


@router.post("/students/{student_id}/tasks/{task_id}/review", response_model=TaskOut)
def review_task(
    student_id: int,
    task_id: int,
    payload: ReviewTaskRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return TaskLifecycle(db).review_task(
            current_user.id, student_id, task_id, payload.status.value, payload.feedback
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in review_task: {e}")
        raise HTTPException(status_code=500, detail="Could not review task")


# Task assignment and edits

@router.post("/assign-task", response_model=List[TaskOut], status_code=201)
def assign_task(
    payload: AssignTaskRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return TaskLifecycle(db).assign_task(
            current_user.id, payload.task_name, payload.description, payload.due_date
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in assign_task: {e}")
        raise HTTPException(status_code=500, detail="Could not assign task")


@router.patch("/tasks/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return TaskLifecycle(db).update_task(current_user.id, task_id, task_update.model_dump(exclude_unset=True))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in update_task: {e}")
        raise HTTPException(status_code=500, detail="Could not update task")


@router.get("/assigned-tasks", response_model=List[AssignedTaskOut])
def get_assigned_tasks(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return TaskLifecycle(db).get_assigned_tasks(current_user.id)


# Dashboard and works

@router.get("/dashboard-stats", response_model=SupervisorDashboard)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return MetricsAggregator(db).supervisor_dashboard(current_user.id)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=500, detail="Could not fetch dashboard stats")


@router.get("/works", response_model=List[WorkOut])
def get_completed_works(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return ProjectLifecycle(db).list_completed_works()


# Schedules

@router.post("/schedules", response_model=ScheduleOut, status_code=201)
def create_schedule(
    payload: ScheduleCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        schedule = ScheduleService(db).create_schedule(current_user.id, payload.model_dump())
        return serialize_schedule(schedule)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in create_schedule: {e}")
        raise HTTPException(status_code=500, detail="Could not create schedule")


@router.get("/schedules", response_model=List[ScheduleOut])
def get_schedules(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return [serialize_schedule(schedule) for schedule in ScheduleService(db).get_schedules(current_user.id)]


@router.get("/schedules/{schedule_id}", response_model=ScheduleOut)
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return serialize_schedule(ScheduleService(db).get_schedule(current_user.id, schedule_id))


@router.put("/schedules/{schedule_id}", response_model=ScheduleOut)
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        schedule = ScheduleService(db).update_schedule(
            current_user.id, schedule_id, payload.model_dump(exclude_unset=True)
        )
        return serialize_schedule(schedule)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in update_schedule: {e}")
        raise HTTPException(status_code=500, detail="Could not update schedule")


@router.delete("/schedules/{schedule_id}", status_code=204)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        ScheduleService(db).delete_schedule(current_user.id, schedule_id)
        return Response(status_code=204)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in delete_schedule: {e}")
        raise HTTPException(status_code=500, detail="Could not delete schedule")


# Notifications

@router.get("/notifications", response_model=List[NotificationOut])
def get_my_notifications(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return NotificationService.get_notifications(db, current_user.id, RecipientKind.SUPERVISOR)


@router.get("/notifications/unread-count", response_model=UnreadCount)
def get_my_unread_count(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    return {"unread_count": NotificationService.get_unread_count(db, current_user.id, RecipientKind.SUPERVISOR)}


@router.patch("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_my_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(current_supervisor),
):
    try:
        return NotificationService.mark_as_read(db, notification_id, current_user.id, RecipientKind.SUPERVISOR)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=500, detail="Could not update notification")
