import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from supervision.models import Notification, NotificationType, RecipientKind
from supervision.models import Task, Student, Project, Schedule
from supervision.utils.errors import NotFoundError
from supervision.utils.notifications import create_notification, task_notification_content

logger = logging.getLogger(__name__)


class NotificationService:
    """Persists notifications. Sending is fire-and-forget for lifecycle callers."""

    @staticmethod
    def notify(
        db: Session,
        user_id: int,
        user_type: RecipientKind,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[int] = None,
        related_type: Optional[str] = None,
    ) -> Optional[Notification]:
        """Create a notification; a failure is logged and never propagated"""
        try:
            notification = create_notification(
                db=db,
                user_id=user_id,
                user_type=user_type,
                notification_type=notification_type,
                title=title,
                message=message,
                related_entity_id=related_id,
                related_entity_type=related_type,
            )
            logger.info(f"Notification '{title}' created for {RecipientKind(user_type).value} {user_id}")
            return notification
        except Exception as e:
            db.rollback()
            logger.error(
                f"Error creating notification '{notification_type}' for {user_type} {user_id}: {e}"
            )
            return None

    @staticmethod
    def notify_task_assigned(db: Session, task: Task) -> Optional[Notification]:
        content = task_notification_content(NotificationType.TASK_ASSIGNED, task.title)
        return NotificationService.notify(
            db,
            user_id=task.student_id,
            user_type=RecipientKind.STUDENT,
            notification_type=NotificationType.TASK_ASSIGNED,
            title=content["title"],
            message=content["message"],
            related_id=task.id,
            related_type="task",
        )

    @staticmethod
    def notify_task_submitted(db: Session, task: Task, student: Optional[Student] = None) -> Optional[Notification]:
        content = task_notification_content(NotificationType.TASK_SUBMITTED, task.title)
        if student is not None:
            content["message"] = f"{student.full_name} submitted the task '{task.title}' for review"
        return NotificationService.notify(
            db,
            user_id=task.supervisor_id,
            user_type=RecipientKind.SUPERVISOR,
            notification_type=NotificationType.TASK_SUBMITTED,
            title=content["title"],
            message=content["message"],
            related_id=task.id,
            related_type="task",
        )

    @staticmethod
    def notify_task_reviewed(db: Session, task: Task, approved: bool, feedback: str) -> Optional[Notification]:
        notification_type = NotificationType.TASK_APPROVED if approved else NotificationType.TASK_REJECTED
        content = task_notification_content(notification_type, task.title, feedback)
        return NotificationService.notify(
            db,
            user_id=task.student_id,
            user_type=RecipientKind.STUDENT,
            notification_type=notification_type,
            title=content["title"],
            message=content["message"],
            related_id=task.id,
            related_type="task",
        )

    @staticmethod
    def notify_project_submitted(db: Session, project: Project, student: Student) -> Optional[Notification]:
        return NotificationService.notify(
            db,
            user_id=project.supervisor_id,
            user_type=RecipientKind.SUPERVISOR,
            notification_type=NotificationType.PROJECT_SUBMITTED,
            title="Project Submitted",
            message=f"{student.full_name} submitted the final project '{project.title}'",
            related_id=project.id,
            related_type="project",
        )

    @staticmethod
    def notify_schedule_created(db: Session, schedule: Schedule, student_ids: List[int]) -> List[Notification]:
        notifications = []
        for student_id in student_ids:
            notification = NotificationService.notify(
                db,
                user_id=student_id,
                user_type=RecipientKind.STUDENT,
                notification_type=NotificationType.SCHEDULE_CREATED,
                title="New Schedule",
                message=f"Your supervisor scheduled '{schedule.title}'",
                related_id=schedule.id,
                related_type="schedule",
            )
            if notification:
                notifications.append(notification)
        return notifications

    @staticmethod
    def notify_student_assigned(db: Session, student: Student) -> Optional[Notification]:
        return NotificationService.notify(
            db,
            user_id=student.supervisor_id,
            user_type=RecipientKind.SUPERVISOR,
            notification_type=NotificationType.SUPERVISOR_ASSIGNED,
            title="New Student Assigned",
            message=f"{student.full_name} ({student.matric_number}) has been assigned to you",
            related_id=student.id,
            related_type="student",
        )

    # Read side

    @staticmethod
    def get_notifications(db: Session, user_id: int, user_type: RecipientKind) -> List[Notification]:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.user_type == user_type,
        ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    @staticmethod
    def mark_as_read(db: Session, notification_id: int, user_id: int, user_type: RecipientKind) -> Notification:
        notification = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
            Notification.user_type == user_type,
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")

        try:
            notification.is_read = True
            db.commit()
            db.refresh(notification)
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"mark_as_read failed for notification {notification_id} (user {user_id})")
            raise
        return notification

    @staticmethod
    def get_unread_count(db: Session, user_id: int, user_type: RecipientKind) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.user_type == user_type,
            Notification.is_read == False,  # noqa: E712
        ).count()
