# supervision/utils/notifications.py
"""
Utility functions for creating notification rows
"""

from sqlalchemy.orm import Session
from typing import Optional, Union

from supervision.models import Notification, NotificationType, RecipientKind


def create_notification(
    db: Session,
    user_id: int,
    user_type: Union[RecipientKind, str],
    notification_type: Union[NotificationType, str],
    title: str,
    message: str,
    related_entity_id: Optional[int] = None,
    related_entity_type: Optional[str] = None,
) -> Notification:
    """
    Create a new notification for a student or supervisor

    Args:
        db: Database session
        user_id: ID of the recipient
        user_type: Whether the recipient is a student or a supervisor
        notification_type: Event kind
        title: Notification title
        message: Notification message
        related_entity_id: ID of related entity
        related_entity_type: Type of related entity (e.g., 'task', 'project')

    Returns:
        Created notification object
    """
    notification = Notification(
        user_id=user_id,
        user_type=RecipientKind(user_type),
        notification_type=NotificationType(notification_type).value,
        title=title,
        message=message,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
        is_read=False,
    )

    db.add(notification)
    db.commit()
    db.refresh(notification)

    return notification


def task_notification_content(notification_type: NotificationType, task_title: str, feedback: Optional[str] = None) -> dict:
    """Title and message for task-related notifications"""
    notification_content = {
        NotificationType.TASK_ASSIGNED: {
            "title": "New Task Assigned",
            "message": f"You have been assigned a new task: {task_title}",
        },
        NotificationType.TASK_SUBMITTED: {
            "title": "Task Submitted",
            "message": f"A student submitted the task '{task_title}' for review",
        },
        NotificationType.TASK_APPROVED: {
            "title": "Task Approved",
            "message": f"Your task '{task_title}' has been approved",
        },
        NotificationType.TASK_REJECTED: {
            "title": "Task Needs Revision",
            "message": f"Your task '{task_title}' needs revision",
        },
    }

    content = dict(notification_content.get(notification_type, {
        "title": "Task Notification",
        "message": f"Update for task: {task_title}",
    }))

    if feedback:
        content["message"] += f". Feedback: {feedback}"

    return content
