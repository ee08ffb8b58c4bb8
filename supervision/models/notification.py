# supervision/models/notification.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Enum
from datetime import datetime
from supervision.database import Base
from supervision.models.task import enum_values
import enum


class NotificationType(str, enum.Enum):
    STUDENT_CREATED = "student_created"
    SUPERVISOR_ASSIGNED = "supervisor_assigned"
    TASK_ASSIGNED = "task_assigned"
    TASK_SUBMITTED = "task_submitted"
    TASK_REVIEWED = "task_reviewed"
    TASK_APPROVED = "task_approved"
    TASK_REJECTED = "task_rejected"
    PROJECT_SUBMITTED = "project_submitted"
    SCHEDULE_CREATED = "schedule_created"


class RecipientKind(str, enum.Enum):
    STUDENT = "student"
    SUPERVISOR = "supervisor"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    user_type = Column(Enum(RecipientKind, name="recipient_kind", values_callable=enum_values), nullable=False)
    notification_type = Column(String(100), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    # Related entity references (optional)
    related_entity_id = Column(Integer, nullable=True)
    related_entity_type = Column(String(50), nullable=True)  # 'task', 'project', 'schedule', ...

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, title='{self.title}', type='{self.notification_type}')>"
