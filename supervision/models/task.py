from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from supervision.database import Base
import enum
from datetime import datetime


class TaskStatus(str, enum.Enum):
    PENDING = "Pending"
    UNDER_REVIEW = "Under Review"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def enum_values(enum_cls):
    """Store enum values ("Under Review") rather than member names"""
    return [member.value for member in enum_cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=enum_values),
        default=TaskStatus.PENDING,
        nullable=False,
    )

    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    supervisor_id = Column(Integer, ForeignKey("supervisors.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("Student", back_populates="tasks")
    supervisor = relationship("Supervisor")
    submissions = relationship("TaskSubmission", back_populates="task", cascade="all, delete-orphan", passive_deletes=True)
    status_updates = relationship(
        "TaskStatusUpdate",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskStatusUpdate.id",
    )


class TaskSubmission(Base):
    __tablename__ = "task_submissions"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    supervisor_id = Column(Integer, ForeignKey("supervisors.id", ondelete="CASCADE"), nullable=False)
    link = Column(Text, nullable=False)
    short_description = Column(Text, nullable=False)
    status = Column(
        Enum(SubmissionStatus, name="task_submission_status", values_callable=enum_values),
        default=SubmissionStatus.PENDING,
        nullable=False,
    )
    feedback = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = relationship("Task", back_populates="submissions")


class TaskStatusUpdate(Base):
    """Append-only history of task status changes"""
    __tablename__ = "tasks_status_update"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=enum_values),
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    task = relationship("Task", back_populates="status_updates")
