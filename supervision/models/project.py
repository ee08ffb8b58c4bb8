# supervision/models/project.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from supervision.database import Base
from supervision.models.task import enum_values


class ProjectStatus(str, enum.Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(
        Enum(ProjectStatus, name="project_status", values_callable=enum_values),
        default=ProjectStatus.NOT_STARTED,
        nullable=False,
    )
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    final_project_link = Column(Text, nullable=True)
    progress_bar = Column(Integer, default=0, nullable=False)  # 0-100

    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, unique=True)
    supervisor_id = Column(Integer, ForeignKey("supervisors.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    student = relationship("Student", back_populates="project")
    supervisor = relationship("Supervisor")
    status_updates = relationship(
        "ProjectStatusUpdate",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectStatusUpdate.id",
    )


class ProjectStatusUpdate(Base):
    """Append-only history of project status changes"""
    __tablename__ = "project_status_update"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(ProjectStatus, name="project_status", values_callable=enum_values),
        nullable=False,
    )
    updated_by = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    project = relationship("Project", back_populates="status_updates")
