# supervision/services/metrics_service.py
"""
Dashboard metrics: point-in-time status counts and a rolling six month series
of status changes built from the history tables.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Type

from sqlalchemy import func, literal_column
from sqlalchemy.orm import Session

from supervision.models import (
    Project, ProjectStatus, ProjectStatusUpdate, Student, Task, TaskStatus, TaskStatusUpdate
)

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

METRICS_MONTHS = 6
RECENT_ITEMS_LIMIT = 6


def shift_month(year: int, month: int, delta: int):
    """(year, month) moved by ``delta`` calendar months"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def month_label_from_bucket(bucket: str) -> str:
    """'2026-05' -> 'May 2026'"""
    if not bucket:
        return ""
    year, month = bucket.split("-")[:2]
    return month_label(int(year), int(month))


def last_months(today: date, count: int = METRICS_MONTHS) -> List[str]:
    """Labels for the last ``count`` months, oldest first, ending at ``today``'s month"""
    labels = []
    for offset in range(count - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        labels.append(month_label(year, month))
    return labels


def series_start(today: date) -> datetime:
    """First day of the month six calendar months before ``today``"""
    year, month = shift_month(today.year, today.month, -METRICS_MONTHS)
    return datetime(year, month, 1)


def empty_counts(enum_cls: Type) -> Dict[str, int]:
    return {member.value: 0 for member in enum_cls}


def _value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


class MetricsAggregator:
    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self.today = today or datetime.utcnow().date()

    def month_bucket(self, column):
        """YYYY-MM bucketing expression for the active dialect"""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return func.to_char(column, literal_column("'YYYY-MM'"))
        return func.strftime(literal_column("'%Y-%m'"), column)

    # Snapshots

    def _counts(self, column, filters, enum_cls) -> Dict[str, int]:
        rows = self.db.query(column, func.count()).filter(*filters).group_by(column).all()
        counts = empty_counts(enum_cls)
        for status, total in rows:
            if status is not None and _value(status) in counts:
                counts[_value(status)] = int(total)
        return counts

    def task_status_counts(self, student_id: Optional[int] = None, supervisor_id: Optional[int] = None) -> Dict[str, int]:
        filters = []
        if student_id is not None:
            filters.append(Task.student_id == student_id)
        if supervisor_id is not None:
            filters.append(Task.supervisor_id == supervisor_id)
        return self._counts(Task.status, filters, TaskStatus)

    def project_status_counts(self, supervisor_id: int) -> Dict[str, int]:
        return self._counts(Project.status, [Project.supervisor_id == supervisor_id], ProjectStatus)

    # Six month series

    def _series(self, history_model, owner_model, join_condition, filters, enum_cls) -> List[dict]:
        bucket = self.month_bucket(history_model.created_at)
        rows = (
            self.db.query(bucket.label("month"), history_model.status, func.count())
            .select_from(history_model)
            .join(owner_model, join_condition)
            .filter(history_model.created_at >= series_start(self.today), *filters)
            .group_by(bucket, history_model.status)
            .order_by(bucket)
            .all()
        )

        monthly = {label: empty_counts(enum_cls) for label in last_months(self.today)}
        for month, status, total in rows:
            label = month_label_from_bucket(month)
            if label in monthly and status is not None and _value(status) in monthly[label]:
                monthly[label][_value(status)] = int(total)

        return [{"month": label, "counts": counts} for label, counts in monthly.items()]

    def task_metrics(self, student_id: Optional[int] = None, supervisor_id: Optional[int] = None) -> List[dict]:
        filters = []
        if student_id is not None:
            filters.append(Task.student_id == student_id)
        if supervisor_id is not None:
            filters.append(Task.supervisor_id == supervisor_id)
        return self._series(TaskStatusUpdate, Task, TaskStatusUpdate.task_id == Task.id, filters, TaskStatus)

    def project_metrics(self, supervisor_id: int) -> List[dict]:
        return self._series(
            ProjectStatusUpdate,
            Project,
            ProjectStatusUpdate.project_id == Project.id,
            [Project.supervisor_id == supervisor_id],
            ProjectStatus,
        )

    # Dashboards

    def student_dashboard(self, student_id: int) -> dict:
        logger.info(f"Fetching dashboard stats for student ID: {student_id}")
        try:
            recent_tasks = self.db.query(Task).filter(
                Task.student_id == student_id
            ).order_by(Task.updated_at.desc(), Task.id.desc()).limit(RECENT_ITEMS_LIMIT).all()

            all_tasks = self.db.query(Task).filter(
                Task.student_id == student_id
            ).order_by(Task.created_at.desc(), Task.id.desc()).all()

            return {
                "tasks_status": self.task_status_counts(student_id=student_id),
                "task_summary": recent_tasks,
                "tasks_metrics": self.task_metrics(student_id=student_id),
                "tasks": all_tasks,
            }
        except Exception:
            logger.exception(f"Error fetching dashboard stats for student {student_id}")
            raise

    def supervisor_dashboard(self, supervisor_id: int) -> dict:
        logger.info(f"Fetching dashboard stats for supervisor ID: {supervisor_id}")
        try:
            student_count = self.db.query(Student).filter(Student.supervisor_id == supervisor_id).count()

            recent_tasks = self.db.query(Task).filter(
                Task.supervisor_id == supervisor_id
            ).order_by(Task.updated_at.desc(), Task.id.desc()).limit(RECENT_ITEMS_LIMIT).all()

            recent_projects = self.db.query(Project).filter(
                Project.supervisor_id == supervisor_id
            ).order_by(Project.updated_at.desc(), Project.id.desc()).limit(RECENT_ITEMS_LIMIT).all()

            return {
                "total_students": student_count,
                "tasks_status": self.task_status_counts(supervisor_id=supervisor_id),
                "projects_status": self.project_status_counts(supervisor_id),
                "tasks_metrics": self.task_metrics(supervisor_id=supervisor_id),
                "projects_metrics": self.project_metrics(supervisor_id),
                "recent_tasks": recent_tasks,
                "recent_projects": recent_projects,
            }
        except Exception:
            logger.exception(f"Error fetching dashboard stats for supervisor {supervisor_id}")
            raise
