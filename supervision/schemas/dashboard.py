# supervision/schemas/dashboard.py
from pydantic import BaseModel
from typing import Dict, List

from supervision.schemas.project import ProjectOut
from supervision.schemas.task import TaskOut


class MonthlyMetric(BaseModel):
    month: str
    counts: Dict[str, int]


class StudentDashboard(BaseModel):
    tasks_status: Dict[str, int]
    task_summary: List[TaskOut]
    tasks_metrics: List[MonthlyMetric]
    tasks: List[TaskOut]


class SupervisorDashboard(BaseModel):
    total_students: int
    tasks_status: Dict[str, int]
    projects_status: Dict[str, int]
    tasks_metrics: List[MonthlyMetric]
    projects_metrics: List[MonthlyMetric]
    recent_tasks: List[TaskOut]
    recent_projects: List[ProjectOut]
