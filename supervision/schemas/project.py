# supervision/schemas/project.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from supervision.models.project import ProjectStatus


class SubmitProjectRequest(BaseModel):
    final_project_link: str = Field(..., min_length=1)


class ProjectOut(BaseModel):
    id: int
    title: str
    description: str
    status: ProjectStatus
    start_date: datetime
    final_project_link: Optional[str] = None
    progress_bar: int
    student_id: int
    supervisor_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaskHistoryEntry(BaseModel):
    task_id: int
    task: str
    description: str
    completed_date: Optional[datetime] = None
    status: str


class StudentProjectView(BaseModel):
    student_name: str
    matric_number: str
    email: Optional[str] = None
    project_id: int
    project_title: str
    project_description: str
    supervisor: Optional[str] = None
    project_status: str
    final_project_link: Optional[str] = None
    completion_percentage: int
    task_history: List[TaskHistoryEntry]


class WorkOut(BaseModel):
    id: int
    title: str
    description: str
    final_project_link: str
    student_name: Optional[str] = None
    matric_number: Optional[str] = None
    supervisor_name: Optional[str] = None
    updated_at: Optional[datetime] = None
