# supervision/schemas/task.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List
from enum import Enum

from supervision.models.task import TaskStatus, SubmissionStatus


class ReviewDecision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class AssignTaskRequest(BaseModel):
    task_name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    due_date: datetime


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    due_date: datetime


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None


class SubmitTaskRequest(BaseModel):
    link: str = Field(..., min_length=1)
    short_description: str = Field(..., min_length=1)

    @field_validator('link', 'short_description')
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()


class ReviewTaskRequest(BaseModel):
    status: ReviewDecision
    feedback: str = ""


# For returning task data
class TaskOut(BaseModel):
    id: int
    title: str
    description: str
    due_date: datetime
    status: TaskStatus
    student_id: int
    supervisor_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class SubmissionOut(BaseModel):
    id: int
    task_id: int
    student_id: int
    supervisor_id: int
    link: str
    short_description: str
    status: SubmissionStatus
    feedback: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class TaskStatusHistoryOut(BaseModel):
    id: int
    status: TaskStatus
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


class TaskDetailOut(TaskOut):
    submissions: List[SubmissionOut] = []
    status_updates: List[TaskStatusHistoryOut] = []


class StudentBrief(BaseModel):
    id: int
    matric_number: str
    first_name: str
    last_name: str

    model_config = {
        "from_attributes": True
    }


class AssignedTaskOut(TaskOut):
    student: Optional[StudentBrief] = None
