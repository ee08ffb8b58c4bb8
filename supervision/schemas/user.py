from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from supervision.schemas.project import ProjectOut
from supervision.schemas.task import TaskOut


class SupervisorCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class StudentCreate(BaseModel):
    matric_number: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    supervisor_id: Optional[int] = None
    project_title: Optional[str] = None
    project_description: Optional[str] = None


class AssignSupervisorRequest(BaseModel):
    supervisor_id: int


class StudentLogin(BaseModel):
    matric_number: str = Field(..., min_length=1)


class SupervisorLogin(BaseModel):
    email: EmailStr


class AdminLogin(BaseModel):
    email: EmailStr


class SupervisorOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


class StudentOut(BaseModel):
    id: int
    matric_number: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    supervisor_id: Optional[int] = None
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


class StudentWithWork(StudentOut):
    tasks: List[TaskOut] = []
    project: Optional[ProjectOut] = None


class AdminOut(BaseModel):
    id: int
    email: str
    name: str

    model_config = {
        "from_attributes": True
    }
