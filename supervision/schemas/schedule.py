# supervision/schemas/schedule.py
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional


def _normalize_period(v):
    return v.strip().upper() if isinstance(v, str) else v


class ScheduleBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    start_date: date
    start_time: str = Field(..., description="12-hour time, e.g. 09:30")
    start_period: Optional[str] = Field(None, description="AM or PM")
    end_date: date
    end_time: str = Field(..., description="12-hour time, e.g. 11:00")
    end_period: Optional[str] = Field(None, description="AM or PM")
    description: Optional[str] = None
    color: Optional[str] = None

    @field_validator('start_period', 'end_period')
    @classmethod
    def upper_period(cls, v):
        return _normalize_period(v)


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    start_period: Optional[str] = None
    end_date: Optional[date] = None
    end_time: Optional[str] = None
    end_period: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None

    @field_validator('start_period', 'end_period')
    @classmethod
    def upper_period(cls, v):
        return _normalize_period(v)


class Time12Hour(BaseModel):
    time: str
    period: str
    display: str


class ScheduleOut(BaseModel):
    id: int
    title: str
    start_date: date
    start_time: str
    start_time_12h: Time12Hour
    end_date: date
    end_time: str
    end_time_12h: Time12Hour
    description: Optional[str] = None
    color: str
    supervisor_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
