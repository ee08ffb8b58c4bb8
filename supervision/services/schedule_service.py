import logging
import re
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from supervision.models import Schedule, Student
from supervision.services.notification_service import NotificationService
from supervision.utils.errors import BadRequestError, NotFoundError
from supervision.utils.time_format import TimeFormatError, to_12_hour, to_24_hour
from supervision.utils.transactions import atomic

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
DEFAULT_COLOR = "#3b82f6"


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def _combine(day, time24: str) -> datetime:
    hours, minutes = (int(part) for part in time24.split(":"))
    return datetime.combine(_as_date(day), time(hours, minutes))


def _convert(time12: Optional[str], period: Optional[str], label: str) -> Optional[str]:
    """12-hour input -> stored 24-hour value; a time without a period is rejected"""
    if time12 is None:
        if period is not None:
            raise BadRequestError(f"{label} time is required when a {label.lower()} period is given")
        return None
    if not period:
        raise BadRequestError(f"{label} period (AM/PM) is required when a {label.lower()} time is given")
    try:
        return to_24_hour(time12, period)
    except TimeFormatError as e:
        raise BadRequestError(f"Invalid {label.lower()} time: {e}")


def _check_color(color: Optional[str]) -> None:
    if color is not None and not HEX_COLOR.match(color):
        raise BadRequestError("Color must be a hex value such as #3b82f6")


def serialize_schedule(schedule: Schedule) -> dict:
    """Schedule with both the stored 24-hour times and their 12-hour form"""
    start_12 = to_12_hour(schedule.start_time)
    end_12 = to_12_hour(schedule.end_time)
    return {
        "id": schedule.id,
        "title": schedule.title,
        "start_date": _as_date(schedule.start_date),
        "start_time": schedule.start_time,
        "start_time_12h": start_12._asdict(),
        "end_date": _as_date(schedule.end_date),
        "end_time": schedule.end_time,
        "end_time_12h": end_12._asdict(),
        "description": schedule.description,
        "color": schedule.color,
        "supervisor_id": schedule.supervisor_id,
        "created_at": schedule.created_at,
        "updated_at": schedule.updated_at,
    }


class ScheduleService:
    def __init__(self, db: Session):
        self.db = db

    def _ensure_order(self, start_date, start_time: str, end_date, end_time: str) -> None:
        if _combine(start_date, start_time) >= _combine(end_date, end_time):
            raise BadRequestError("Schedule start must be before its end")

    def create_schedule(self, supervisor_id: int, data: Dict[str, Any]) -> Schedule:
        start_time = _convert(data.get("start_time"), data.get("start_period"), "Start")
        end_time = _convert(data.get("end_time"), data.get("end_period"), "End")
        if start_time is None or end_time is None:
            raise BadRequestError("Start and end times are required")
        self._ensure_order(data["start_date"], start_time, data["end_date"], end_time)
        _check_color(data.get("color"))

        with atomic(self.db, "create_schedule", supervisor_id=supervisor_id):
            schedule = Schedule(
                title=data["title"],
                start_date=_combine(data["start_date"], "00:00"),
                start_time=start_time,
                end_date=_combine(data["end_date"], "00:00"),
                end_time=end_time,
                description=data.get("description"),
                color=data.get("color") or DEFAULT_COLOR,
                supervisor_id=supervisor_id,
            )
            self.db.add(schedule)

        self.db.refresh(schedule)
        logger.info(f"Supervisor {supervisor_id} created schedule {schedule.id}")

        student_ids = [
            student_id for (student_id,) in
            self.db.query(Student.id).filter(Student.supervisor_id == supervisor_id).all()
        ]
        NotificationService.notify_schedule_created(self.db, schedule, student_ids)
        return schedule

    def get_schedules(self, supervisor_id: int) -> List[Schedule]:
        return self.db.query(Schedule).filter(
            Schedule.supervisor_id == supervisor_id
        ).order_by(Schedule.start_date.asc(), Schedule.start_time.asc(), Schedule.id.asc()).all()

    def get_schedule(self, supervisor_id: int, schedule_id: int) -> Schedule:
        schedule = self.db.query(Schedule).filter(
            Schedule.id == schedule_id,
            Schedule.supervisor_id == supervisor_id,
        ).first()
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def update_schedule(self, supervisor_id: int, schedule_id: int, data: Dict[str, Any]) -> Schedule:
        schedule = self.get_schedule(supervisor_id, schedule_id)

        start_time = _convert(data.get("start_time"), data.get("start_period"), "Start") or schedule.start_time
        end_time = _convert(data.get("end_time"), data.get("end_period"), "End") or schedule.end_time
        start_date = data.get("start_date") or schedule.start_date
        end_date = data.get("end_date") or schedule.end_date
        self._ensure_order(start_date, start_time, end_date, end_time)
        _check_color(data.get("color"))

        with atomic(self.db, "update_schedule", supervisor_id=supervisor_id, schedule_id=schedule_id):
            for field in ("title", "description", "color"):
                if data.get(field) is not None:
                    setattr(schedule, field, data[field])
            schedule.start_date = _combine(start_date, "00:00")
            schedule.start_time = start_time
            schedule.end_date = _combine(end_date, "00:00")
            schedule.end_time = end_time

        self.db.refresh(schedule)
        return schedule

    def delete_schedule(self, supervisor_id: int, schedule_id: int) -> None:
        schedule = self.get_schedule(supervisor_id, schedule_id)
        with atomic(self.db, "delete_schedule", supervisor_id=supervisor_id, schedule_id=schedule_id):
            self.db.delete(schedule)
        logger.info(f"Supervisor {supervisor_id} deleted schedule {schedule_id}")

    def get_student_schedules(self, student_id: int) -> List[Schedule]:
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if not student:
            raise NotFoundError("Student not found")
        if student.supervisor_id is None:
            return []
        return self.get_schedules(student.supervisor_id)
