# supervision/services/user_service.py
"""
Account records: admin onboarding of supervisors and students, supervisor
assignment and the identifier lookups used at login.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from supervision.models import Admin, Student, Supervisor
from supervision.services.notification_service import NotificationService
from supervision.services.project_service import ProjectLifecycle
from supervision.utils.errors import BadRequestError, NotFoundError
from supervision.utils.transactions import atomic

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.projects = ProjectLifecycle(db)

    def _get_supervisor(self, supervisor_id: int) -> Supervisor:
        supervisor = self.db.query(Supervisor).filter(Supervisor.id == supervisor_id).first()
        if not supervisor:
            raise NotFoundError("Supervisor not found")
        return supervisor

    def add_supervisor(self, email: str, first_name: str, last_name: str) -> Supervisor:
        if self.db.query(Supervisor).filter(Supervisor.email == email).first():
            raise BadRequestError("Email already registered")

        with atomic(self.db, "add_supervisor", email=email):
            supervisor = Supervisor(email=email, first_name=first_name, last_name=last_name)
            self.db.add(supervisor)

        self.db.refresh(supervisor)
        logger.info(f"Supervisor {supervisor.id} added ({email})")
        return supervisor

    def add_student(
        self,
        matric_number: str,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        supervisor_id: Optional[int] = None,
        project_title: Optional[str] = None,
        project_description: Optional[str] = None,
    ) -> Student:
        if self.db.query(Student).filter(Student.matric_number == matric_number).first():
            raise BadRequestError("Matric number already registered")
        if supervisor_id is not None:
            self._get_supervisor(supervisor_id)

        with atomic(self.db, "add_student", matric_number=matric_number, supervisor_id=supervisor_id):
            student = Student(
                matric_number=matric_number,
                first_name=first_name,
                last_name=last_name,
                email=email,
                supervisor_id=supervisor_id,
            )
            self.db.add(student)
            self.db.flush()
            if supervisor_id is not None:
                self.projects.create_project_for_student(student, project_title, project_description)

        self.db.refresh(student)
        logger.info(f"Student {student.id} added ({matric_number})")

        if supervisor_id is not None:
            NotificationService.notify_student_assigned(self.db, student)
        return student

    def assign_supervisor(self, student_id: int, supervisor_id: int) -> Student:
        """Assign or reassign a supervisor; the student's project follows them"""
        supervisor = self._get_supervisor(supervisor_id)

        with atomic(self.db, "assign_supervisor", student_id=student_id, supervisor_id=supervisor_id):
            student = self.db.query(Student).filter(Student.id == student_id).with_for_update().first()
            if not student:
                raise NotFoundError("Student not found")

            student.supervisor_id = supervisor.id
            project = self.projects.find_project_for_student(student.id, lock=True)
            if project is None:
                self.projects.create_project_for_student(student)
            else:
                project.supervisor_id = supervisor.id

        self.db.refresh(student)
        logger.info(f"Student {student_id} assigned to supervisor {supervisor_id}")
        NotificationService.notify_student_assigned(self.db, student)
        return student

    # Login lookups

    def find_student_by_matric(self, matric_number: str) -> Optional[Student]:
        return self.db.query(Student).filter(
            Student.matric_number == matric_number,
            Student.active.is_(True),
        ).first()

    def find_supervisor_by_email(self, email: str) -> Optional[Supervisor]:
        return self.db.query(Supervisor).filter(
            Supervisor.email == email,
            Supervisor.active.is_(True),
        ).first()

    def find_admin_by_email(self, email: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.email == email).first()
