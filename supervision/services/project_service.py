# supervision/services/project_service.py
"""
Project lifecycle: status, status history, the final-submission gate and the
completion figures shown to students and supervisors.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from supervision.config.settings import settings
from supervision.models import (
    Project, ProjectStatus, ProjectStatusUpdate, Student, Task, TaskStatus
)
from supervision.services.notification_service import NotificationService
from supervision.utils.errors import ForbiddenError, NotFoundError
from supervision.utils.status import ensure_project_transition
from supervision.utils.transactions import atomic

logger = logging.getLogger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(round(100 * completed / total))


class ProjectLifecycle:
    def __init__(self, db: Session):
        self.db = db

    # Reads

    def get_project_for_student(self, student_id: int, lock: bool = False) -> Project:
        query = self.db.query(Project).filter(Project.student_id == student_id)
        if lock:
            query = query.with_for_update()
        project = query.first()
        if not project:
            raise NotFoundError("Project not found for this student")
        return project

    def find_project_for_student(self, student_id: int, lock: bool = False) -> Optional[Project]:
        query = self.db.query(Project).filter(Project.student_id == student_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def get_status(self, student_id: int) -> ProjectStatus:
        return ProjectStatus(self.get_project_for_student(student_id).status)

    def task_completion(self, student_id: int) -> int:
        tasks = self.db.query(Task.status).filter(Task.student_id == student_id).all()
        completed = sum(1 for (task_status,) in tasks if task_status == TaskStatus.COMPLETED)
        return completion_percentage(completed, len(tasks))

    # Transitions (callers own the transaction)

    def record_status(self, project: Project, new_status: ProjectStatus, updated_by: str) -> ProjectStatusUpdate:
        """Set the project status and append the matching history row"""
        project.status = new_status
        entry = ProjectStatusUpdate(project_id=project.id, status=new_status, updated_by=updated_by)
        self.db.add(entry)
        return entry

    def transition(self, project: Project, new_status: ProjectStatus, updated_by: str) -> ProjectStatusUpdate:
        new_status = ensure_project_transition(ProjectStatus(project.status), new_status)
        logger.info(f"Project {project.id}: {ProjectStatus(project.status).value} -> {new_status.value} by {updated_by}")
        return self.record_status(project, new_status, updated_by)

    def start_if_not_started(self, project: Optional[Project], updated_by: str) -> bool:
        """Not Started -> In Progress on the first qualifying task event"""
        if project is None or ProjectStatus(project.status) != ProjectStatus.NOT_STARTED:
            return False
        self.transition(project, ProjectStatus.IN_PROGRESS, updated_by)
        return True

    def refresh_progress(self, project: Optional[Project]) -> None:
        if project is None:
            return
        self.db.flush()
        project.progress_bar = self.task_completion(project.student_id)

    def create_project_for_student(
        self,
        student: Student,
        title: Optional[str] = None,
        description: Optional[str] = None,
        updated_by: str = "admin",
    ) -> Project:
        """New project for a student, Not Started, with its first history row"""
        project = Project(
            title=title or f"{student.full_name}'s Project",
            description=description or "Final year project",
            status=ProjectStatus.NOT_STARTED,
            student_id=student.id,
            supervisor_id=student.supervisor_id,
            progress_bar=0,
        )
        self.db.add(project)
        self.db.flush()
        self.record_status(project, ProjectStatus.NOT_STARTED, updated_by)
        return project

    # Final submission

    def submit_project(self, student_id: int, final_project_link: str) -> Project:
        required = settings.REQUIRED_TASK_COUNT
        updated_by = f"student:{student_id}"

        with atomic(self.db, "submit_project", student_id=student_id):
            tasks = self.db.query(Task).filter(Task.student_id == student_id).all()
            all_completed = all(TaskStatus(task.status) == TaskStatus.COMPLETED for task in tasks)
            if len(tasks) != required or not all_completed:
                raise ForbiddenError(
                    f"All {required} tasks must be completed before submitting the project"
                )

            project = self.get_project_for_student(student_id, lock=True)
            project.final_project_link = final_project_link

            if ProjectStatus(project.status) != ProjectStatus.COMPLETED:
                self.start_if_not_started(project, updated_by)
                self.transition(project, ProjectStatus.COMPLETED, updated_by)
            project.progress_bar = 100

        self.db.refresh(project)
        logger.info(f"Student {student_id} submitted final project {project.id}")

        student = self.db.query(Student).filter(Student.id == student_id).first()
        if student is not None:
            NotificationService.notify_project_submitted(self.db, project, student)
        return project

    # Views

    def get_student_project(self, student_id: int) -> dict:
        student = self.db.query(Student).options(
            joinedload(Student.project).joinedload(Project.supervisor)
        ).filter(Student.id == student_id).first()

        if not student or not student.project:
            raise NotFoundError("Project not found for this student")

        all_tasks = self.db.query(Task).filter(
            Task.student_id == student_id
        ).order_by(Task.updated_at.desc(), Task.id.desc()).all()

        total_tasks = len(all_tasks)
        completed_tasks = sum(1 for t in all_tasks if TaskStatus(t.status) == TaskStatus.COMPLETED)

        task_history = [
            {
                "task_id": task.id,
                "task": task.title,
                "description": task.description,
                "completed_date": task.updated_at if TaskStatus(task.status) == TaskStatus.COMPLETED else None,
                "status": TaskStatus(task.status).value,
            }
            for task in all_tasks
        ]

        project = student.project
        supervisor = project.supervisor
        return {
            "student_name": student.full_name,
            "matric_number": student.matric_number,
            "email": student.email,
            "project_id": project.id,
            "project_title": project.title,
            "project_description": project.description,
            "supervisor": supervisor.full_name if supervisor else None,
            "project_status": ProjectStatus(project.status).value,
            "final_project_link": project.final_project_link,
            "completion_percentage": completion_percentage(completed_tasks, total_tasks),
            "task_history": task_history,
        }

    def list_completed_works(self) -> List[dict]:
        """Completed projects carrying a final link, newest first"""
        projects = self.db.query(Project).options(
            joinedload(Project.student),
            joinedload(Project.supervisor),
        ).filter(
            Project.status == ProjectStatus.COMPLETED,
            Project.final_project_link.isnot(None),
            Project.final_project_link != "",
        ).order_by(Project.updated_at.desc(), Project.id.desc()).all()

        return [
            {
                "id": project.id,
                "title": project.title,
                "description": project.description,
                "final_project_link": project.final_project_link,
                "student_name": project.student.full_name if project.student else None,
                "matric_number": project.student.matric_number if project.student else None,
                "supervisor_name": project.supervisor.full_name if project.supervisor else None,
                "updated_at": project.updated_at,
            }
            for project in projects
        ]
