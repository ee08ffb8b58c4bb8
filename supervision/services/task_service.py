# supervision/services/task_service.py
"""
Task lifecycle: assignment, student submission and supervisor review.

Each mutating operation runs in a single transaction and appends a
``TaskStatusUpdate`` row for every status change, so the latest history row
always matches the task. Notifications go out after the commit and never
undo a transition.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from supervision.models import (
    Student, Task, TaskStatus, TaskStatusUpdate, TaskSubmission, SubmissionStatus
)
from supervision.services.notification_service import NotificationService
from supervision.services.project_service import ProjectLifecycle
from supervision.utils.errors import NotFoundError
from supervision.utils.status import (
    ensure_submission_transition, ensure_task_transition, parse_task_status, task_status_for_review
)
from supervision.utils.transactions import atomic

logger = logging.getLogger(__name__)

EDITABLE_TASK_FIELDS = ("title", "description", "due_date", "status")
OVERRIDE_FEEDBACK = "Closed by supervisor status override"


class TaskLifecycle:
    def __init__(self, db: Session):
        self.db = db
        self.projects = ProjectLifecycle(db)

    def record_status(self, task: Task, new_status: TaskStatus) -> TaskStatusUpdate:
        """Set the task status and append the matching history row"""
        task.status = new_status
        task.updated_at = datetime.utcnow()
        entry = TaskStatusUpdate(task_id=task.id, status=new_status)
        self.db.add(entry)
        return entry

    def _new_task(self, student: Student, supervisor_id: int, title: str, description: str, due_date: datetime) -> Task:
        task = Task(
            title=title,
            description=description,
            due_date=due_date,
            status=TaskStatus.PENDING,
            student_id=student.id,
            supervisor_id=supervisor_id,
        )
        self.db.add(task)
        self.db.flush()
        self.record_status(task, TaskStatus.PENDING)
        return task

    # Assignment

    def assign_task(self, supervisor_id: int, task_name: str, description: str, due_date: datetime) -> List[Task]:
        """Create one Pending task for every student of the supervisor"""
        students = self.db.query(Student).filter(Student.supervisor_id == supervisor_id).all()
        if not students:
            raise NotFoundError("No students found for this supervisor")

        with atomic(self.db, "assign_task", supervisor_id=supervisor_id):
            tasks = [
                self._new_task(student, supervisor_id, task_name, description, due_date)
                for student in students
            ]
            for task in tasks:
                self.projects.refresh_progress(self.projects.find_project_for_student(task.student_id))

        logger.info(f"Supervisor {supervisor_id} assigned '{task_name}' to {len(tasks)} students")

        for task in tasks:
            self.db.refresh(task)
            NotificationService.notify_task_assigned(self.db, task)
        return tasks

    def create_task(
        self, supervisor_id: int, student_id: int, title: str, description: str, due_date: datetime
    ) -> Task:
        """Create a single task for one of the supervisor's students"""
        student = self.get_student_for_supervisor(supervisor_id, student_id)

        with atomic(self.db, "create_task", supervisor_id=supervisor_id, student_id=student_id):
            task = self._new_task(student, supervisor_id, title, description, due_date)
            self.projects.refresh_progress(self.projects.find_project_for_student(student_id))

        self.db.refresh(task)
        NotificationService.notify_task_assigned(self.db, task)
        return task

    # Submission

    def submit_task(self, student_id: int, task_id: int, link: str, short_description: str) -> TaskSubmission:
        updated_by = f"student:{student_id}"

        with atomic(self.db, "submit_task", student_id=student_id, task_id=task_id):
            task = self.db.query(Task).filter(
                Task.id == task_id,
                Task.student_id == student_id,
                Task.status == TaskStatus.PENDING,
            ).with_for_update().first()

            if not task:
                raise NotFoundError("Pending task not found for this student")

            submission = TaskSubmission(
                task_id=task.id,
                student_id=student_id,
                supervisor_id=task.supervisor_id,
                link=link,
                short_description=short_description,
                status=SubmissionStatus.PENDING,
                feedback="",
            )
            self.db.add(submission)

            new_status = ensure_task_transition(TaskStatus(task.status), TaskStatus.UNDER_REVIEW)
            self.record_status(task, new_status)

            project = self.projects.find_project_for_student(student_id, lock=True)
            self.projects.start_if_not_started(project, updated_by)

        self.db.refresh(submission)
        logger.info(f"Student {student_id} submitted task {task_id} (submission {submission.id})")

        student = self.db.query(Student).filter(Student.id == student_id).first()
        NotificationService.notify_task_submitted(self.db, task, student)
        return submission

    # Review

    def review_task(self, supervisor_id: int, student_id: int, task_id: int, status: str, feedback: str) -> Task:
        """Apply a supervisor decision to the pending submission of a task.

        Submission, task, task history and the project cascade are written in
        one transaction. Only a pending submission can be reviewed, so a second
        concurrent review of the same submission finds nothing and gets a 404.
        """
        updated_by = f"supervisor:{supervisor_id}"

        with atomic(self.db, "review_task", supervisor_id=supervisor_id, student_id=student_id, task_id=task_id):
            submission = self.db.query(TaskSubmission).filter(
                TaskSubmission.task_id == task_id,
                TaskSubmission.student_id == student_id,
                TaskSubmission.supervisor_id == supervisor_id,
                TaskSubmission.status == SubmissionStatus.PENDING,
            ).order_by(TaskSubmission.id.desc()).with_for_update().first()

            if not submission:
                raise NotFoundError("Pending task submission not found")

            decision = ensure_submission_transition(SubmissionStatus(submission.status), status)
            submission.status = decision
            submission.feedback = feedback

            task = self.db.query(Task).filter(
                Task.id == task_id,
                Task.student_id == student_id,
                Task.supervisor_id == supervisor_id,
            ).with_for_update().first()
            if not task:
                raise NotFoundError("Task not found")

            new_status = ensure_task_transition(TaskStatus(task.status), task_status_for_review(decision))

            project = self.projects.find_project_for_student(student_id, lock=True)
            if new_status == TaskStatus.COMPLETED:
                self.projects.start_if_not_started(project, updated_by)

            if new_status != TaskStatus(task.status):
                self.record_status(task, new_status)
            self.projects.refresh_progress(project)

        self.db.refresh(task)
        logger.info(f"Supervisor {supervisor_id} reviewed task {task_id}: {decision.value} -> {TaskStatus(task.status).value}")

        NotificationService.notify_task_reviewed(
            self.db, task, approved=decision == SubmissionStatus.APPROVED, feedback=feedback
        )
        return task

    # Direct edits

    def close_pending_submissions(self, task: Task, new_status: TaskStatus) -> int:
        """Resolve submissions left open when a task leaves Under Review by override"""
        decision = SubmissionStatus.APPROVED if new_status == TaskStatus.COMPLETED else SubmissionStatus.REJECTED
        pending = self.db.query(TaskSubmission).filter(
            TaskSubmission.task_id == task.id,
            TaskSubmission.status == SubmissionStatus.PENDING,
        ).with_for_update().all()
        for submission in pending:
            submission.status = ensure_submission_transition(SubmissionStatus(submission.status), decision)
            submission.feedback = OVERRIDE_FEEDBACK
        return len(pending)

    def update_task(self, supervisor_id: int, task_id: int, changes: Dict[str, Any]) -> Task:
        """Supervisor edit of a task.

        A status set here is an override: any task status is accepted, the
        transition table is not consulted, but the change is still recorded
        in the history and cascades into the project like any other event.
        """
        updates = {key: value for key, value in changes.items() if key in EDITABLE_TASK_FIELDS and value is not None}
        new_status = parse_task_status(updates.pop("status")) if "status" in updates else None

        with atomic(self.db, "update_task", supervisor_id=supervisor_id, task_id=task_id):
            task = self.db.query(Task).filter(
                Task.id == task_id,
                Task.supervisor_id == supervisor_id,
            ).with_for_update().first()
            if not task:
                raise NotFoundError("Task not found")

            for field, value in updates.items():
                setattr(task, field, value)
            task.updated_at = datetime.utcnow()

            if new_status is not None and new_status != TaskStatus(task.status):
                new_status = ensure_task_transition(TaskStatus(task.status), new_status, override=True)
                project = self.projects.find_project_for_student(task.student_id, lock=True)
                if new_status in (TaskStatus.UNDER_REVIEW, TaskStatus.COMPLETED):
                    self.projects.start_if_not_started(project, f"supervisor:{supervisor_id}")
                if TaskStatus(task.status) == TaskStatus.UNDER_REVIEW:
                    self.close_pending_submissions(task, new_status)
                self.record_status(task, new_status)
                self.projects.refresh_progress(project)

        self.db.refresh(task)
        return task

    # Reads

    def get_student_tasks(self, student_id: int, status: Optional[str] = None) -> List[Task]:
        query = self.db.query(Task).filter(Task.student_id == student_id)
        if status is None:
            return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

        task_status = parse_task_status(status)
        tasks = query.filter(Task.status == task_status).order_by(Task.updated_at.desc(), Task.id.desc()).all()
        if not tasks:
            raise NotFoundError(f"No {task_status.value.lower()} tasks found for this student")
        return tasks

    def get_student_task(self, student_id: int, task_id: int) -> Task:
        task = self.db.query(Task).options(joinedload(Task.submissions)).filter(
            Task.id == task_id,
            Task.student_id == student_id,
        ).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def get_supervisor_students(self, supervisor_id: int) -> List[Student]:
        return self.db.query(Student).options(
            joinedload(Student.tasks),
            joinedload(Student.project),
        ).filter(Student.supervisor_id == supervisor_id).order_by(Student.id).all()

    def get_student_for_supervisor(self, supervisor_id: int, student_id: int) -> Student:
        student = self.db.query(Student).filter(
            Student.id == student_id,
            Student.supervisor_id == supervisor_id,
        ).first()
        if not student:
            raise NotFoundError("Student not found for this supervisor")
        return student

    def get_student_tasks_for_supervisor(self, supervisor_id: int, student_id: int) -> List[Task]:
        self.get_student_for_supervisor(supervisor_id, student_id)
        return self.db.query(Task).filter(
            Task.student_id == student_id,
            Task.supervisor_id == supervisor_id,
        ).order_by(Task.created_at.desc(), Task.id.desc()).all()

    def get_task_for_supervisor(self, supervisor_id: int, student_id: int, task_id: int) -> Task:
        task = self.db.query(Task).options(joinedload(Task.submissions)).filter(
            Task.id == task_id,
            Task.student_id == student_id,
            Task.supervisor_id == supervisor_id,
        ).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def get_assigned_tasks(self, supervisor_id: int) -> List[Task]:
        return self.db.query(Task).options(joinedload(Task.student)).filter(
            Task.supervisor_id == supervisor_id
        ).order_by(Task.created_at.desc(), Task.id.desc()).all()
