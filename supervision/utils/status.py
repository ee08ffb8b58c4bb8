# supervision/utils/status.py
"""
Status vocabulary and the legal transitions for tasks, submissions and projects.

Every mutating operation goes through one of the ``ensure_*`` helpers so the
state machine lives in a single place.
"""

from typing import Dict, Set, Union

from supervision.models.task import TaskStatus, SubmissionStatus
from supervision.models.project import ProjectStatus
from supervision.utils.errors import BadRequestError

TASK_TRANSITIONS: Dict[TaskStatus, Set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.UNDER_REVIEW},
    TaskStatus.UNDER_REVIEW: {TaskStatus.COMPLETED, TaskStatus.PENDING},
    TaskStatus.COMPLETED: set(),
    TaskStatus.REJECTED: set(),
}

SUBMISSION_TRANSITIONS: Dict[SubmissionStatus, Set[SubmissionStatus]] = {
    SubmissionStatus.PENDING: {SubmissionStatus.APPROVED, SubmissionStatus.REJECTED},
    SubmissionStatus.APPROVED: set(),
    SubmissionStatus.REJECTED: set(),
}

PROJECT_TRANSITIONS: Dict[ProjectStatus, Set[ProjectStatus]] = {
    ProjectStatus.NOT_STARTED: {ProjectStatus.IN_PROGRESS},
    ProjectStatus.IN_PROGRESS: {ProjectStatus.COMPLETED},
    ProjectStatus.COMPLETED: set(),
}


def parse_task_status(value: Union[str, TaskStatus]) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in TaskStatus)
        raise BadRequestError(f"Invalid task status '{value}'. Must be one of: {valid}")


def parse_submission_status(value: Union[str, SubmissionStatus]) -> SubmissionStatus:
    try:
        return SubmissionStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in SubmissionStatus)
        raise BadRequestError(f"Invalid submission status '{value}'. Must be one of: {valid}")


def parse_project_status(value: Union[str, ProjectStatus]) -> ProjectStatus:
    try:
        return ProjectStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in ProjectStatus)
        raise BadRequestError(f"Invalid project status '{value}'. Must be one of: {valid}")


def can_transition_task(current: TaskStatus, new: TaskStatus) -> bool:
    return new in TASK_TRANSITIONS[current]


def ensure_task_transition(current: TaskStatus, new: TaskStatus, override: bool = False) -> TaskStatus:
    """Validate a task status change.

    ``override`` is used by direct supervisor edits: any member of the task
    vocabulary is accepted there, the transition table is not consulted.
    """
    new = parse_task_status(new)
    if override or current == new:
        return new
    if not can_transition_task(TaskStatus(current), new):
        raise BadRequestError(f"Task cannot move from '{TaskStatus(current).value}' to '{new.value}'")
    return new


def ensure_submission_transition(current: SubmissionStatus, new: SubmissionStatus) -> SubmissionStatus:
    new = parse_submission_status(new)
    if new not in SUBMISSION_TRANSITIONS[SubmissionStatus(current)]:
        raise BadRequestError(
            f"Submission cannot move from '{SubmissionStatus(current).value}' to '{new.value}'"
        )
    return new


def ensure_project_transition(current: ProjectStatus, new: ProjectStatus) -> ProjectStatus:
    new = parse_project_status(new)
    if new not in PROJECT_TRANSITIONS[ProjectStatus(current)]:
        raise BadRequestError(
            f"Project cannot move from '{ProjectStatus(current).value}' to '{new.value}'"
        )
    return new


def task_status_for_review(decision: Union[str, SubmissionStatus, TaskStatus]) -> TaskStatus:
    """Map a review decision onto the task status it produces.

    approved -> Completed, rejected -> Pending (back to the student). Any
    other value passes through unchanged and must itself be a task status.
    """
    if decision == SubmissionStatus.APPROVED or decision == SubmissionStatus.APPROVED.value:
        return TaskStatus.COMPLETED
    if decision == SubmissionStatus.REJECTED or decision == SubmissionStatus.REJECTED.value:
        return TaskStatus.PENDING
    return parse_task_status(decision)
