import pytest

from conftest import complete_task, make_task
from supervision.models import Notification, Project, ProjectStatus, ProjectStatusUpdate, TaskStatus
from supervision.services.project_service import ProjectLifecycle, completion_percentage
from supervision.services.user_service import UserService
from supervision.utils.errors import ForbiddenError, NotFoundError


def give_tasks(db, supervisor, student, completed, pending=0):
    for i in range(completed):
        complete_task(db, supervisor, student, make_task(db, supervisor, student, f"Chapter {i + 1}"))
    for i in range(pending):
        make_task(db, supervisor, student, f"Extra {i + 1}")


@pytest.mark.parametrize("completed,total,expected", [
    (0, 0, 0),
    (0, 5, 0),
    (1, 3, 33),
    (2, 3, 67),
    (5, 5, 100),
])
def test_completion_percentage(completed, total, expected):
    assert completion_percentage(completed, total) == expected


def test_new_student_with_supervisor_gets_not_started_project(db, supervisor, student):
    project = db.query(Project).filter(Project.student_id == student.id).one()

    assert ProjectStatus(project.status) == ProjectStatus.NOT_STARTED
    assert project.supervisor_id == supervisor.id
    rows = db.query(ProjectStatusUpdate).filter(ProjectStatusUpdate.project_id == project.id).all()
    assert [ProjectStatus(r.status) for r in rows] == [ProjectStatus.NOT_STARTED]
    assert rows[0].updated_by == "admin"


def test_submit_project_forbidden_with_a_pending_task(db, supervisor, student):
    give_tasks(db, supervisor, student, completed=4, pending=1)

    with pytest.raises(ForbiddenError):
        ProjectLifecycle(db).submit_project(student.id, "https://git.example/final")

    project = db.query(Project).filter(Project.student_id == student.id).one()
    assert ProjectStatus(project.status) == ProjectStatus.IN_PROGRESS
    assert project.final_project_link is None


def test_submit_project_forbidden_with_more_than_required_tasks(db, supervisor, student):
    give_tasks(db, supervisor, student, completed=6)

    with pytest.raises(ForbiddenError):
        ProjectLifecycle(db).submit_project(student.id, "https://git.example/final")


def test_submit_project_completes_with_five_completed_tasks(db, supervisor, student):
    give_tasks(db, supervisor, student, completed=5)

    project = ProjectLifecycle(db).submit_project(student.id, "https://git.example/final")

    assert ProjectStatus(project.status) == ProjectStatus.COMPLETED
    assert project.final_project_link == "https://git.example/final"
    assert project.progress_bar == 100

    rows = db.query(ProjectStatusUpdate).filter(
        ProjectStatusUpdate.project_id == project.id
    ).order_by(ProjectStatusUpdate.id).all()
    assert [ProjectStatus(r.status) for r in rows] == [
        ProjectStatus.NOT_STARTED, ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED
    ]
    assert rows[-1].updated_by == f"student:{student.id}"

    note = db.query(Notification).filter(Notification.notification_type == "project_submitted").one()
    assert note.user_id == supervisor.id


def test_student_project_view(db, supervisor, student):
    give_tasks(db, supervisor, student, completed=1, pending=1)

    view = ProjectLifecycle(db).get_student_project(student.id)

    assert view["student_name"] == "Grace Hopper"
    assert view["matric_number"] == "MAT001"
    assert view["supervisor"] == "Ada Lovelace"
    assert view["project_status"] == ProjectStatus.IN_PROGRESS.value
    assert view["completion_percentage"] == 50
    by_status = {entry["status"]: entry for entry in view["task_history"]}
    assert by_status[TaskStatus.COMPLETED.value]["completed_date"] is not None
    assert by_status[TaskStatus.PENDING.value]["completed_date"] is None


def test_student_without_project_is_not_found(db):
    loner = UserService(db).add_student("MAT404", "No", "Supervisor")

    with pytest.raises(NotFoundError):
        ProjectLifecycle(db).get_student_project(loner.id)


def test_completed_works_lists_submitted_projects_only(db, supervisor, student, second_student):
    give_tasks(db, supervisor, student, completed=5)
    ProjectLifecycle(db).submit_project(student.id, "https://git.example/final")

    works = ProjectLifecycle(db).list_completed_works()

    assert [w["matric_number"] for w in works] == ["MAT001"]
    assert works[0]["supervisor_name"] == "Ada Lovelace"


def test_assign_supervisor_creates_missing_project(db, supervisor):
    service = UserService(db)
    loner = service.add_student("MAT010", "Barbara", "Liskov")
    assert db.query(Project).filter(Project.student_id == loner.id).first() is None

    service.assign_supervisor(loner.id, supervisor.id)

    project = db.query(Project).filter(Project.student_id == loner.id).one()
    assert ProjectStatus(project.status) == ProjectStatus.NOT_STARTED
    assert project.supervisor_id == supervisor.id
