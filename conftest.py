from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from supervision.database import Base, get_db
from supervision.models import Admin, Task, TaskStatus
from supervision.services.task_service import TaskLifecycle
from supervision.services.user_service import UserService
from supervision.utils.auth import create_access_token, ROLE_ADMIN, ROLE_STUDENT, ROLE_SUPERVISOR


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def supervisor(db):
    return UserService(db).add_supervisor("ada@uni.edu", "Ada", "Lovelace")


@pytest.fixture
def other_supervisor(db):
    return UserService(db).add_supervisor("alan@uni.edu", "Alan", "Turing")


@pytest.fixture
def student(db, supervisor):
    return UserService(db).add_student("MAT001", "Grace", "Hopper", email="grace@uni.edu", supervisor_id=supervisor.id)


@pytest.fixture
def second_student(db, supervisor):
    return UserService(db).add_student("MAT002", "Edsger", "Dijkstra", supervisor_id=supervisor.id)


@pytest.fixture
def admin(db):
    admin = Admin(email="admin@uni.edu", name="Registry")
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def auth_headers(subject_id, role):
    return {"Authorization": f"Bearer {create_access_token(subject_id, [role])}"}


@pytest.fixture
def student_headers(student):
    return auth_headers(student.id, ROLE_STUDENT)


@pytest.fixture
def supervisor_headers(supervisor):
    return auth_headers(supervisor.id, ROLE_SUPERVISOR)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin.id, ROLE_ADMIN)


def due_in(days=7):
    return datetime.utcnow() + timedelta(days=days)


def make_task(db, supervisor, student, title="Literature review"):
    return TaskLifecycle(db).create_task(supervisor.id, student.id, title, f"{title} details", due_in())


def complete_task(db, supervisor, student, task):
    lifecycle = TaskLifecycle(db)
    lifecycle.submit_task(student.id, task.id, f"https://git.example/{task.id}", "done")
    return lifecycle.review_task(supervisor.id, student.id, task.id, "approved", "Looks good")


def task_statuses(db, student):
    return [TaskStatus(t.status) for t in db.query(Task).filter(Task.student_id == student.id).order_by(Task.id)]
