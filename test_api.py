"""
End-to-end checks of the HTTP surface against an in-memory database
"""

from datetime import timedelta

from conftest import auth_headers, due_in
from supervision.models import RefreshToken
from supervision.utils.auth import ROLE_STUDENT, create_refresh_token


def assign(client, headers, name="Proposal"):
    return client.post("/supervisors/assign-task", headers=headers, json={
        "task_name": name,
        "description": f"{name} details",
        "due_date": due_in().isoformat(),
    })


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "ok"}


def test_logins(client, student, supervisor, admin):
    response = client.post("/auth/student/login", json={"matric_number": "MAT001"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["roles"] == ["student"]
    assert body["user"]["id"] == student.id

    assert client.post("/auth/supervisor/login", json={"email": "ada@uni.edu"}).status_code == 200
    assert client.post("/auth/admin/login", json={"email": "admin@uni.edu"}).status_code == 200
    assert client.post("/auth/student/login", json={"matric_number": "NOPE"}).status_code == 400


def test_login_token_authorizes_student_routes(client, student):
    token = client.post("/auth/student/login", json={"matric_number": "MAT001"}).json()["access_token"]

    response = client.get("/students/tasks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == []


def test_role_gating(client, student_headers, supervisor_headers):
    assert client.get("/students/tasks").status_code == 401
    assert client.get("/students/tasks", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert client.get("/supervisors/students", headers=student_headers).status_code == 403
    assert client.post("/admin/supervisors", headers=supervisor_headers, json={
        "email": "x@uni.edu", "first_name": "X", "last_name": "Y",
    }).status_code == 403


def test_admin_onboarding(client, admin_headers):
    response = client.post("/admin/supervisors", headers=admin_headers, json={
        "email": "barbara@uni.edu", "first_name": "Barbara", "last_name": "Liskov",
    })
    assert response.status_code == 201
    supervisor_id = response.json()["id"]

    response = client.post("/admin/students", headers=admin_headers, json={
        "matric_number": "MAT500", "first_name": "Ken", "last_name": "Thompson",
        "supervisor_id": supervisor_id,
    })
    assert response.status_code == 201
    assert response.json()["supervisor_id"] == supervisor_id

    duplicate = client.post("/admin/students", headers=admin_headers, json={
        "matric_number": "MAT500", "first_name": "Ken", "last_name": "Again",
    })
    assert duplicate.status_code == 400

    unassigned = client.post("/admin/students", headers=admin_headers, json={
        "matric_number": "MAT501", "first_name": "Dennis", "last_name": "Ritchie",
    }).json()
    response = client.patch(
        f"/admin/students/{unassigned['id']}/supervisor",
        headers=admin_headers,
        json={"supervisor_id": supervisor_id},
    )
    assert response.status_code == 200
    assert response.json()["supervisor_id"] == supervisor_id


def test_task_flow_over_http(client, student, supervisor_headers, student_headers):
    response = assign(client, supervisor_headers)
    assert response.status_code == 201
    task_id = response.json()[0]["id"]

    tasks = client.get("/students/tasks", headers=student_headers).json()
    assert [t["status"] for t in tasks] == ["Pending"]

    response = client.post(f"/students/tasks/{task_id}/submit", headers=student_headers, json={
        "link": "https://git.example/proposal", "short_description": "first draft",
    })
    assert response.status_code == 201
    assert response.json()["status"] == "pending"

    response = client.post(
        f"/supervisors/students/{student.id}/tasks/{task_id}/review",
        headers=supervisor_headers,
        json={"status": "approved", "feedback": "Nice"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Completed"

    again = client.post(
        f"/supervisors/students/{student.id}/tasks/{task_id}/review",
        headers=supervisor_headers,
        json={"status": "approved", "feedback": "Nice"},
    )
    assert again.status_code == 404

    detail = client.get(f"/students/tasks/{task_id}", headers=student_headers).json()
    assert [s["status"] for s in detail["submissions"]] == ["approved"]
    assert [h["status"] for h in detail["status_updates"]] == ["Pending", "Under Review", "Completed"]

    project = client.get("/students/project", headers=student_headers).json()
    assert project["project_status"] == "In Progress"
    assert project["completion_percentage"] == 100


def test_review_rejects_unknown_decision(client, student, supervisor_headers):
    response = client.post(
        f"/supervisors/students/{student.id}/tasks/1/review",
        headers=supervisor_headers,
        json={"status": "maybe"},
    )
    assert response.status_code == 422


def test_tasks_by_status(client, student, supervisor_headers, student_headers):
    assign(client, supervisor_headers)

    assert len(client.get("/students/tasks/status/Pending", headers=student_headers).json()) == 1
    assert client.get("/students/tasks/status/Completed", headers=student_headers).status_code == 404
    assert client.get("/students/tasks/status/Unknown", headers=student_headers).status_code == 400


def test_project_submission_is_gated(client, student, supervisor_headers, student_headers):
    assign(client, supervisor_headers)

    response = client.post("/students/project/submit", headers=student_headers, json={
        "final_project_link": "https://git.example/final",
    })
    assert response.status_code == 403


def test_dashboards(client, student, supervisor_headers, student_headers):
    assign(client, supervisor_headers)

    student_stats = client.get("/students/dashboard-stats", headers=student_headers).json()
    assert len(student_stats["tasks_metrics"]) == 6
    assert student_stats["tasks_status"]["Pending"] == 1

    supervisor_stats = client.get("/supervisors/dashboard-stats", headers=supervisor_headers).json()
    assert supervisor_stats["total_students"] == 1
    assert len(supervisor_stats["projects_metrics"]) == 6
    assert set(supervisor_stats["projects_status"]) == {"Not Started", "In Progress", "Completed"}


def test_schedules_over_http(client, student, supervisor_headers, student_headers):
    payload = {
        "title": "Viva rehearsal",
        "start_date": "2026-11-10",
        "start_time": "10:00",
        "start_period": "am",
        "end_date": "2026-11-10",
        "end_time": "11:30",
        "end_period": "AM",
    }

    bad = client.post("/supervisors/schedules", headers=supervisor_headers, json={**payload, "color": "blue"})
    assert bad.status_code == 400

    no_period = {key: value for key, value in payload.items() if key != "end_period"}
    assert client.post("/supervisors/schedules", headers=supervisor_headers, json=no_period).status_code == 400

    response = client.post("/supervisors/schedules", headers=supervisor_headers, json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["start_time"] == "10:00"
    assert body["end_time_12h"]["display"] == "11:30 AM"
    assert body["color"] == "#3b82f6"

    visible = client.get("/students/schedules", headers=student_headers).json()
    assert [s["id"] for s in visible] == [body["id"]]

    assert client.delete(f"/supervisors/schedules/{body['id']}", headers=supervisor_headers).status_code == 204
    assert client.get(f"/supervisors/schedules/{body['id']}", headers=supervisor_headers).status_code == 404


def test_notifications(client, student, supervisor_headers, student_headers):
    assign(client, supervisor_headers)

    count = client.get("/students/notifications/unread-count", headers=student_headers).json()
    assert count == {"unread_count": 1}

    notes = client.get("/students/notifications", headers=student_headers).json()
    assert notes[0]["title"] == "New Task Assigned"

    response = client.patch(f"/students/notifications/{notes[0]['id']}/read", headers=student_headers)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert client.get("/students/notifications/unread-count", headers=student_headers).json()["unread_count"] == 0

    stranger = auth_headers(student.id + 100, ROLE_STUDENT)
    assert client.patch(f"/students/notifications/{notes[0]['id']}/read", headers=stranger).status_code == 404


def test_app_lifespan_starts_and_stops(client):
    with client as running:
        assert running.get("/health").status_code == 200


# Refresh tokens

def login_student(client):
    return client.post("/auth/student/login", json={"matric_number": "MAT001"}).json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_login_issues_refresh_token_that_mints_access(client, student):
    body = login_student(client)
    assert body["refresh_token"]

    response = client.get("/auth/refresh-token", headers=bearer(body["refresh_token"]))
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"

    fresh = response.json()["access_token"]
    assert client.get("/students/tasks", headers=bearer(fresh)).status_code == 200


def test_revoked_refresh_token_is_rejected(client, student):
    body = login_student(client)
    access, refresh = body["access_token"], body["refresh_token"]

    response = client.post("/auth/student/logout", headers=bearer(access), json={"refresh_token": refresh})
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    assert client.get("/auth/refresh-token", headers=bearer(refresh)).status_code == 401

    again = client.post("/auth/student/logout", headers=bearer(access), json={"refresh_token": refresh})
    assert again.status_code == 200


def test_supervisor_logout_revokes_only_own_token(client, student, supervisor):
    student_refresh = login_student(client)["refresh_token"]
    body = client.post("/auth/supervisor/login", json={"email": "ada@uni.edu"}).json()

    foreign = client.post(
        "/auth/supervisor/logout", headers=bearer(body["access_token"]), json={"refresh_token": student_refresh}
    )
    assert foreign.status_code == 404
    assert client.get("/auth/refresh-token", headers=bearer(student_refresh)).status_code == 200

    response = client.post(
        "/auth/supervisor/logout", headers=bearer(body["access_token"]), json={"refresh_token": body["refresh_token"]}
    )
    assert response.status_code == 200
    assert client.get("/auth/refresh-token", headers=bearer(body["refresh_token"])).status_code == 401


def test_refresh_and_access_tokens_are_not_interchangeable(client, student):
    body = login_student(client)

    assert client.get("/students/tasks", headers=bearer(body["refresh_token"])).status_code == 401
    assert client.get("/auth/refresh-token", headers=bearer(body["access_token"])).status_code == 401
    assert client.get("/auth/refresh-token", headers=bearer("garbage")).status_code == 401
    assert client.get("/auth/refresh-token").status_code == 401


def test_expired_or_unknown_refresh_token_is_rejected(client, db, student):
    expired, expires_at = create_refresh_token(student.id, ROLE_STUDENT, expires_delta=timedelta(seconds=-1))
    db.add(RefreshToken(token=expired, subject_id=student.id, role=ROLE_STUDENT, expires_at=expires_at))
    db.commit()
    assert client.get("/auth/refresh-token", headers=bearer(expired)).status_code == 401

    unknown, _ = create_refresh_token(student.id, ROLE_STUDENT)
    assert client.get("/auth/refresh-token", headers=bearer(unknown)).status_code == 401


def test_logout_requires_matching_role(client, student, supervisor_headers):
    refresh = login_student(client)["refresh_token"]

    response = client.post("/auth/student/logout", headers=supervisor_headers, json={"refresh_token": refresh})
    assert response.status_code == 403
