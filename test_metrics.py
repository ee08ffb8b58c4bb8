from datetime import date, datetime, timedelta

from conftest import complete_task, make_task
from supervision.models import ProjectStatus, TaskStatus, TaskStatusUpdate
from supervision.services.metrics_service import (
    MetricsAggregator, last_months, month_label_from_bucket, series_start, shift_month
)


def today():
    return datetime.utcnow().date()


def test_shift_month_crosses_years():
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2026, 3, -6) == (2025, 9)


def test_last_months_oldest_first_ending_at_current_month():
    assert last_months(date(2026, 2, 15)) == [
        "September 2025", "October 2025", "November 2025",
        "December 2025", "January 2026", "February 2026",
    ]


def test_series_start_is_first_day_six_months_back():
    assert series_start(date(2026, 3, 31)) == datetime(2025, 9, 1)


def test_month_label_from_bucket():
    assert month_label_from_bucket("2026-05") == "May 2026"


def test_empty_series_has_six_entries_with_every_status(db, student):
    series = MetricsAggregator(db, today=today()).task_metrics(student_id=student.id)

    assert len(series) == 6
    assert series[-1]["month"] == last_months(today())[-1]
    for entry in series:
        assert set(entry["counts"]) == {s.value for s in TaskStatus}
        assert all(count == 0 for count in entry["counts"].values())


def test_task_series_counts_history_in_current_month(db, supervisor, student):
    complete_task(db, supervisor, student, make_task(db, supervisor, student, "One"))
    make_task(db, supervisor, student, "Two")

    series = MetricsAggregator(db, today=today()).task_metrics(student_id=student.id)

    current = series[-1]["counts"]
    assert current[TaskStatus.PENDING.value] == 2
    assert current[TaskStatus.UNDER_REVIEW.value] == 1
    assert current[TaskStatus.COMPLETED.value] == 1
    assert current[TaskStatus.REJECTED.value] == 0


def test_history_older_than_window_is_ignored(db, supervisor, student):
    task = make_task(db, supervisor, student)
    db.add(TaskStatusUpdate(
        task_id=task.id,
        status=TaskStatus.COMPLETED,
        created_at=datetime.utcnow() - timedelta(days=400),
    ))
    db.commit()

    series = MetricsAggregator(db, today=today()).task_metrics(student_id=student.id)

    assert sum(entry["counts"][TaskStatus.COMPLETED.value] for entry in series) == 0


def test_status_snapshot_has_every_key(db, supervisor, student):
    make_task(db, supervisor, student)

    counts = MetricsAggregator(db).task_status_counts(student_id=student.id)

    assert counts == {
        TaskStatus.PENDING.value: 1,
        TaskStatus.UNDER_REVIEW.value: 0,
        TaskStatus.COMPLETED.value: 0,
        TaskStatus.REJECTED.value: 0,
    }


def test_supervisor_dashboard(db, supervisor, student, second_student):
    complete_task(db, supervisor, student, make_task(db, supervisor, student))
    make_task(db, supervisor, second_student)

    stats = MetricsAggregator(db, today=today()).supervisor_dashboard(supervisor.id)

    assert stats["total_students"] == 2
    assert stats["tasks_status"][TaskStatus.COMPLETED.value] == 1
    assert stats["projects_status"] == {
        ProjectStatus.NOT_STARTED.value: 1,
        ProjectStatus.IN_PROGRESS.value: 1,
        ProjectStatus.COMPLETED.value: 0,
    }
    assert len(stats["projects_metrics"]) == 6
    current = stats["projects_metrics"][-1]["counts"]
    assert current[ProjectStatus.NOT_STARTED.value] == 2
    assert current[ProjectStatus.IN_PROGRESS.value] == 1
    assert len(stats["recent_tasks"]) == 2


def test_student_dashboard(db, supervisor, student):
    for i in range(7):
        make_task(db, supervisor, student, f"Task {i}")

    stats = MetricsAggregator(db, today=today()).student_dashboard(student.id)

    assert len(stats["task_summary"]) == 6
    assert len(stats["tasks"]) == 7
    assert stats["tasks_status"][TaskStatus.PENDING.value] == 7
    assert len(stats["tasks_metrics"]) == 6


def test_default_today_follows_utc_history_stamps(db):
    assert MetricsAggregator(db).today == datetime.utcnow().date()
