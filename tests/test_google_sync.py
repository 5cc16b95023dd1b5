import datetime as dt
from unittest.mock import MagicMock

from todoapp.integrations import google_sync
from todoapp.models import RecurrenceRule, RepeatType, Task

UTC = dt.timezone.utc


def _task(rule=None):
    return Task(id=1, title="Standup", description="team sync",
                due_at=dt.datetime(2024, 4, 1, 9, 0, tzinfo=UTC), rule=rule or RecurrenceRule())


def test_event_body_carries_recurrence():
    body = google_sync.event_body(_task(RecurrenceRule.after_count(RepeatType.WEEKLY, 10)))
    assert body["summary"] == "Standup"
    assert body["start"]["dateTime"] == "2024-04-01T09:00:00+00:00"
    assert body["end"]["dateTime"] == "2024-04-01T09:30:00+00:00"
    assert body["recurrence"] == ["RRULE:FREQ=WEEKLY;COUNT=10"]
    assert "recurrence" not in google_sync.event_body(_task())


def test_export_reports_each_service(monkeypatch):
    tasks_svc = MagicMock()
    tasks_svc.tasklists().list().execute.return_value = {"items": [{"id": "list-1"}]}
    tasks_svc.tasks().insert().execute.return_value = {"id": "task-9"}
    monkeypatch.setattr(google_sync, "tasks_service", lambda: tasks_svc)

    def no_calendar():
        raise FileNotFoundError("Missing credentials.json")

    monkeypatch.setattr(google_sync, "calendar_service", no_calendar)

    ids = google_sync.export_task_to_google(_task(RecurrenceRule.never(RepeatType.DAILY)))
    assert ids == {"task_id": "task-9", "event_error": "Missing credentials.json"}
    _, kwargs = tasks_svc.tasks().insert.call_args
    assert kwargs["tasklist"] == "list-1"
    assert kwargs["body"]["due"] == "2024-04-01T09:00:00+00:00"
    assert kwargs["body"]["notes"] == "team sync"
