import datetime as dt
from unittest.mock import patch

from todoapp import notifications
from todoapp.models import Task


def _tasks(*titles):
    return [Task(id=i, title=t, due_at=dt.datetime(2024, 1, 1)) for i, t in enumerate(titles)]


def test_alarm_message_lists_first_titles():
    msg = notifications.alarm_message(_tasks("a", "b", "c", "d", "e"))
    assert msg.splitlines() == ["You have 5 overdue tasks:", "- a", "- b", "- c", "...and 2 more"]
    assert notifications.alarm_message(_tasks("only")).splitlines()[0] == "You have 1 overdue task:"


def test_alarm_notifies_once():
    with patch.object(notifications, "notification") as backend:
        notifications.alarm(_tasks("a", "b"))
        notifications.alarm([])
    assert backend.notify.call_count == 1
    assert backend.notify.call_args.kwargs["title"] == "Reminder"


def test_notify_failure_is_swallowed():
    with patch.object(notifications, "notification") as backend:
        backend.notify.side_effect = NotImplementedError("no backend")
        notifications.notify("t", "m")


def test_alarm_passes_custom_sound():
    with patch.object(notifications, "notification") as backend:
        notifications.alarm(_tasks("a"), sound="/home/me/bell.wav")
    assert backend.notify.call_args.kwargs["hints"] == {"sound-file": "/home/me/bell.wav"}


def test_default_sound_sends_no_hints():
    with patch.object(notifications, "notification") as backend:
        notifications.alarm(_tasks("a"))
    assert "hints" not in backend.notify.call_args.kwargs
