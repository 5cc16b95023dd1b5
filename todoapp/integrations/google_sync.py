from __future__ import annotations
import logging, pathlib, datetime as dt
from typing import Dict, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from googleapiclient.discovery import build

from ..models import Task
from ..recurrence import to_rrule

logger = logging.getLogger(__name__)

DATA_DIR = pathlib.Path(__file__).resolve().parents[1]  # .../todoapp
TOKEN_PATH = DATA_DIR / "token.json"
CLIENT_SECRET_PATH = DATA_DIR / "credentials.json"  # Downloaded from Google Cloud Console

SCOPES = [
    "https://www.googleapis.com/auth/tasks",
    "https://www.googleapis.com/auth/calendar",
]

EVENT_LENGTH = dt.timedelta(minutes=30)


def _get_creds():
    creds = None
    if TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(TOKEN_PATH), SCOPES)
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not CLIENT_SECRET_PATH.exists():
                raise FileNotFoundError(f"Missing {CLIENT_SECRET_PATH.name}: cannot authenticate with Google.")
            flow = InstalledAppFlow.from_client_secrets_file(str(CLIENT_SECRET_PATH), SCOPES)
            creds = flow.run_local_server(port=0)
        TOKEN_PATH.write_text(creds.to_json())
    return creds


def tasks_service():
    return build("tasks", "v1", credentials=_get_creds(), cache_discovery=False)


def calendar_service():
    return build("calendar", "v3", credentials=_get_creds(), cache_discovery=False)


def _default_tasklist(svc) -> str:
    tasklists = svc.tasklists().list(maxResults=1).execute()
    return tasklists["items"][0]["id"]


def add_google_task(task: Task, tasklist_id: Optional[str] = None) -> str:
    svc = tasks_service()
    tasklist_id = tasklist_id or _default_tasklist(svc)
    body = {"title": task.title, "due": task.due_at.astimezone(dt.timezone.utc).isoformat()}
    if task.description:
        body["notes"] = task.description
    if task.completed:
        body["status"] = "completed"
    res = svc.tasks().insert(tasklist=tasklist_id, body=body).execute()
    return res["id"]


def event_body(task: Task) -> dict:
    start = task.due_at.astimezone(dt.timezone.utc)
    event = {
        "summary": task.title,
        "description": task.description,
        "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": (start + EVENT_LENGTH).isoformat(), "timeZone": "UTC"},
    }
    rrule = to_rrule(task.rule)
    if rrule:
        event["recurrence"] = [rrule]
    return event


def add_calendar_event(task: Task, calendar_id: str = "primary") -> str:
    svc = calendar_service()
    created = svc.events().insert(calendarId=calendar_id, body=event_body(task)).execute()
    return created["id"]


def export_task_to_google(task: Task) -> Dict[str, str]:
    """
    Export a task to Google Tasks and, with its recurrence, to Calendar.
    Failures are reported per service in the result instead of raised.
    """
    ids = {}
    try:
        ids["task_id"] = add_google_task(task)
    except Exception as e:
        logger.exception("Failed to add task to Google Tasks.")
        ids["task_error"] = str(e)
    try:
        ids["event_id"] = add_calendar_event(task)
    except Exception as e:
        logger.exception("Failed to add event to Google Calendar.")
        ids["event_error"] = str(e)
    return ids
