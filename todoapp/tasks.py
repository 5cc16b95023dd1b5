"""
Task operations a front end calls: create, edit, complete, filter and summarize.

Recurring tasks are expanded here. The recurrence engine decides what the
next occurrence is; this module looks up the lineage, asks the guard whether
the occurrence already exists and stores it.
"""
from __future__ import annotations
import dataclasses, logging, sqlite3, datetime as dt
from dataclasses import dataclass
from typing import Iterable, List, Optional

from . import storage
from .guard import INSERT_WINDOW, is_duplicate, window_bounds
from .models import Task, TaskCategory
from .recurrence import check_rule, create_next_occurrence, enumerate_upcoming
from .settings import Settings, load_settings
from .utils import format_date, now as _now

logger = logging.getLogger(__name__)


class TaskNotFound(LookupError):
    pass


class TaskNotStored(ValueError):
    """The store refused a new task, e.g. a required field was missing."""


class DuplicateOccurrence(ValueError):
    """Another occurrence of the same lineage is already due at that time."""


@dataclass
class TaskStats:
    total: int
    pending: int
    completed: int
    overdue: int


@dataclass
class ChartData:
    completed: int
    created: int
    period: str


def _already_stored(candidate: Task, window: dt.timedelta) -> bool:
    start, end = window_bounds(candidate, window)
    return is_duplicate(candidate, storage.tasks_due_in_range(start, end, include_completed=True))


def _require(task_id: int) -> Task:
    task = storage.get_task(task_id)
    if task is None:
        raise TaskNotFound(task_id)
    return task


def materialize_next(task: Task, window: dt.timedelta, now: Optional[dt.datetime] = None) -> Optional[int]:
    """
    Store the occurrence that follows task unless its lineage has ended or
    something is already due within window of it. Returns the new id.
    """
    now = now or _now()
    lineage = task.lineage_id if task.lineage_id is not None else task.id
    so_far = storage.count_lineage(lineage) if lineage is not None else 1
    nxt = create_next_occurrence(task, so_far, clock=lambda: now)
    if nxt is None:
        logger.debug("Lineage %s ended after %d occurrences", lineage, so_far)
        return None
    if _already_stored(nxt, window):
        logger.debug("Occurrence of %r at %s already exists", task.title, nxt.due_at)
        return None
    new_id = storage.add_task(nxt)
    if new_id is not None:
        logger.info("Created next occurrence of %r due %s", task.title, nxt.due_at)
    return new_id


def create_task(task: Task, now: Optional[dt.datetime] = None, settings: Optional[Settings] = None) -> int:
    """
    Store a user-entered task. For recurring tasks the next
    settings.prepopulate_count occurrences are stored with it.
    """
    now = now or _now()
    settings = settings or load_settings()
    if task.is_recurring:
        check_rule(task.rule, now)
    root = dataclasses.replace(task, id=None, lineage_id=None, created_at=now, updated_at=now)
    task_id = storage.add_task(root)
    if task_id is None:
        raise TaskNotStored(f"could not store task {task.title!r}")
    root = dataclasses.replace(root, id=task_id, lineage_id=task_id)

    if task.is_recurring and settings.prepopulate_count > 0:
        created = 0
        for due in enumerate_upcoming(root.rule, root.due_at, max_count=settings.prepopulate_count):
            occurrence = dataclasses.replace(root, id=None, due_at=due)
            if _already_stored(occurrence, INSERT_WINDOW):
                logger.debug("Skipping %r at %s, something is already due then", root.title, due)
                continue
            if storage.add_task(occurrence) is not None:
                created += 1
        logger.info("Task %d %r: %d upcoming occurrences stored", task_id, root.title, created)
    return task_id


def update_task(task: Task, now: Optional[dt.datetime] = None) -> Task:
    now = now or _now()
    existing = _require(task.id)
    if task.is_recurring and task.rule != existing.rule:
        check_rule(task.rule, now)
    updated = dataclasses.replace(
        task,
        lineage_id=existing.lineage_id,
        created_at=existing.created_at,
        updated_at=now,
    )
    try:
        storage.update_task(updated)
    except sqlite3.IntegrityError as e:
        raise DuplicateOccurrence(f"task {task.id} already has a sibling due {task.due_at}") from e
    return updated


def delete_task(task_id: int) -> None:
    storage.delete_task(task_id)


def clear_completed() -> int:
    removed = storage.delete_completed_tasks()
    logger.info("Removed %d completed tasks", removed)
    return removed


def set_completed(task_id: int, completed: bool = True, now: Optional[dt.datetime] = None) -> Optional[int]:
    """
    Mark a task done (or not done). Completing a recurring task stores its
    next occurrence; the new id is returned, None when nothing was created.
    """
    now = now or _now()
    task = _require(task_id)
    storage.update_completion(task_id, completed, now)
    if completed and task.is_recurring:
        return materialize_next(task, INSERT_WINDOW, now)
    return None


def filter_tasks(tasks: Iterable[Task], query: str = "", category: Optional[TaskCategory] = None) -> List[Task]:
    filtered = list(tasks)
    q = query.strip().lower()
    if q:
        filtered = [t for t in filtered if q in t.title.lower() or q in t.description.lower()]
    if category is not None:
        filtered = [t for t in filtered if t.category == category]
    return filtered


def task_stats(now: Optional[dt.datetime] = None) -> TaskStats:
    now = now or _now()
    pending = storage.pending_tasks()
    done = storage.completed_tasks()
    return TaskStats(
        total=len(pending) + len(done),
        pending=len(pending),
        completed=len(done),
        overdue=sum(1 for t in pending if t.is_overdue(now)),
    )


def progress_chart(start: dt.datetime, end: dt.datetime) -> ChartData:
    return ChartData(
        completed=storage.completed_count(start, end),
        created=storage.created_count(start, end),
        period=f"{format_date(start)} - {format_date(end)}",
    )
