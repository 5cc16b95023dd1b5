from __future__ import annotations
import sqlite3, pathlib, datetime as dt
from typing import Optional, List
from .models import Task, RecurrenceRule, RepeatType, RepeatEndType, TaskCategory

DB_PATH = pathlib.Path(__file__).resolve().parent / "app_data.sqlite"

DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    due_at TEXT NOT NULL,
    completed INTEGER NOT NULL DEFAULT 0,
    repeat_type TEXT NOT NULL DEFAULT 'none',
    repeat_interval INTEGER NOT NULL DEFAULT 1,
    repeat_end_type TEXT NOT NULL DEFAULT 'never',
    repeat_end_count INTEGER NOT NULL DEFAULT 0,
    repeat_end_date TEXT DEFAULT NULL,
    category TEXT NOT NULL DEFAULT 'none',
    sound TEXT DEFAULT NULL,
    lineage_id INTEGER DEFAULT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

# One row per (lineage, due time), whichever writer gets there first.
DDL_LINEAGE_INDEX = """
CREATE UNIQUE INDEX IF NOT EXISTS tasks_lineage_due ON tasks(lineage_id, due_at);
"""

_COLUMNS = (
    "title", "description", "due_at", "completed", "repeat_type", "repeat_interval",
    "repeat_end_type", "repeat_end_count", "repeat_end_date", "category", "sound",
    "lineage_id", "created_at", "updated_at",
)


def connect():
    con = sqlite3.connect(DB_PATH)
    con.execute("PRAGMA journal_mode=WAL;")
    con.row_factory = sqlite3.Row
    con.execute(DDL)
    con.execute(DDL_LINEAGE_INDEX)
    return con


def _ts(value: Optional[dt.datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


def _parse_ts(value: Optional[str]) -> Optional[dt.datetime]:
    return dt.datetime.fromisoformat(value) if value else None


def _row_to_task(row) -> Task:
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        due_at=dt.datetime.fromisoformat(row["due_at"]),
        completed=bool(row["completed"]),
        rule=RecurrenceRule(
            repeat_type=RepeatType(row["repeat_type"]),
            interval=row["repeat_interval"],
            end_type=RepeatEndType(row["repeat_end_type"]),
            end_count=row["repeat_end_count"],
            end_date=_parse_ts(row["repeat_end_date"]),
        ),
        category=TaskCategory(row["category"]),
        sound=row["sound"],
        lineage_id=row["lineage_id"],
        created_at=dt.datetime.fromisoformat(row["created_at"]),
        updated_at=dt.datetime.fromisoformat(row["updated_at"]),
    )


def _task_values(task: Task) -> tuple:
    rule = task.rule
    return (
        task.title,
        task.description,
        _ts(task.due_at),
        1 if task.completed else 0,
        rule.repeat_type.value,
        rule.interval,
        rule.end_type.value,
        rule.end_count,
        _ts(rule.end_date),
        task.category.value,
        task.sound,
        task.lineage_id,
        _ts(task.created_at),
        _ts(task.updated_at),
    )


def _query(sql: str, params: tuple = ()) -> List[Task]:
    with connect() as con:
        cur = con.execute(sql, params)
        return [_row_to_task(r) for r in cur.fetchall()]


def add_task(task: Task) -> Optional[int]:
    """
    Insert a task and return its id, or None if an occurrence with the same
    lineage and due time already exists. A task without a lineage starts its own.
    """
    placeholders = ",".join("?" for _ in _COLUMNS)
    with connect() as con:
        cur = con.execute(
            f"INSERT OR IGNORE INTO tasks({', '.join(_COLUMNS)}) VALUES ({placeholders})",
            _task_values(task),
        )
        if cur.rowcount == 0:
            return None
        task_id = cur.lastrowid
        if task.lineage_id is None:
            con.execute("UPDATE tasks SET lineage_id=? WHERE id=?", (task_id, task_id))
        return task_id


def list_tasks() -> List[Task]:
    return _query("SELECT * FROM tasks ORDER BY datetime(due_at) ASC, id ASC")


def pending_tasks() -> List[Task]:
    return _query("SELECT * FROM tasks WHERE completed=0 ORDER BY datetime(due_at) ASC, id ASC")


def completed_tasks() -> List[Task]:
    return _query("SELECT * FROM tasks WHERE completed=1 ORDER BY datetime(updated_at) DESC, id DESC")


def get_task(task_id: int) -> Optional[Task]:
    with connect() as con:
        cur = con.execute("SELECT * FROM tasks WHERE id=?", (task_id,))
        row = cur.fetchone()
        return _row_to_task(row) if row else None


def search_tasks(query: str) -> List[Task]:
    pattern = f"%{query}%"
    return _query(
        "SELECT * FROM tasks WHERE title LIKE ? OR description LIKE ? ORDER BY datetime(due_at) ASC, id ASC",
        (pattern, pattern),
    )


def tasks_by_category(category: TaskCategory) -> List[Task]:
    return _query(
        "SELECT * FROM tasks WHERE category=? ORDER BY datetime(due_at) ASC, id ASC",
        (category.value,),
    )


def overdue_tasks(now: dt.datetime) -> List[Task]:
    return _query(
        "SELECT * FROM tasks WHERE completed=0 AND datetime(due_at) <= datetime(?) ORDER BY datetime(due_at) ASC",
        (_ts(now),),
    )


def tasks_due_in_range(start: dt.datetime, end: dt.datetime, include_completed: bool = False) -> List[Task]:
    sql = "SELECT * FROM tasks WHERE datetime(due_at) BETWEEN datetime(?) AND datetime(?)"
    if not include_completed:
        sql += " AND completed=0"
    return _query(sql + " ORDER BY datetime(due_at) ASC", (_ts(start), _ts(end)))


def repeating_tasks() -> List[Task]:
    return _query("SELECT * FROM tasks WHERE repeat_type != 'none' AND completed=0 ORDER BY datetime(due_at) ASC")


def count_lineage(lineage_id: int) -> int:
    with connect() as con:
        cur = con.execute("SELECT COUNT(*) AS c FROM tasks WHERE lineage_id=?", (lineage_id,))
        row = cur.fetchone()
        return int(row["c"] if row else 0)


def completed_count(start: dt.datetime, end: dt.datetime) -> int:
    with connect() as con:
        cur = con.execute(
            "SELECT COUNT(*) AS c FROM tasks WHERE completed=1 AND datetime(updated_at) BETWEEN datetime(?) AND datetime(?)",
            (_ts(start), _ts(end)),
        )
        row = cur.fetchone()
        return int(row["c"] if row else 0)


def created_count(start: dt.datetime, end: dt.datetime) -> int:
    with connect() as con:
        cur = con.execute(
            "SELECT COUNT(*) AS c FROM tasks WHERE datetime(created_at) BETWEEN datetime(?) AND datetime(?)",
            (_ts(start), _ts(end)),
        )
        row = cur.fetchone()
        return int(row["c"] if row else 0)


def update_task(task: Task) -> None:
    assignments = ", ".join(f"{c}=?" for c in _COLUMNS)
    with connect() as con:
        con.execute(f"UPDATE tasks SET {assignments} WHERE id=?", _task_values(task) + (task.id,))


def update_completion(task_id: int, completed: bool, updated_at: dt.datetime) -> None:
    with connect() as con:
        con.execute(
            "UPDATE tasks SET completed=?, updated_at=? WHERE id=?",
            (1 if completed else 0, _ts(updated_at), task_id),
        )


def delete_task(task_id: int) -> None:
    with connect() as con:
        con.execute("DELETE FROM tasks WHERE id=?", (task_id,))


def delete_completed_tasks() -> int:
    with connect() as con:
        cur = con.execute("DELETE FROM tasks WHERE completed=1")
        return cur.rowcount
