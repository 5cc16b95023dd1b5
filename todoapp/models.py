from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import datetime as dt


class RepeatType(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"  # every N days


class RepeatEndType(str, Enum):
    NEVER = "never"
    AFTER_COUNT = "after_count"
    ON_DATE = "on_date"


class TaskCategory(str, Enum):
    NONE = "none"
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _CATEGORY_LABELS[self][0]

    @property
    def color(self) -> str:
        return _CATEGORY_LABELS[self][1]


_CATEGORY_LABELS = {
    TaskCategory.NONE: ("No Category", "#9E9E9E"),
    TaskCategory.WORK: ("Work", "#FF5722"),
    TaskCategory.PERSONAL: ("Personal", "#4CAF50"),
    TaskCategory.SHOPPING: ("Shopping", "#FF9800"),
    TaskCategory.HEALTH: ("Health", "#E91E63"),
    TaskCategory.OTHER: ("Other", "#9C27B0"),
}


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Cadence plus end condition of a recurring task.
    end_count is only read for AFTER_COUNT and end_date only for ON_DATE.
    """
    repeat_type: RepeatType = RepeatType.NONE
    interval: int = 1
    end_type: RepeatEndType = RepeatEndType.NEVER
    end_count: int = 0
    end_date: Optional[dt.datetime] = None

    @classmethod
    def never(cls, repeat_type: RepeatType, interval: int = 1) -> RecurrenceRule:
        return cls(repeat_type, interval)

    @classmethod
    def after_count(cls, repeat_type: RepeatType, count: int, interval: int = 1) -> RecurrenceRule:
        return cls(repeat_type, interval, RepeatEndType.AFTER_COUNT, end_count=count)

    @classmethod
    def on_date(cls, repeat_type: RepeatType, end_date: dt.datetime, interval: int = 1) -> RecurrenceRule:
        return cls(repeat_type, interval, RepeatEndType.ON_DATE, end_date=end_date)

    @property
    def is_recurring(self) -> bool:
        return self.repeat_type != RepeatType.NONE


NO_REPEAT = RecurrenceRule()


@dataclass
class Task:
    id: Optional[int]
    title: str
    due_at: dt.datetime
    description: str = ""
    completed: bool = False
    rule: RecurrenceRule = NO_REPEAT
    category: TaskCategory = TaskCategory.NONE
    sound: Optional[str] = None  # custom alarm sound URI, passed through untouched
    lineage_id: Optional[int] = None
    created_at: dt.datetime = field(default_factory=dt.datetime.now)
    updated_at: dt.datetime = field(default_factory=dt.datetime.now)

    @property
    def is_recurring(self) -> bool:
        return self.rule.is_recurring

    def is_overdue(self, now: dt.datetime) -> bool:
        return not self.completed and self.due_at < now
