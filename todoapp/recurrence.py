"""
Recurrence engine: next due dates, end conditions and occurrence materialization.

Everything here is a pure function of its inputs (plus the clock passed to
create_next_occurrence); nothing touches storage.
"""
from __future__ import annotations
import dataclasses
import datetime as dt
from typing import Callable, Iterator, Optional

from dateutil.relativedelta import relativedelta

from .models import RecurrenceRule, RepeatEndType, RepeatType, Task
from .utils import format_date, now

DEFAULT_UPCOMING = 10
DEFAULT_SAFETY_LIMIT = 100


class InvalidRule(ValueError):
    """Raised by check_rule for a recurrence configuration a user may not save."""


def compute_next_due_date(rule: RecurrenceRule, anchor: dt.datetime) -> Optional[dt.datetime]:
    """
    Advance anchor by one cadence step scaled by the interval.

    Months use relativedelta, which clamps to the last day of a shorter
    month: Jan 31 + 1 month is Feb 29 in a leap year, Feb 28 otherwise.
    """
    if rule.repeat_type == RepeatType.NONE or rule.interval <= 0:
        return None
    n = rule.interval
    if rule.repeat_type == RepeatType.DAILY:
        return anchor + relativedelta(days=n)
    if rule.repeat_type == RepeatType.WEEKLY:
        return anchor + relativedelta(weeks=n)
    if rule.repeat_type == RepeatType.MONTHLY:
        return anchor + relativedelta(months=n)
    if rule.repeat_type == RepeatType.CUSTOM:
        return anchor + relativedelta(days=n)
    return None


def should_produce_next(rule: RecurrenceRule, occurrences_so_far: int, anchor: dt.datetime) -> bool:
    """Gate evaluated before a new occurrence is persisted."""
    if not rule.is_recurring:
        return False
    if rule.end_type == RepeatEndType.NEVER:
        return True
    if rule.end_type == RepeatEndType.AFTER_COUNT:
        return occurrences_so_far < rule.end_count
    if rule.end_type == RepeatEndType.ON_DATE:
        nxt = compute_next_due_date(rule, anchor)
        if nxt is None or rule.end_date is None:
            return False
        return nxt <= rule.end_date
    return False


def create_next_occurrence(
    current: Task,
    occurrences_so_far: int = 1,
    clock: Callable[[], dt.datetime] = now,
) -> Optional[Task]:
    nxt = compute_next_due_date(current.rule, current.due_at)
    if nxt is None:
        return None
    if not should_produce_next(current.rule, occurrences_so_far, current.due_at):
        return None
    stamp = clock()
    return dataclasses.replace(
        current,
        id=None,
        due_at=nxt,
        completed=False,
        lineage_id=current.lineage_id if current.lineage_id is not None else current.id,
        created_at=stamp,
        updated_at=stamp,
    )


def enumerate_upcoming(
    rule: RecurrenceRule,
    anchor: dt.datetime,
    max_count: int = DEFAULT_UPCOMING,
    safety_limit: int = DEFAULT_SAFETY_LIMIT,
    occurrences_so_far: int = 1,
) -> Iterator[dt.datetime]:
    """
    Yield up to max_count due dates after anchor.

    occurrences_so_far counts the anchor itself. Iteration stops at the end
    condition or after safety_limit steps, whichever comes first.
    """
    current = anchor
    count = occurrences_so_far
    produced = 0
    steps = 0
    while produced < max_count and steps < safety_limit:
        steps += 1
        nxt = compute_next_due_date(rule, current)
        if nxt is None:
            return
        if not should_produce_next(rule, count, current):
            return
        count += 1
        produced += 1
        yield nxt
        current = nxt


def check_rule(rule: RecurrenceRule, current: dt.datetime) -> None:
    if rule.interval <= 0:
        raise InvalidRule(f"interval must be positive, got {rule.interval}")
    if rule.end_type == RepeatEndType.AFTER_COUNT and rule.end_count <= 0:
        raise InvalidRule(f"occurrence count must be positive, got {rule.end_count}")
    if rule.end_type == RepeatEndType.ON_DATE:
        if rule.end_date is None:
            raise InvalidRule("end date is required")
        if rule.end_date <= current:
            raise InvalidRule(f"end date {rule.end_date.isoformat()} is not in the future")


def validate_rule(rule: RecurrenceRule, current: dt.datetime) -> bool:
    try:
        check_rule(rule, current)
    except InvalidRule:
        return False
    return True


_UNITS = {
    RepeatType.DAILY: ("Daily", "days"),
    RepeatType.WEEKLY: ("Weekly", "weeks"),
    RepeatType.MONTHLY: ("Monthly", "months"),
}


def describe_rule(rule: RecurrenceRule) -> str:
    if rule.repeat_type == RepeatType.NONE:
        return "No repeat"
    if rule.repeat_type == RepeatType.CUSTOM:
        return f"Every {rule.interval} days"
    single, plural = _UNITS[rule.repeat_type]
    return single if rule.interval == 1 else f"Every {rule.interval} {plural}"


def describe_end_condition(rule: RecurrenceRule) -> str:
    if rule.end_type == RepeatEndType.AFTER_COUNT:
        return f"After {rule.end_count} occurrences"
    if rule.end_type == RepeatEndType.ON_DATE and rule.end_date is not None:
        return f"Until {format_date(rule.end_date)}"
    return "Never ends"


def next_reminder_time(current: dt.datetime) -> dt.datetime:
    """Top of the hour following current."""
    return (current + dt.timedelta(hours=1)).replace(minute=0, second=0, microsecond=0)


_RRULE_FREQ = {
    RepeatType.DAILY: "DAILY",
    RepeatType.WEEKLY: "WEEKLY",
    RepeatType.MONTHLY: "MONTHLY",
    RepeatType.CUSTOM: "DAILY",
}


def to_rrule(rule: RecurrenceRule) -> Optional[str]:
    """iCalendar recurrence line, e.g. RRULE:FREQ=WEEKLY;INTERVAL=2;COUNT=4."""
    if not rule.is_recurring:
        return None
    parts = [f"FREQ={_RRULE_FREQ[rule.repeat_type]}"]
    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")
    if rule.end_type == RepeatEndType.AFTER_COUNT:
        parts.append(f"COUNT={rule.end_count}")
    elif rule.end_type == RepeatEndType.ON_DATE and rule.end_date is not None:
        parts.append(f"UNTIL={rule.end_date.astimezone(dt.timezone.utc).strftime('%Y%m%dT%H%M%SZ')}")
    return "RRULE:" + ";".join(parts)
