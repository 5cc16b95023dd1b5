from __future__ import annotations
import datetime as dt

ISO_FMT = "%Y-%m-%d %H:%M"
DATE_FMT = "%b %d, %Y"
TIME_FMT = "%I:%M %p"


def parse_datetime(s: str) -> dt.datetime | None:
    try:
        return dt.datetime.strptime(s.strip(), ISO_FMT)
    except (AttributeError, ValueError):
        return None


def now() -> dt.datetime:
    return dt.datetime.now()


def format_date(d: dt.datetime) -> str:
    return d.strftime(DATE_FMT)


def format_time(d: dt.datetime) -> str:
    return d.strftime(TIME_FMT)


def format_datetime(d: dt.datetime) -> str:
    return f"{format_date(d)} {format_time(d)}"


def is_today(d: dt.datetime, current: dt.datetime | None = None) -> bool:
    current = current or now()
    return d.date() == current.date()


def is_tomorrow(d: dt.datetime, current: dt.datetime | None = None) -> bool:
    current = current or now()
    return d.date() == current.date() + dt.timedelta(days=1)


def is_overdue(d: dt.datetime, current: dt.datetime | None = None) -> bool:
    return d < (current or now())


def relative_date_string(d: dt.datetime, current: dt.datetime | None = None) -> str:
    current = current or now()
    if is_today(d, current):
        return "Today"
    if is_tomorrow(d, current):
        return "Tomorrow"
    if is_overdue(d, current):
        return "Overdue"
    return format_date(d)


def start_of_day(d: dt.datetime) -> dt.datetime:
    return d.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(d: dt.datetime) -> dt.datetime:
    return d.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_week(d: dt.datetime) -> dt.datetime:
    # weeks start on Monday
    return start_of_day(d - dt.timedelta(days=d.weekday()))


def end_of_week(d: dt.datetime) -> dt.datetime:
    return end_of_day(d + dt.timedelta(days=6 - d.weekday()))


def start_of_month(d: dt.datetime) -> dt.datetime:
    return start_of_day(d.replace(day=1))


def end_of_month(d: dt.datetime) -> dt.datetime:
    nxt = (d.replace(day=28) + dt.timedelta(days=4)).replace(day=1)
    return end_of_day(nxt - dt.timedelta(days=1))


def combine_date_and_time(day: dt.date, time_of_day: dt.time) -> dt.datetime:
    """Join a picked date and a picked time, dropping seconds."""
    return dt.datetime.combine(day, time_of_day.replace(second=0, microsecond=0))
