import datetime as dt

from todoapp import utils

NOW = dt.datetime(2024, 2, 14, 15, 45)  # a Wednesday


def test_parse_datetime():
    assert utils.parse_datetime(" 2024-02-14 09:05 ") == dt.datetime(2024, 2, 14, 9, 5)
    assert utils.parse_datetime("14/02/2024") is None


def test_formatting():
    assert utils.format_date(NOW) == "Feb 14, 2024"
    assert utils.format_time(NOW) == "03:45 PM"
    assert utils.format_datetime(NOW) == "Feb 14, 2024 03:45 PM"


def test_relative_date_string():
    assert utils.relative_date_string(NOW.replace(hour=8), NOW) == "Today"
    assert utils.relative_date_string(NOW + dt.timedelta(days=1), NOW) == "Tomorrow"
    assert utils.relative_date_string(NOW - dt.timedelta(days=3), NOW) == "Overdue"
    assert utils.relative_date_string(NOW + dt.timedelta(days=5), NOW) == "Feb 19, 2024"


def test_boundaries():
    assert utils.start_of_day(NOW) == dt.datetime(2024, 2, 14)
    assert utils.end_of_day(NOW) == dt.datetime(2024, 2, 14, 23, 59, 59, 999999)
    assert utils.start_of_week(NOW) == dt.datetime(2024, 2, 12)
    assert utils.end_of_week(NOW).date() == dt.date(2024, 2, 18)
    assert utils.start_of_month(NOW) == dt.datetime(2024, 2, 1)
    assert utils.end_of_month(NOW).date() == dt.date(2024, 2, 29)
    assert utils.end_of_month(dt.datetime(2024, 12, 31)).date() == dt.date(2024, 12, 31)


def test_combine_date_and_time():
    got = utils.combine_date_and_time(dt.date(2024, 3, 1), dt.time(7, 30, 59))
    assert got == dt.datetime(2024, 3, 1, 7, 30)
