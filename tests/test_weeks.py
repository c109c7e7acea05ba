from datetime import date, datetime

import pytest

from tusur_timetable import weeks


@pytest.mark.parametrize(
    "year, expected",
    [
        (2025, date(2025, 9, 1)),  # 1 Sep is a Monday
        (2024, date(2024, 9, 2)),  # Sunday -> next day
        (2026, date(2026, 9, 7)),  # Tuesday -> following Monday
    ],
)
def test_first_monday(year, expected):
    assert weeks.first_monday(year) == expected


def test_academic_year_runs_september_to_august():
    assert weeks.academic_year(date(2025, 9, 1)) == 2025
    assert weeks.academic_year(date(2026, 1, 15)) == 2025
    assert weeks.academic_year(date(2026, 8, 31)) == 2025


@pytest.mark.parametrize(
    "day, number, parity",
    [
        (date(2025, 9, 1), 1, "odd"),
        (date(2025, 9, 7), 1, "odd"),
        (date(2025, 9, 8), 2, "even"),
        (date(2026, 1, 5), 19, "odd"),
        (date(2026, 8, 31), 53, "odd"),
    ],
)
def test_week_number_and_type(day, number, parity):
    assert weeks.week_number(day) == number
    assert weeks.week_type(day) == parity


def test_days_before_first_monday_stay_in_their_academic_year():
    # 1 Sep 2026 is a Tuesday; week 1 only starts on the 7th
    assert weeks.week_number(date(2026, 9, 1)) == 0
    assert weeks.week_type(date(2026, 9, 1)) == "even"


def test_week_type_is_stable():
    day = date(2026, 10, 18)
    assert weeks.week_type(day) == weeks.week_type(day) == weeks.week_type(date(2026, 10, 18))


def test_week_id_counts_from_first_monday():
    assert weeks.week_id(date(2025, 9, 1)) == weeks.BASE_WEEK_ID
    assert weeks.week_id(date(2025, 9, 8)) == 787
    assert weeks.week_id(date(2025, 9, 10)) == 787
    assert weeks.week_id(date(2025, 9, 8), base_week_id=100) == 101


def test_week_id_with_anchor_is_linear_across_years():
    anchor = date(2025, 9, 1)
    assert weeks.week_id(date(2026, 9, 7), anchor=anchor) == 786 + 53
    assert weeks.week_id(date(2026, 9, 7)) == 786


def test_monday_of_week_and_dates():
    monday = weeks.monday_of_week(date(2026, 10, 18))
    assert monday == date(2026, 10, 12)
    assert weeks.monday_of_week(datetime(2026, 10, 14, 15, 30)) == monday

    days = weeks.week_dates(monday)
    assert len(days) == 7
    assert days[0] == monday and days[-1] == date(2026, 10, 18)
    assert [weeks.day_index(d) for d in days] == list(range(7))


def test_add_weeks_and_lesson_date_format():
    assert weeks.add_weeks(date(2026, 10, 12), 2) == date(2026, 10, 26)
    assert weeks.format_lesson_date(date(2026, 3, 2)) == "02.03.2026"
