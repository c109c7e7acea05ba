"""Academic calendar arithmetic.

The academic year runs September to August. Week 1 starts on the first Monday
of September (when 1 September is itself a Monday, that day; otherwise the
following Monday), and parity follows the week number: odd weeks are
"нечётная", even weeks "чётная".

The timetable site addresses weeks by an internal ``week_id``. It grows by one
per calendar week; BASE_WEEK_ID is the value observed on the live site for the
first academic week and has to be re-checked whenever the site renumbers.
"""

from datetime import date, datetime, timedelta

from tusur_timetable.models import WeekType

BASE_WEEK_ID = 786
SEPTEMBER = 9


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def academic_year(day: date) -> int:
    """Calendar year in which the academic year containing ``day`` began."""
    return day.year if day.month >= SEPTEMBER else day.year - 1


def first_monday(year: int) -> date:
    september_first = date(year, SEPTEMBER, 1)
    return september_first + timedelta(days=(7 - september_first.weekday()) % 7)


def week_number(day: date) -> int:
    """1-based academic week number. Days before week 1 give 0."""
    day = _as_date(day)
    start = first_monday(academic_year(day))
    return (day - start).days // 7 + 1


def week_type(day: date) -> WeekType:
    return "odd" if week_number(day) % 2 == 1 else "even"


def week_id(
    day: date,
    base_week_id: int = BASE_WEEK_ID,
    anchor: date | None = None,
) -> int:
    """Upstream ``week_id`` for the week containing ``day``.

    Without an anchor, ``base_week_id`` belongs to the first Monday of
    ``day``'s academic year. With an anchor Monday the numbering is linear
    across years.
    """
    day = _as_date(day)
    start = anchor if anchor is not None else first_monday(academic_year(day))
    return base_week_id + (day - start).days // 7


def monday_of_week(day: date) -> date:
    day = _as_date(day)
    return day - timedelta(days=day.weekday())


def add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def week_dates(monday: date) -> list[date]:
    return [monday + timedelta(days=offset) for offset in range(7)]


def day_index(day: date) -> int:
    """Monday=0 .. Sunday=6."""
    return day.weekday()


def format_lesson_date(day: date) -> str:
    return day.strftime("%d.%m.%Y")
