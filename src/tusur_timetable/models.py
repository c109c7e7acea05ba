"""Pydantic models for timetable data.

All data structures use Pydantic v2. Attribute names are snake_case; the
serialized form uses camelCase aliases (``timeEnd``, ``roomLinks``,
``specialDay``...) which is also the shape stored in the cache. Optional link
lists stay None when the page had no links, so consumers can tell
"structured links available" from "plain text only".
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

LessonType = Literal[
    "lecture",
    "practice",
    "lab",
    "coursework",
    "courseProject",
    "credit",
    "creditWithGrade",
    "exam",
    "selfStudy",
    "consultation",
]
WeekType = Literal["even", "odd"]
SpecialDayType = Literal["holiday", "vacation", "practice"]

DAY_NAMES: tuple[str, ...] = (
    "Понедельник",
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
    "Воскресенье",
)

# Rendered in place of an empty room / instructor
PLACEHOLDER = "—"


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_cache(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResourceLink(_Model):
    """A labelled absolute URL (room, teacher, group, course material)."""

    label: str
    url: str


class Lesson(_Model):
    """One training block from the weekly table.

    ``id`` is the upstream lesson id when the page exposes one, otherwise
    ``"{day_index}-{time}-{subject}"``. It is only meant to correlate the
    lesson with its info modal inside a single page.
    """

    id: str
    time: str  # "08:50"
    time_end: str  # "10:25"
    subject: str
    type: LessonType = "lecture"
    room: str = PLACEHOLDER
    room_links: list[ResourceLink] | None = None
    instructor: str = PLACEHOLDER
    instructor_links: list[ResourceLink] | None = None
    date: str | None = None  # "DD.MM.YYYY"
    joint_groups: list[str] | None = None
    joint_group_links: list[ResourceLink] | None = None
    group_links: list[ResourceLink] | None = None
    resource_links: list[ResourceLink] | None = None
    notes: list[str] | None = None


class SpecialDay(_Model):
    type: SpecialDayType
    name: str


class DaySchedule(_Model):
    day_name: str
    day_index: int  # 0=Mon..6=Sun
    lessons: list[Lesson] = []
    special_day: SpecialDay | None = None


class WeekSchedule(_Model):
    """Seven days, Monday first, always present even when empty."""

    week_type: WeekType
    days: list[DaySchedule]

    @model_validator(mode="after")
    def _check_days(self) -> "WeekSchedule":
        if len(self.days) != len(DAY_NAMES):
            raise ValueError(f"expected 7 days, got {len(self.days)}")
        for index, day in enumerate(self.days):
            if day.day_index != index:
                raise ValueError(f"day {index} has day_index {day.day_index}")
        return self

    @classmethod
    def empty(cls, week_type: WeekType) -> "WeekSchedule":
        return cls(
            week_type=week_type,
            days=[
                DaySchedule(day_name=name, day_index=index)
                for index, name in enumerate(DAY_NAMES)
            ],
        )


class LessonInfo(_Model):
    """Cross-references recovered from a lesson's info modal."""

    course_links_url: str | None = None
    group_links: list[ResourceLink] = []
    joint_group_links: list[ResourceLink] = []


class GroupOption(_Model):
    slug: str
    name: str


class CourseOption(_Model):
    number: int
    name: str  # "2 курс"
    groups: list[GroupOption]


class FacultyOption(_Model):
    slug: str
    name: str
    image_url: str | None = None
