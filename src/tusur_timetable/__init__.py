"""Timetable extraction and caching engine for timetable.tusur.ru.

Turns the public timetable site (faculties, courses, groups, weekly lesson
tables) into typed models, cached with stale-while-revalidate semantics.
Consumers (chat bot, dashboard) go through TimetableService.
"""

from tusur_timetable.cache import CachedValue, CacheStore, CacheType, InMemoryCache
from tusur_timetable.config import TimetableConfig, get_config
from tusur_timetable.errors import FetchError, PayloadError, ScrapingError
from tusur_timetable.models import (
    CourseOption,
    DaySchedule,
    FacultyOption,
    GroupOption,
    Lesson,
    ResourceLink,
    SpecialDay,
    WeekSchedule,
)
from tusur_timetable.service import TimetableService
from tusur_timetable.session import TimetableSession

__all__ = [
    "TimetableService",
    "TimetableSession",
    "TimetableConfig",
    "get_config",
    "CacheStore",
    "CachedValue",
    "CacheType",
    "InMemoryCache",
    "ScrapingError",
    "FetchError",
    "PayloadError",
    "CourseOption",
    "DaySchedule",
    "FacultyOption",
    "GroupOption",
    "Lesson",
    "ResourceLink",
    "SpecialDay",
    "WeekSchedule",
]
