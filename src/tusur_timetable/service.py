"""TimetableService - cache-backed entry points used by the bot and dashboard.

Every operation follows the same stale-while-revalidate shape:

  1. fresh cache hit            -> return it, no network
  2. remember the stale entry   (possibly expired, possibly None)
  3. fetch + parse + cache.set  -> return the fresh value
  4. any exception in 3         -> stale entry if there is one, else re-raise

Concurrent identical loads inside one service instance share a single
in-flight task (key -> task), which is dropped as soon as it settles.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, TypeVar

from pydantic import TypeAdapter

from tusur_timetable.cache import (
    FACULTIES_CACHE_KEY,
    LOGOS_CACHE_KEY,
    PHOTOS_CACHE_KEY,
    CacheStore,
    CacheType,
    courses_key,
    schedule_key,
)
from tusur_timetable.config import TimetableConfig, get_config
from tusur_timetable.logging import get_logger
from tusur_timetable.models import CourseOption, FacultyOption, WeekSchedule
from tusur_timetable.pages.directory import (
    extract_stylesheet_url,
    parse_faculties,
    parse_faculty_courses,
    parse_faculty_logos,
    parse_faculty_photos,
)
from tusur_timetable.pages.lesson_info import parse_lesson_info
from tusur_timetable.pages.schedule import SchedulePage
from tusur_timetable.resources import ResourceLinkResolver
from tusur_timetable.session import TimetableSession
from tusur_timetable.weeks import monday_of_week, week_id

log = get_logger(__name__)

T = TypeVar("T")

_FACULTIES = TypeAdapter(list[FacultyOption])
_COURSES = TypeAdapter(list[CourseOption])
_IMAGES = TypeAdapter(dict[str, str])


def _dump(value: Any) -> Any:
    if isinstance(value, list):
        return [item.to_cache() for item in value]
    if hasattr(value, "to_cache"):
        return value.to_cache()
    return value


class TimetableService:
    """Faculties, courses and weekly schedules of timetable.tusur.ru."""

    def __init__(
        self,
        cache: CacheStore,
        session: TimetableSession | None = None,
        config: TimetableConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.cache = cache
        self._owns_session = session is None
        self.session = session or TimetableSession(config=self.config)
        self.resources = ResourceLinkResolver(self.session, cache, self.config)
        self._in_flight: dict[str, asyncio.Task] = {}

    async def aclose(self) -> None:
        if self._owns_session:
            await self.session.aclose()

    async def __aenter__(self) -> "TimetableService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- public operations -------------------------------------------------

    def build_timetable_url(self, faculty_slug: str, group_slug: str) -> str:
        base = self.config.timetable_base_url.rstrip("/")
        return f"{base}/faculties/{faculty_slug}/groups/{group_slug}"

    async def fetch_faculties(self) -> list[FacultyOption]:
        """All faculties with their image (photo, else logo, else None)."""
        return await self._load(
            FACULTIES_CACHE_KEY,
            CacheType.FACULTIES,
            self._fetch_faculties,
            _FACULTIES.validate_python,
        )

    async def fetch_faculty_courses(self, faculty_slug: str) -> list[CourseOption]:
        """Courses of a faculty, each with its groups."""
        return await self._load(
            courses_key(faculty_slug),
            CacheType.COURSES,
            lambda: self._fetch_courses(faculty_slug),
            _COURSES.validate_python,
        )

    async def fetch_week_schedule(
        self, faculty_slug: str, group_slug: str, week_start: date
    ) -> WeekSchedule:
        """Schedule of the week containing ``week_start``.

        Args:
            faculty_slug: Faculty slug, e.g. "fsu".
            group_slug: Group slug, e.g. "425-m".
            week_start: Any date of the wanted week; normalized to its Monday.

        Returns:
            WeekSchedule with seven days, Monday first.

        Raises:
            FetchError: Upstream failed and nothing was cached for this week.
        """
        monday = monday_of_week(week_start)
        return await self._load(
            schedule_key(faculty_slug, group_slug, monday),
            CacheType.SCHEDULE,
            lambda: self._fetch_schedule(faculty_slug, group_slug, monday),
            WeekSchedule.model_validate,
        )

    # -- cache / single-flight plumbing ------------------------------------

    async def _load(
        self,
        key: str,
        cache_type: CacheType,
        fetch: Callable[[], Awaitable[T]],
        decode: Callable[[Any], T],
    ) -> T:
        cached = await self.cache.get(key)
        if cached is not None:
            log.debug("cache_hit", key=key)
            return decode(cached)

        stale = await self.cache.get_with_stale(key)
        task = self._in_flight.get(key)
        if task is None:
            log.info("cache_miss", key=key, stale=stale is not None)
            task = asyncio.ensure_future(self._refresh(key, cache_type, fetch))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._settle(key, done))
        else:
            log.debug("joined_in_flight", key=key)

        try:
            return await asyncio.shield(task)
        except Exception as e:
            if stale is None:
                raise
            log.warning("serving_stale", key=key, error=str(e), type=type(e).__name__)
            return decode(stale.value)

    async def _refresh(
        self, key: str, cache_type: CacheType, fetch: Callable[[], Awaitable[T]]
    ) -> T:
        value = await fetch()
        await self.cache.set(
            key, _dump(value), self.config.ttl_for(cache_type), cache_type
        )
        return value

    def _settle(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    # -- upstream loaders --------------------------------------------------

    async def _fetch_faculties(self) -> list[FacultyOption]:
        base = self.config.timetable_base_url.rstrip("/")
        html = await self.session.get_text(f"{base}/faculties")
        logos, photos = await asyncio.gather(
            self._fetch_logos(html), self._fetch_photos()
        )
        faculties = parse_faculties(html, logos, photos)
        log.info("faculties_fetched", count=len(faculties))
        return faculties

    async def _fetch_courses(self, faculty_slug: str) -> list[CourseOption]:
        base = self.config.timetable_base_url.rstrip("/")
        html = await self.session.get_text(f"{base}/faculties/{faculty_slug}")
        courses = parse_faculty_courses(html)
        log.info("courses_fetched", faculty=faculty_slug, count=len(courses))
        return courses

    async def _fetch_schedule(
        self, faculty_slug: str, group_slug: str, monday: date
    ) -> WeekSchedule:
        url = self.build_timetable_url(faculty_slug, group_slug)
        upstream_week = week_id(
            monday, self.config.base_week_id, self.config.base_week_anchor
        )
        html = await self.session.get_text(url, params={"week_id": upstream_week})

        base = self.config.timetable_base_url
        lesson_info = parse_lesson_info(html, base)
        schedule = SchedulePage(html, base).parse(monday, lesson_info)
        await self.resources.hydrate(schedule.days, lesson_info)

        log.info(
            "schedule_fetched",
            faculty=faculty_slug,
            group=group_slug,
            week_start=monday.isoformat(),
            week_id=upstream_week,
            lessons=sum(len(day.lessons) for day in schedule.days),
        )
        return schedule

    async def _fetch_logos(self, faculties_html: str) -> dict[str, str]:
        css_url = extract_stylesheet_url(faculties_html, self.config.timetable_base_url)
        if css_url is None:
            return {}

        async def fetch() -> dict[str, str]:
            css = await self.session.get_text(css_url)
            return parse_faculty_logos(css, self.config.timetable_base_url)

        return await self._load_images(LOGOS_CACHE_KEY, CacheType.LOGOS, fetch)

    async def _fetch_photos(self) -> dict[str, str]:
        async def fetch() -> dict[str, str]:
            html = await self.session.get_text(self.config.faculty_photos_url)
            return parse_faculty_photos(html, self.config.university_base_url)

        return await self._load_images(PHOTOS_CACHE_KEY, CacheType.PHOTOS, fetch)

    async def _load_images(
        self,
        key: str,
        cache_type: CacheType,
        fetch: Callable[[], Awaitable[dict[str, str]]],
    ) -> dict[str, str]:
        """Optional imagery: any failure degrades to stale, then to {}."""
        try:
            return await self._load(key, cache_type, fetch, _IMAGES.validate_python)
        except Exception as e:
            log.warning("faculty_images_unavailable", key=key, error=str(e))
            return {}
