"""Per-course "electronic resource" links.

A lesson's info modal may carry ``data-course-links-url``; that endpoint
returns ``[{"url": ..., "anchor": ...}, ...]``. Results are cached per URL and
a failed fetch never reaches the caller: it is served from a stale entry, or
as an empty list.
"""

import asyncio
from collections import defaultdict

from pydantic import TypeAdapter

from tusur_timetable.cache import CacheStore, CacheType, resources_key
from tusur_timetable.config import TimetableConfig, get_config
from tusur_timetable.errors import PayloadError
from tusur_timetable.logging import get_logger
from tusur_timetable.markup import resolve_url, strip_html
from tusur_timetable.models import DaySchedule, Lesson, LessonInfo, ResourceLink
from tusur_timetable.session import TimetableSession

log = get_logger(__name__)

_LINKS = TypeAdapter(list[ResourceLink])


def parse_resource_links(payload: object, base_url: str) -> list[ResourceLink]:
    """Validate and normalize a resource-links payload.

    Raises:
        PayloadError: If the payload is not a JSON array.
    """
    if not isinstance(payload, list):
        raise PayloadError(f"expected a list, got {type(payload).__name__}")

    links: dict[tuple[str, str], ResourceLink] = {}
    for item in payload:
        if not isinstance(item, dict):
            continue
        url, anchor = item.get("url"), item.get("anchor")
        if not isinstance(url, str) or not isinstance(anchor, str):
            continue
        label = strip_html(anchor)
        if not label:
            continue
        resolved = resolve_url(url, base_url)
        links.setdefault((label, resolved), ResourceLink(label=label, url=resolved))
    return list(links.values())


class ResourceLinkResolver:
    """Fetches and caches resource links, and attaches them to lessons."""

    def __init__(
        self,
        session: TimetableSession,
        cache: CacheStore,
        config: TimetableConfig | None = None,
    ) -> None:
        self.session = session
        self.cache = cache
        self.config = config or get_config()
        self._limit = asyncio.Semaphore(max(1, self.config.resource_fetch_concurrency))

    async def fetch_resource_links(self, url: str) -> list[ResourceLink]:
        """Links behind a course-links URL. Never raises."""
        key = resources_key(url)

        cached = await self.cache.get(key)
        if cached is not None:
            return _LINKS.validate_python(cached)

        stale = await self.cache.get_with_stale(key)

        try:
            async with self._limit:
                payload = await self.session.get_json(url)
            links = parse_resource_links(payload, self.config.timetable_base_url)
        except Exception as e:
            log.warning(
                "resource_links_fallback",
                url=url,
                error=str(e),
                stale=stale is not None,
            )
            return _LINKS.validate_python(stale.value) if stale is not None else []

        await self.cache.set(
            key,
            [link.to_cache() for link in links],
            self.config.ttl_for(CacheType.RESOURCES),
            CacheType.RESOURCES,
        )
        return links

    async def hydrate(
        self, days: list[DaySchedule], lesson_info: dict[str, LessonInfo]
    ) -> None:
        """Fill ``resource_links`` on every lesson whose modal names a URL.

        Each distinct URL is fetched once and fanned out to every lesson
        sharing it.
        """
        lessons_by_id: dict[str, list[Lesson]] = defaultdict(list)
        for day in days:
            for lesson in day.lessons:
                lessons_by_id[lesson.id].append(lesson)

        ids_by_url: dict[str, list[str]] = defaultdict(list)
        for lesson_id, info in lesson_info.items():
            if info.course_links_url and lesson_id in lessons_by_id:
                ids_by_url[info.course_links_url].append(lesson_id)

        if not ids_by_url:
            return

        urls = list(ids_by_url)
        results = await asyncio.gather(*(self.fetch_resource_links(u) for u in urls))

        for url, links in zip(urls, results):
            if not links:
                continue
            for lesson_id in ids_by_url[url]:
                for lesson in lessons_by_id[lesson_id]:
                    lesson.resource_links = links
        log.debug("resource_links_hydrated", urls=len(urls))
