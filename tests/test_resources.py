import pytest

from tusur_timetable.cache import CacheType, resources_key
from tusur_timetable.errors import PayloadError
from tusur_timetable.models import DaySchedule, Lesson, LessonInfo, ResourceLink
from tusur_timetable.resources import ResourceLinkResolver, parse_resource_links

LINKS_URL = "https://x/links/42"
BASE = "https://timetable.tusur.ru"


@pytest.fixture
def resolver(session, cache, config):
    return ResourceLinkResolver(session, cache, config)


def test_parse_resource_links_normalizes_and_deduplicates():
    payload = [
        {"url": "/courses/1/materials", "anchor": "Материалы &laquo;курса&raquo;"},
        {"url": "/courses/1/materials", "anchor": "Материалы «курса»"},
        {"url": "https://sdo.tusur.ru/course/7", "anchor": "<b>СДО</b>"},
        {"url": "/empty", "anchor": "  "},
        {"url": 5, "anchor": "bad"},
        "not an object",
    ]
    assert parse_resource_links(payload, BASE) == [
        ResourceLink(label="Материалы «курса»", url="https://timetable.tusur.ru/courses/1/materials"),
        ResourceLink(label="СДО", url="https://sdo.tusur.ru/course/7"),
    ]


def test_parse_resource_links_rejects_non_list():
    with pytest.raises(PayloadError):
        parse_resource_links({"url": "/x"}, BASE)


async def test_fetch_caches_result(resolver, upstream, cache):
    upstream.add(LINKS_URL, json_body=[{"url": "/m/1", "anchor": "Лекции"}])

    first = await resolver.fetch_resource_links(LINKS_URL)
    second = await resolver.fetch_resource_links(LINKS_URL)

    assert first == second == [ResourceLink(label="Лекции", url="https://timetable.tusur.ru/m/1")]
    assert upstream.hits(LINKS_URL) == 1
    assert await cache.get(resources_key(LINKS_URL)) == [
        {"label": "Лекции", "url": "https://timetable.tusur.ru/m/1"}
    ]


async def test_fetch_serves_stale_entry_on_failure(resolver, upstream, cache, clock):
    await cache.set(
        resources_key(LINKS_URL),
        [{"label": "Старое", "url": "https://x/old"}],
        60,
        CacheType.RESOURCES,
    )
    clock.advance(120)
    upstream.add(LINKS_URL, status=500)

    links = await resolver.fetch_resource_links(LINKS_URL)

    assert links == [ResourceLink(label="Старое", url="https://x/old")]
    assert upstream.hits(LINKS_URL) == 1


async def test_fetch_failure_without_cache_gives_empty_list(resolver, upstream):
    upstream.add(LINKS_URL, error=True)
    assert await resolver.fetch_resource_links(LINKS_URL) == []


async def test_non_list_payload_gives_empty_list(resolver, upstream):
    upstream.add(LINKS_URL, json_body={"error": "nope"})
    assert await resolver.fetch_resource_links(LINKS_URL) == []


def _day(*lessons):
    return DaySchedule(day_name="Понедельник", day_index=0, lessons=list(lessons))


def _lesson(lesson_id, subject="Физика"):
    return Lesson(id=lesson_id, time="08:50", time_end="10:25", subject=subject)


async def test_hydrate_fetches_shared_url_once(resolver, upstream):
    upstream.add(LINKS_URL, json_body=[{"url": "/m/42", "anchor": "Учебник"}])
    first, second = _lesson("1"), _lesson("2", "Физика, практика")
    days = [_day(first, second)]
    info = {
        "1": LessonInfo(course_links_url=LINKS_URL),
        "2": LessonInfo(course_links_url=LINKS_URL),
    }

    await resolver.hydrate(days, info)

    assert upstream.hits(LINKS_URL) == 1
    expected = [ResourceLink(label="Учебник", url="https://timetable.tusur.ru/m/42")]
    assert first.resource_links == expected
    assert second.resource_links == expected


async def test_hydrate_leaves_empty_results_unset(resolver, upstream):
    upstream.add(LINKS_URL, json_body=[])
    lesson = _lesson("1")
    other = _lesson("3")

    await resolver.hydrate([_day(lesson, other)], {"1": LessonInfo(course_links_url=LINKS_URL)})

    assert lesson.resource_links is None
    assert other.resource_links is None


async def test_hydrate_ignores_modals_without_lessons(resolver, upstream):
    await resolver.hydrate([_day(_lesson("1"))], {"99": LessonInfo(course_links_url=LINKS_URL)})
    assert upstream.requests == []
