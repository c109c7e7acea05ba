"""Lesson info modals embedded in the group timetable page.

Every lesson on the page has a hidden modal with richer cross-references:

  div#js-lesson-info-{id} [data-course-links-url="/courses/.../links"]
    <p><strong>Группы:</strong> <a href="/faculties/.../groups/...">...</a></p>
    <p><strong>Совместно с группами:</strong> <a ...>...</a></p>
  </noindex>

The id matches the lesson id read by SchedulePage, which is the only link
between a table cell and its modal.
"""

import re

from tusur_timetable.config import DEFAULT_TIMETABLE_URL
from tusur_timetable.markup import (
    extract_attribute,
    extract_links,
    extract_paragraph_content,
    resolve_url,
)
from tusur_timetable.models import LessonInfo

MODAL_START = re.compile(
    r"""<div[^>]*\bid=['"]js-lesson-info-(\d+)['"][^>]*>""", re.IGNORECASE
)
MODAL_END = re.compile(r"</noindex>", re.IGNORECASE)

GROUP_LABELS = ("Группы", "Группа")
JOINT_GROUPS_LABEL = "Совместно с группами"


def _modal_blocks(html: str):
    """Yield (lesson_id, block_html) for every modal start on the page."""
    starts = list(MODAL_START.finditer(html))
    for position, match in enumerate(starts):
        limit = starts[position + 1].start() if position + 1 < len(starts) else len(html)
        end = MODAL_END.search(html, match.end(), limit)
        yield match.group(1), html[match.start() : end.end() if end else limit]


def parse_lesson_info(
    html: str, base_url: str = DEFAULT_TIMETABLE_URL
) -> dict[str, LessonInfo]:
    """Map lesson id -> cross-references. The first modal per id wins."""
    result: dict[str, LessonInfo] = {}
    for lesson_id, block in _modal_blocks(html or ""):
        if lesson_id in result:
            continue

        links_url = extract_attribute(block, "data-course-links-url")
        groups_html = None
        for label in GROUP_LABELS:
            groups_html = extract_paragraph_content(block, label)
            if groups_html is not None:
                break
        joint_html = extract_paragraph_content(block, JOINT_GROUPS_LABEL)

        result[lesson_id] = LessonInfo(
            course_links_url=resolve_url(links_url, base_url) if links_url else None,
            group_links=extract_links(groups_html, base_url),
            joint_group_links=extract_links(joint_html, base_url),
        )
    return result
