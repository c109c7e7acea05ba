"""SchedulePage - extracts a group's weekly lessons from timetable.tusur.ru.

Parses /faculties/{faculty}/groups/{group}?week_id=N (weekly lesson table).

Markup shape (as served by the site):
  table.table-lessons.hidden-xs.hidden-sm.{even|odd}
    tr
      th.time -> <span>08:50</span> ... <span>10:25</span>
      td.lesson_cell.day_1 .. day_7 (1 = Monday)
        div.training (one per lesson, or a bare marker like "Выходной день")
          span.discipline -> <abbr title="full name">short</abbr>
          span.kind -> "Лекция", "Практика", "Лабораторная работа", ...
          span.auditoriums -> <a href="/auditoriums/...">room</a>
          span.group -> <a href="/teachers/...">teacher</a>
          span.hidden -> numeric lesson id (or data-lesson-id="...")
          *.note[data-original-title|title|data-content] -> note tooltip

The same page also carries a narrow-screen copy of the table (visible-xs),
which is only used when the wide one is missing.

Each stage is its own matcher so a markup change breaks only that stage.
Nothing here raises or logs: a missing piece degrades to an empty value for
the smallest enclosing unit (a row without times is skipped, a page without a
table gives an empty week).
"""

import re
from datetime import date

from tusur_timetable.config import DEFAULT_TIMETABLE_URL
from tusur_timetable.markup import (
    decode_entities,
    extract_attribute,
    extract_links,
    strip_html,
)
from tusur_timetable.models import (
    PLACEHOLDER,
    DaySchedule,
    Lesson,
    LessonInfo,
    LessonType,
    ResourceLink,
    SpecialDay,
    WeekSchedule,
    WeekType,
)
from tusur_timetable.weeks import format_lesson_date, week_dates, week_type

_FLAGS = re.IGNORECASE | re.DOTALL

# Lesson kind label -> type. Every keyword in a row must occur; first row wins.
LESSON_TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], LessonType], ...] = (
    (("лек",), "lecture"),
    (("практ",), "practice"),
    (("сем",), "practice"),
    (("лаб",), "lab"),
    (("проект",), "courseProject"),
    (("курсов",), "coursework"),
    (("зач", "оцен"), "creditWithGrade"),
    (("зач",), "credit"),
    (("экзам",), "exam"),
    (("самост",), "selfStudy"),
    (("срс",), "selfStudy"),
    (("конс",), "consultation"),
)
DEFAULT_LESSON_TYPE: LessonType = "lecture"

# Training-block text without a discipline -> (type, name). A None name keeps
# the block's own text.
SPECIAL_DAY_KEYWORDS: tuple[tuple[str, str, str | None], ...] = (
    ("праздничн", "holiday", "Праздничный день"),
    ("выходн", "holiday", "Выходной день"),
    ("каникул", "vacation", "Каникулы"),
    ("практик", "practice", None),
)
DEFAULT_PRACTICE_NAME = "Практика"

NOTE_ATTRIBUTES = ("data-original-title", "title", "data-title", "data-content")


def _normalize(text: str) -> str:
    return text.lower().replace("ё", "е")


def classify_lesson_type(kind: str) -> LessonType:
    """Map a kind label ("Лабораторная работа") to a lesson type."""
    normalized = _normalize(kind)
    for keywords, lesson_type in LESSON_TYPE_KEYWORDS:
        if all(keyword in normalized for keyword in keywords):
            return lesson_type
    return DEFAULT_LESSON_TYPE


def classify_special_day(block_html: str) -> SpecialDay | None:
    """Special-day marker for a training block that has no discipline."""
    raw_text = strip_html(block_html)
    normalized = _normalize(raw_text)
    for keyword, day_type, name in SPECIAL_DAY_KEYWORDS:
        if keyword in normalized:
            return SpecialDay(
                type=day_type, name=name or raw_text or DEFAULT_PRACTICE_NAME
            )
    return None


def extract_lesson_notes(block_html: str) -> list[str]:
    """Tooltip texts of every element carrying a ``note`` class."""
    notes: dict[str, None] = {}
    for tag in SchedulePage.CLASSED_TAG.findall(block_html):
        classes = extract_attribute(tag, "class") or ""
        if "note" not in classes.split():
            continue
        for attribute in NOTE_ATTRIBUTES:
            value = extract_attribute(tag, attribute)
            if value and value.strip():
                cleaned = strip_html(value)
                if cleaned:
                    notes[cleaned] = None
                break
    return list(notes)


class SchedulePage:
    """Weekly lesson table of one group.

    Usage:
        info = parse_lesson_info(html)
        schedule = SchedulePage(html).parse(monday, info)
    """

    # Wide table first, then any lesson table
    TABLES = (
        re.compile(
            r"""<table[^>]*class=(["'])(?=[^"']*table-lessons)(?=[^"']*hidden-xs)"""
            r"""(?=[^"']*hidden-sm)[^"']*\1[^>]*>.*?</table>""",
            _FLAGS,
        ),
        re.compile(
            r"""<table[^>]*class=(["'])(?=[^"']*table-lessons)[^"']*\1[^>]*>.*?</table>""",
            _FLAGS,
        ),
    )
    TABLE_CLASS = re.compile(r"""<table[^>]*class=(["'])([^"']*)\1""", _FLAGS)
    ROW = re.compile(r"<tr\b[^>]*>(.*?)</tr>", _FLAGS)
    TIME = re.compile(
        r"""<th[^>]*class=['"]time['"][^>]*>.*?<span>\s*(\d{1,2}:\d{2})\s*</span>"""
        r""".*?<span>\s*(\d{1,2}:\d{2})\s*</span>""",
        _FLAGS,
    )
    DAY_CELL = re.compile(
        r"""<td[^>]*class=['"][^'"]*?\bday_(\d+)\b[^'"]*['"][^>]*>(.*?)</td>""", _FLAGS
    )
    TRAINING = re.compile(
        r"""<div[^>]*class=['"][^'"]*\btraining\b[^'"]*['"][^>]*>.*?</div>""", _FLAGS
    )
    DISCIPLINE = re.compile(
        r"""<span[^>]*class=['"][^'"]*\bdiscipline\b[^'"]*['"][^>]*>(.*?)</span>""",
        _FLAGS,
    )
    ABBR_TITLE = re.compile(
        r"""<abbr[^>]*(?:title|data-original-title)=['"]([^'"]+)['"][^>]*>""", _FLAGS
    )
    KIND = re.compile(r"""<span[^>]*class=['"]kind['"][^>]*>(.*?)</span>""", _FLAGS)
    AUDITORIUM = re.compile(
        r"""<span[^>]*class=['"]auditoriums?['"][^>]*>(.*?)</span>""", _FLAGS
    )
    TEACHER = re.compile(r"""<span[^>]*class=['"]group['"][^>]*>(.*?)</span>""", _FLAGS)
    LESSON_ID = (
        re.compile(r"""data-lesson-id=['"](\d+)['"]""", _FLAGS),
        re.compile(r"""<span[^>]*class=['"]hidden['"][^>]*>\s*(\d+)\s*</span>""", _FLAGS),
    )
    CLASSED_TAG = re.compile(r"""<[^>]+class=['"][^'"]*['"][^>]*>""", _FLAGS)

    def __init__(self, html: str, base_url: str = DEFAULT_TIMETABLE_URL) -> None:
        self.html = html or ""
        self.base_url = base_url

    def parse(
        self, week_start: date, lesson_info: dict[str, LessonInfo] | None = None
    ) -> WeekSchedule:
        """Extract the week starting at ``week_start`` (a Monday).

        Args:
            week_start: Monday of the requested week; used for lesson dates
                and as the parity fallback.
            lesson_info: Modal cross-references keyed by lesson id.

        Returns:
            WeekSchedule with exactly seven days.
        """
        lesson_info = lesson_info or {}
        fallback_type = week_type(week_start)

        table_html = self._find_table()
        if table_html is None:
            return WeekSchedule.empty(fallback_type)

        schedule = WeekSchedule.empty(self._read_week_type(table_html, fallback_type))
        dates = [format_lesson_date(d) for d in week_dates(week_start)]

        for row_html in self.ROW.findall(table_html):
            times = self.TIME.search(row_html)
            for day_number, cell_html in self.DAY_CELL.findall(row_html):
                day_idx = int(day_number) - 1
                if not 0 <= day_idx < len(schedule.days):
                    continue
                day = schedule.days[day_idx]
                for block in self.TRAINING.findall(cell_html):
                    lesson = self._parse_training(
                        block, day, times, dates[day_idx], lesson_info
                    )
                    if lesson is not None:
                        day.lessons.append(lesson)

        return schedule

    def _find_table(self) -> str | None:
        for pattern in self.TABLES:
            match = pattern.search(self.html)
            if match:
                return match.group(0)
        return None

    def _read_week_type(self, table_html: str, fallback: WeekType) -> WeekType:
        match = self.TABLE_CLASS.search(table_html)
        class_name = match.group(2) if match else ""
        if "even" in class_name:
            return "even"
        if "odd" in class_name:
            return "odd"
        return fallback

    def _parse_training(
        self,
        block: str,
        day: DaySchedule,
        times: re.Match | None,
        lesson_date: str,
        lesson_info: dict[str, LessonInfo],
    ) -> Lesson | None:
        discipline = self.DISCIPLINE.search(block)
        if discipline is None:
            # First marker of the day wins
            if day.special_day is None:
                day.special_day = classify_special_day(block)
            return None

        if times is None:
            return None
        time_start, time_end = times.group(1), times.group(2)

        abbr = self.ABBR_TITLE.search(block)
        if abbr:
            subject = strip_html(decode_entities(abbr.group(1)))
        else:
            subject = strip_html(discipline.group(1))
        if not subject:
            return None

        kind = self.KIND.search(block)
        room, room_links = self._labelled_span(self.AUDITORIUM, block)
        instructor, instructor_links = self._labelled_span(self.TEACHER, block)
        notes = extract_lesson_notes(block)

        lesson_id = self._lesson_id(block) or f"{day.day_index}-{time_start}-{subject}"
        info = lesson_info.get(lesson_id)
        group_links = info.group_links if info and info.group_links else None
        joint_links = info.joint_group_links if info and info.joint_group_links else None

        return Lesson(
            id=lesson_id,
            time=time_start,
            time_end=time_end,
            subject=subject,
            type=classify_lesson_type(strip_html(kind.group(1)) if kind else ""),
            room=room,
            room_links=room_links,
            instructor=instructor,
            instructor_links=instructor_links,
            date=lesson_date,
            group_links=group_links,
            joint_groups=[link.label for link in joint_links] if joint_links else None,
            joint_group_links=joint_links,
            notes=notes or None,
        )

    def _labelled_span(
        self, pattern: re.Pattern, block: str
    ) -> tuple[str, list[ResourceLink] | None]:
        """Display text and links of a room/teacher span.

        Link labels win over the raw text; missing text becomes the
        placeholder.
        """
        match = pattern.search(block)
        if match is None:
            return PLACEHOLDER, None
        links = extract_links(match.group(1), self.base_url)
        if links:
            return ", ".join(link.label for link in links), links
        return strip_html(match.group(1)) or PLACEHOLDER, None

    def _lesson_id(self, block: str) -> str | None:
        for pattern in self.LESSON_ID:
            match = pattern.search(block)
            if match:
                return match.group(1)
        return None
