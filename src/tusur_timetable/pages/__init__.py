"""Parsers for the individual upstream pages."""

from tusur_timetable.pages.directory import (
    extract_stylesheet_url,
    parse_faculties,
    parse_faculty_courses,
    parse_faculty_logos,
    parse_faculty_photos,
    parse_groups,
)
from tusur_timetable.pages.lesson_info import parse_lesson_info
from tusur_timetable.pages.schedule import SchedulePage

__all__ = [
    "SchedulePage",
    "parse_lesson_info",
    "parse_faculties",
    "parse_faculty_courses",
    "parse_groups",
    "extract_stylesheet_url",
    "parse_faculty_logos",
    "parse_faculty_photos",
]
