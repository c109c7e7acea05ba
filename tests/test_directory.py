from samples import FACULTIES_HTML, FACULTY_HTML, LOGOS_CSS, PHOTOS_HTML
from tusur_timetable.models import FacultyOption, GroupOption
from tusur_timetable.pages.directory import (
    extract_stylesheet_url,
    parse_faculties,
    parse_faculty_courses,
    parse_faculty_logos,
    parse_faculty_photos,
    parse_groups,
)


def test_parse_faculties_merges_photos_and_logos():
    faculties = parse_faculties(
        FACULTIES_HTML,
        logos={"fsu": "https://logo/fsu.svg", "rtf": "https://logo/rtf.svg"},
        photos={"fsu": "https://photo/fsu.jpg"},
    )
    assert faculties == [
        FacultyOption(slug="fsu", name="Факультет систем управления", image_url="https://photo/fsu.jpg"),
        FacultyOption(slug="rtf", name="Радиотехнический факультет", image_url="https://logo/rtf.svg"),
        FacultyOption(slug="fet", name="Факультет «электронной» техники", image_url=None),
    ]


def test_parse_faculties_without_listing():
    assert parse_faculties("<h1>Другая страница</h1><ul></ul>") == []


def test_parse_faculty_courses_skips_empty_courses():
    courses = parse_faculty_courses(FACULTY_HTML)

    assert [(c.number, c.name) for c in courses] == [(1, "1 курс"), (2, "2 курс")]
    assert courses[0].groups == [
        GroupOption(slug="415-m", name="415-м"),
        GroupOption(slug="415-1", name="415-1"),
    ]
    assert [g.slug for g in courses[1].groups] == ["425-m"]


def test_parse_groups_ignores_other_links():
    html = '<a href="/faculties/fsu">ФСУ</a><a href="/faculties/fsu/groups/g1">g1</a>'
    assert parse_groups(html) == [GroupOption(slug="g1", name="g1")]


def test_extract_stylesheet_url():
    assert (
        extract_stylesheet_url(FACULTIES_HTML)
        == "https://timetable.tusur.ru/assets/application-9f8e7d.css"
    )
    assert extract_stylesheet_url("<html></html>") is None


def test_logo_priority():
    logos = parse_faculty_logos(LOGOS_CSS)
    assert logos == {
        "fsu": "https://timetable.tusur.ru/assets/faculties_logo/logo_fsu-ff00aa.svg",
        "rtf": "https://timetable.tusur.ru/assets/logo_rtf-beef01.png",
    }


def test_bw_logo_used_when_it_is_the_only_one():
    css = "a{background:url(/assets/logo_fb_bw-abc123.svg)}"
    assert parse_faculty_logos(css) == {"fb": "https://timetable.tusur.ru/assets/logo_fb_bw-abc123.svg"}


def test_photos_first_match_wins():
    assert parse_faculty_photos(PHOTOS_HTML) == {
        "fsu": "https://tusur.ru/assets/faculties/fsu-1234abcd.jpg"
    }
