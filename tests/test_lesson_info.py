from samples import modal
from tusur_timetable.models import ResourceLink
from tusur_timetable.pages.lesson_info import parse_lesson_info


def test_parses_links_url_and_groups():
    html = modal(
        "1201",
        links_url="/courses/55/links.json",
        groups='<a href="/faculties/fsu/groups/425-m">425-м</a>',
        joint='<a href="/faculties/fsu/groups/425-1">425-1</a>',
    )
    info = parse_lesson_info(html)["1201"]

    assert info.course_links_url == "https://timetable.tusur.ru/courses/55/links.json"
    assert info.group_links == [
        ResourceLink(label="425-м", url="https://timetable.tusur.ru/faculties/fsu/groups/425-m")
    ]
    assert [link.label for link in info.joint_group_links] == ["425-1"]


def test_singular_group_label():
    html = (
        '<div id="js-lesson-info-5"><noindex>'
        "<p><strong>Группа:</strong> <a href='/faculties/rtf/groups/111'>111</a></p>"
        "</noindex></div>"
    )
    info = parse_lesson_info(html)["5"]
    assert [link.label for link in info.group_links] == ["111"]
    assert info.joint_group_links == []
    assert info.course_links_url is None


def test_first_modal_per_id_wins():
    html = modal("7", links_url="/first") + modal("7", links_url="/second")
    assert parse_lesson_info(html)["7"].course_links_url == "https://timetable.tusur.ru/first"


def test_unterminated_modal_does_not_leak_into_next():
    html = modal("1", groups="<a href='/g/a'>A</a>", close=False) + modal(
        "2", joint="<a href='/g/b'>B</a>"
    )
    result = parse_lesson_info(html)

    assert set(result) == {"1", "2"}
    assert result["1"].joint_group_links == []
    assert [link.label for link in result["2"].joint_group_links] == ["B"]


def test_modal_ends_at_noindex():
    html = modal("3") + "<p><strong>Совместно с группами:</strong> <a href='/g/x'>X</a></p>"
    assert parse_lesson_info(html)["3"].joint_group_links == []


def test_page_without_modals():
    assert parse_lesson_info("<html></html>") == {}
    assert parse_lesson_info("") == {}
