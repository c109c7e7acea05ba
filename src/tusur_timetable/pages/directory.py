"""Faculty / course / group listings and faculty imagery.

Three unrelated sources are merged by faculty slug:
  /faculties                  <h1>Список факультетов</h1><ul> a[href=/faculties/{slug}]
  /faculties/{slug}           <h2>N курс</h2> followed by group anchors
  application-{hash}.css      /assets/[faculties_logo/]logo_{slug}[_bw]-{hash}.{svg|png|jpg}
  university faculties page   /assets/faculties/{slug}-{hash}.{jpg|jpeg|png}
"""

import re

from tusur_timetable.config import DEFAULT_TIMETABLE_URL, DEFAULT_UNIVERSITY_URL
from tusur_timetable.markup import decode_entities, resolve_url
from tusur_timetable.models import CourseOption, FacultyOption, GroupOption

_FLAGS = re.IGNORECASE | re.DOTALL

FACULTY_LIST = re.compile(r"<h1[^>]*>\s*Список факультетов\s*</h1>(.*?)</ul>", _FLAGS)
FACULTY_LINK = re.compile(
    r"""<a\s+href=['"]/faculties/([^'"/]+)['"][^>]*>([^<]+)</a>""", _FLAGS
)
COURSE_SECTION = re.compile(
    r"<h2[^>]*>\s*(\d+)\s*курс\s*</h2>(.*?)(?=<h2|</div>|$)", _FLAGS
)
GROUP_LINK = re.compile(
    r"""<a\s+href=['"]/faculties/[^/'"]+/groups/([^'"]+)['"][^>]*>([^<]+)</a>""",
    _FLAGS,
)
STYLESHEET = re.compile(
    r"""<link[^>]+href=['"]([^'"]*application-[^'"]+\.css)['"][^>]*>""", _FLAGS
)
LOGO_ASSET = re.compile(
    r"/assets/(?:faculties_logo/)?logo_([a-z0-9]+)(?:_bw)?-[a-f0-9]+\.(?:svg|png|jpg)",
    re.IGNORECASE,
)
PHOTO_ASSET = re.compile(
    r"/assets/faculties/([a-z0-9]+)-[a-f0-9]+\.(?:jpg|jpeg|png)", re.IGNORECASE
)


def parse_faculties(
    html: str,
    logos: dict[str, str] | None = None,
    photos: dict[str, str] | None = None,
) -> list[FacultyOption]:
    """Faculties from the index page; image is the photo, else the logo."""
    logos = logos or {}
    photos = photos or {}
    listing = FACULTY_LIST.search(html or "")
    if listing is None:
        return []

    faculties = []
    for slug, name in FACULTY_LINK.findall(listing.group(1)):
        faculties.append(
            FacultyOption(
                slug=slug,
                name=decode_entities(name.strip()),
                image_url=photos.get(slug) or logos.get(slug),
            )
        )
    return faculties


def parse_groups(html: str) -> list[GroupOption]:
    return [
        GroupOption(slug=slug, name=decode_entities(name.strip()))
        for slug, name in GROUP_LINK.findall(html or "")
    ]


def parse_faculty_courses(html: str) -> list[CourseOption]:
    """Courses of a faculty page. Courses without groups are left out."""
    courses = []
    for number, section in COURSE_SECTION.findall(html or ""):
        groups = parse_groups(section)
        if groups:
            courses.append(
                CourseOption(number=int(number), name=f"{int(number)} курс", groups=groups)
            )
    return courses


def extract_stylesheet_url(html: str, base_url: str = DEFAULT_TIMETABLE_URL) -> str | None:
    match = STYLESHEET.search(html or "")
    return resolve_url(match.group(1), base_url) if match else None


def _logo_priority(path: str) -> int:
    if "faculties_logo/" in path:
        return 2
    if "_bw-" in path:
        return 0
    return 1


def parse_faculty_logos(css: str, base_url: str = DEFAULT_TIMETABLE_URL) -> dict[str, str]:
    """slug -> logo URL, preferring faculties_logo/ and colour variants."""
    best: dict[str, tuple[int, str]] = {}
    for match in LOGO_ASSET.finditer(css or ""):
        slug, path = match.group(1), match.group(0)
        priority = _logo_priority(path)
        current = best.get(slug)
        if current is None or priority > current[0]:
            best[slug] = (priority, resolve_url(path, base_url))
    return {slug: url for slug, (_, url) in best.items()}


def parse_faculty_photos(
    html: str, base_url: str = DEFAULT_UNIVERSITY_URL
) -> dict[str, str]:
    """slug -> photo URL; the first asset per slug wins."""
    photos: dict[str, str] = {}
    for match in PHOTO_ASSET.finditer(html or ""):
        photos.setdefault(match.group(1), resolve_url(match.group(0), base_url))
    return photos
