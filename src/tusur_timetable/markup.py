"""Small text-level helpers over raw HTML: entity decoding, tag stripping,
attribute lookup and link extraction.

These work on fragments cut out by the page parsers and never build a tree.
"""

import html
import re
from urllib.parse import urljoin

from tusur_timetable.config import DEFAULT_TIMETABLE_URL
from tusur_timetable.models import ResourceLink

_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_LINK = re.compile(
    r"""<a[^>]*href=['"]([^'"]+)['"][^>]*>(.*?)</a>""", re.IGNORECASE | re.DOTALL
)


def decode_entities(text: str) -> str:
    """Decode named and numeric character references.

    Non-breaking spaces come back as plain spaces.
    """
    if not text or "&" not in text:
        return text
    return html.unescape(text).replace("\xa0", " ")


def strip_html(fragment: str) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    text = decode_entities(_TAG.sub(" ", fragment or ""))
    return _WHITESPACE.sub(" ", text).strip()


def resolve_url(path: str, base: str = DEFAULT_TIMETABLE_URL) -> str:
    return urljoin(base if base.endswith("/") else base + "/", decode_entities(path))


def extract_attribute(tag: str, name: str) -> str | None:
    match = re.search(
        rf"""(?<![\w-]){re.escape(name)}=['"]([^'"]*)['"]""", tag, re.IGNORECASE
    )
    return match.group(1) if match else None


def extract_paragraph_content(fragment: str, label: str) -> str | None:
    """HTML following a bold ``label:`` up to the closing ``</p>``."""
    pattern = re.compile(
        rf"<(strong|b)>\s*{re.escape(label)}:\s*</\1>(.*?)</p>",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(fragment)
    return match.group(2) if match else None


def extract_links(
    fragment: str | None, base: str = DEFAULT_TIMETABLE_URL
) -> list[ResourceLink]:
    """All labelled links in a fragment, de-duplicated by (label, url).

    Relative hrefs are resolved against ``base``; anchors with an empty
    label are skipped.
    """
    if not fragment:
        return []

    links: list[ResourceLink] = []
    seen: set[tuple[str, str]] = set()
    for href, inner in _LINK.findall(fragment):
        label = strip_html(inner)
        if not label:
            continue
        url = resolve_url(href, base)
        if (label, url) in seen:
            continue
        seen.add((label, url))
        links.append(ResourceLink(label=label, url=url))
    return links
