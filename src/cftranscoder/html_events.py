"""Turn an HTML document into a stream of structural events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

try:
    from bs4 import BeautifulSoup
    from bs4.element import NavigableString, PreformattedString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


@dataclass(frozen=True)
class EnterEvent:
    """An element was opened."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TextEvent:
    """Character data, HTML-escaped."""

    content: str


@dataclass(frozen=True)
class LeaveEvent:
    """An element was closed."""

    tag: str


HtmlEvent = Union[EnterEvent, TextEvent, LeaveEvent]


def iter_html_events(html: str) -> Iterator[HtmlEvent]:
    """Yield enter/text/leave events for ``html`` in document order.

    Comments, doctypes and other preformatted strings are skipped. Every
    element yields a matching ``LeaveEvent``, including void elements. Text
    content is re-escaped (``&``, ``<``, ``>``) so it stays valid HTML.
    """
    soup = BeautifulSoup(html, "lxml")
    yield from _walk(soup)


def _walk(container: Tag) -> Iterator[HtmlEvent]:
    for child in container.children:
        if isinstance(child, Tag):
            yield EnterEvent(tag=child.name, attrs=_attributes(child))
            yield from _walk(child)
            yield LeaveEvent(tag=child.name)
        elif isinstance(child, PreformattedString):
            continue
        elif isinstance(child, NavigableString):
            # Keep character references escaped; text lands in HTML-valued fields
            yield TextEvent(content=child.output_ready(formatter="minimal"))


def _attributes(tag: Tag) -> dict[str, str]:
    # bs4 exposes multi-valued attributes such as class as lists
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            attrs[name] = " ".join(value)
        else:
            attrs[name] = str(value)
    return attrs
