"""Extract the canonical page tree from HTML structural events.

The grammar is positional, using child combinators only::

    main>div                       Section
    main>div>h1..h6                Title
    main>div>p                     Paragraph
    main>div>img[src]              Image
    main>div>div[class]            Block
    Block>div                      BlockRow
    BlockRow>div                   BlockColumn

Anything else is ignored. The extractor is permissive: malformed nesting is a
no-op, never an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Union

from cftranscoder.html_events import (
    EnterEvent,
    HtmlEvent,
    LeaveEvent,
    TextEvent,
    iter_html_events,
)
from cftranscoder.schemas import (
    Block,
    BlockColumn,
    BlockRow,
    Image,
    Page,
    Paragraph,
    Section,
    Title,
    TitleLevel,
)

_HEADING_RE = re.compile(r"^h[1-6]$")
_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

_BoundNode = Union[Section, Title, Paragraph, Image, Block, BlockRow, BlockColumn]


@dataclass
class _OpenElement:
    tag: str
    node: _BoundNode | None = None


@dataclass
class _ExtractorState:
    """Cursors for the most recently opened node at each nesting level."""

    page: Page
    current_section: Section | None = None
    current_leaf: Title | Paragraph | Image | Block | None = None
    current_row: BlockRow | None = None
    current_column: BlockColumn | None = None
    open_elements: list[_OpenElement] = field(default_factory=list)


class StructuralExtractor:
    """Build a ``Page`` from enter/text/leave calls.

    One extractor serves exactly one parse; its state is never shared.
    """

    def __init__(self) -> None:
        self._state = _ExtractorState(page=Page())

    @property
    def page(self) -> Page:
        return self._state.page

    def enter(self, tag: str, attrs: dict[str, str] | None = None) -> None:
        tag = tag.lower()
        attrs = attrs or {}
        stack = self._state.open_elements
        parent = stack[-1] if stack else None
        node = self._open_node(tag, attrs, parent)
        if tag not in _VOID_TAGS:
            stack.append(_OpenElement(tag=tag, node=node))

    def leave(self, tag: str) -> None:
        tag = tag.lower()
        stack = self._state.open_elements
        for index in range(len(stack) - 1, -1, -1):
            if stack[index].tag == tag:
                # Closing an outer element implicitly closes everything inside it
                del stack[index:]
                return

    def text(self, content: str) -> None:
        """Overwrite the text of the deepest open text-bearing node.

        Blank text is ignored. Repeated non-blank text for the same node
        replaces the previous value.
        """
        stripped = content.strip()
        if not stripped:
            return
        for element in reversed(self._state.open_elements):
            node = element.node
            if node is None:
                continue
            if isinstance(node, Paragraph):
                node.text = f"<p>{stripped}</p>"
            elif isinstance(node, (Title, BlockColumn)):
                node.text = stripped
            return

    def _open_node(
        self, tag: str, attrs: dict[str, str], parent: _OpenElement | None
    ) -> _BoundNode | None:
        if parent is None:
            return None
        state = self._state
        parent_node = parent.node

        if parent_node is None:
            if tag == "div" and parent.tag == "main":
                section = Section()
                state.page.sections.append(section)
                state.current_section = section
                state.current_leaf = None
                state.current_row = None
                state.current_column = None
                return section
            return None

        if isinstance(parent_node, Section) and state.current_section is not None:
            leaf = _section_child(tag, attrs)
            if leaf is None:
                return None
            state.current_section.children.append(leaf)
            state.current_leaf = leaf
            state.current_row = None
            state.current_column = None
            return leaf

        if tag != "div":
            return None

        if isinstance(parent_node, Block) and isinstance(state.current_leaf, Block):
            row = BlockRow()
            state.current_leaf.rows.append(row)
            state.current_row = row
            state.current_column = None
            return row

        if isinstance(parent_node, BlockRow) and state.current_row is not None:
            column = BlockColumn()
            state.current_row.columns.append(column)
            state.current_column = column
            return column

        return None


def _section_child(tag: str, attrs: dict[str, str]) -> Title | Paragraph | Image | Block | None:
    if _HEADING_RE.match(tag):
        return Title(level=TitleLevel(tag))
    if tag == "p":
        return Paragraph()
    if tag == "img" and attrs.get("src"):
        return Image(path=attrs["src"])
    if tag == "div" and "class" in attrs:
        return Block(name=attrs["class"])
    return None


def parse_html(events: Iterable[HtmlEvent]) -> Page:
    """Feed structural events through a fresh extractor and return the page."""
    extractor = StructuralExtractor()
    for event in events:
        if isinstance(event, EnterEvent):
            extractor.enter(event.tag, event.attrs)
        elif isinstance(event, TextEvent):
            extractor.text(event.content)
        elif isinstance(event, LeaveEvent):
            extractor.leave(event.tag)
    return extractor.page


def parse_page_html(html: str) -> Page:
    """Parse an HTML document into a ``Page``."""
    return parse_html(iter_html_events(html))
