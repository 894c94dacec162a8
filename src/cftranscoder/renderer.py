"""Render the canonical page tree to HTML."""

from __future__ import annotations

from typing import Callable

from cftranscoder.exceptions import UnsupportedNodeKindError
from cftranscoder.schemas import (
    Block,
    BlockColumn,
    BlockRow,
    Image,
    Node,
    NodeKind,
    Page,
    Paragraph,
    Section,
    Title,
)

_DAM_SRC = 'src="/content/dam'


def rewrite_asset_links(html: str, author_base: str) -> str:
    """Point root-relative DAM ``src`` attributes at the author instance.

    Applying the rewrite twice gives the same result as applying it once.
    """
    if not author_base:
        return html
    return html.replace(_DAM_SRC, f'src="{author_base.rstrip("/")}/content/dam')


def render_html(node: Node, author_base: str = "") -> str:
    """Render ``node`` and its subtree.

    Raw HTML fields (paragraph bodies and block columns) pass through
    ``rewrite_asset_links`` before they are emitted.

    Raises:
        UnsupportedNodeKindError: If ``node`` is not a known node variant.
    """
    renderer = _RENDERERS.get(getattr(node, "kind", None))
    if renderer is None:
        raise UnsupportedNodeKindError(f"Cannot render node: {node!r}")
    return renderer(node, author_base)


def _render_page(node: Page, author_base: str) -> str:
    sections = "".join(render_html(section, author_base) for section in node.sections)
    return f"<body><header></header><main>{sections}</main><footer></footer></body>"


def _render_section(node: Section, author_base: str) -> str:
    children = "".join(render_html(child, author_base) for child in node.children)
    return f"<div>{children}</div>"


def _render_title(node: Title, author_base: str) -> str:
    level = node.level.value if node.level else "h1"
    return f"<{level}>{node.text}</{level}>"


def _render_paragraph(node: Paragraph, author_base: str) -> str:
    return rewrite_asset_links(node.text, author_base)


def _render_block(node: Block, author_base: str) -> str:
    rows = "".join(render_html(row, author_base) for row in node.rows)
    return f'<div class="{node.name}">{rows}</div>'


def _render_block_row(node: BlockRow, author_base: str) -> str:
    columns = "".join(
        f"<div>{render_html(column, author_base)}</div>" for column in node.columns
    )
    return f"<div>{columns}</div>"


def _render_block_column(node: BlockColumn, author_base: str) -> str:
    return rewrite_asset_links(node.text, author_base)


def _render_image(node: Image, author_base: str) -> str:
    src = node.path
    if src.startswith("/"):
        src = f"{author_base.rstrip('/')}{src}"
    return f'<img src="{src}">'


_RENDERERS: dict[NodeKind, Callable[..., str]] = {
    NodeKind.PAGE: _render_page,
    NodeKind.SECTION: _render_section,
    NodeKind.TITLE: _render_title,
    NodeKind.PARAGRAPH: _render_paragraph,
    NodeKind.BLOCK: _render_block,
    NodeKind.BLOCK_ROW: _render_block_row,
    NodeKind.BLOCK_COLUMN: _render_block_column,
    NodeKind.IMAGE: _render_image,
}
