"""Resolve a fragment graph into the canonical page tree."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, TypeAlias

from cftranscoder.concurrency import gather_in_order
from cftranscoder.config import DEFAULT_MODEL_ROOT
from cftranscoder.exceptions import UnsupportedNodeKindError
from cftranscoder.schemas import (
    Block,
    BlockColumn,
    BlockRow,
    FragmentRecord,
    Image,
    Node,
    NodeKind,
    Page,
    Paragraph,
    Reference,
    Section,
    Title,
    TitleLevel,
)

logger = logging.getLogger(__name__)

Dereference: TypeAlias = Callable[[Reference], Awaitable[FragmentRecord]]

_SECTION_CHILD_TYPES = (Title, Paragraph, Block, Image)


async def resolve_fragment(
    record: FragmentRecord,
    dereference: Dereference,
    *,
    model_root: str = DEFAULT_MODEL_ROOT,
) -> Node:
    """Decode ``record`` and, recursively, every fragment it references.

    Children of one container are dereferenced concurrently and reassembled in
    reference order. Nothing is cached: a reference that appears twice is
    fetched twice.

    Args:
        record: Already fetched root record.
        dereference: Fetches the record behind a reference.
        model_root: Folder holding the fragment models; records of models
            outside it are rejected.

    Returns:
        The decoded node.

    Raises:
        UnsupportedNodeKindError: If a record has an unknown model, or a
            container references a child of a kind it cannot hold.
        NotFoundError, TransportError: Propagated from ``dereference``; the
            whole resolution is abandoned.
    """
    kind = record.kind_in(model_root)
    logger.debug("Resolving fragment", extra={"kind": kind.value, "fragment": record.path})
    decoder = _DECODERS.get(kind)
    if decoder is None:
        raise UnsupportedNodeKindError(f"No decoder for fragment model {record.model_path}")
    return await decoder(record, dereference, model_root)


async def resolve_reference(
    reference: Reference,
    dereference: Dereference,
    *,
    model_root: str = DEFAULT_MODEL_ROOT,
) -> Node:
    """Dereference ``reference`` and resolve the record behind it."""
    record = await dereference(reference)
    return await resolve_fragment(record, dereference, model_root=model_root)


async def _resolve_children(
    references: Iterable[Reference],
    dereference: Dereference,
    allowed: tuple[type, ...],
    container: NodeKind,
    model_root: str,
) -> list:
    children = await gather_in_order(
        resolve_reference(reference, dereference, model_root=model_root)
        for reference in references
    )
    for child in children:
        if not isinstance(child, allowed):
            raise UnsupportedNodeKindError(
                f"A {container.value} cannot contain a {child.kind.value}"
            )
    return children


async def _decode_page(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Page:
    sections = await _resolve_children(
        record.values("sections"), dereference, (Section,), NodeKind.PAGE, model_root
    )
    return Page(sections=sections)


async def _decode_section(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Section:
    children = await _resolve_children(
        record.values("children"), dereference, _SECTION_CHILD_TYPES, NodeKind.SECTION, model_root
    )
    return Section(children=children)


async def _decode_block(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Block:
    rows = await _resolve_children(
        record.values("rows"), dereference, (BlockRow,), NodeKind.BLOCK, model_root
    )
    return Block(name=record.value("blockName", ""), rows=rows)


async def _decode_block_row(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> BlockRow:
    # Columns are stored inline as HTML values, not as fragment references
    return BlockRow(columns=[BlockColumn(text=text) for text in record.values("columns")])


async def _decode_title(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Title:
    return Title(text=record.value("title", ""), level=_title_level(record))


def _title_level(record: FragmentRecord) -> TitleLevel:
    value = record.value("titleLevel")
    if not value:
        return TitleLevel.H1
    try:
        return TitleLevel(str(value).strip().lower())
    except ValueError:
        logger.warning(
            "Unknown title level, using h1",
            extra={"fragment": record.path, "title_level": value},
        )
        return TitleLevel.H1


async def _decode_paragraph(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Paragraph:
    return Paragraph(text=record.value("paragraph", ""))


async def _decode_image(
    record: FragmentRecord, dereference: Dereference, model_root: str
) -> Image:
    value = record.value("image", "")
    if isinstance(value, dict):
        value = value.get("_path") or value.get("path") or ""
    return Image(path=value)


_DECODERS: dict[NodeKind, Callable[[FragmentRecord, Dereference, str], Awaitable[Node]]] = {
    NodeKind.PAGE: _decode_page,
    NodeKind.SECTION: _decode_section,
    NodeKind.BLOCK: _decode_block,
    NodeKind.BLOCK_ROW: _decode_block_row,
    NodeKind.TITLE: _decode_title,
    NodeKind.PARAGRAPH: _decode_paragraph,
    NodeKind.IMAGE: _decode_image,
}
