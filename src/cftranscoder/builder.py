"""Write the canonical page tree as a graph of content fragments.

Writes happen bottom-up: every child of a container is written first, so its
reference can be embedded in the container's payload. Siblings are written
concurrently. A failed child prevents its parent from being written; already
written siblings are not rolled back.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Callable, Protocol, Sequence

from cftranscoder.concurrency import gather_in_order
from cftranscoder.exceptions import UnsupportedNodeKindError
from cftranscoder.schemas import (
    Block,
    BlockRow,
    FragmentField,
    FragmentPayload,
    Image,
    Node,
    NodeKind,
    Page,
    Paragraph,
    Reference,
    Section,
    Title,
    TranscodeContext,
    encode_model_id,
)

logger = logging.getLogger(__name__)

_HTML_MIME_TYPE = "text/html"


class FragmentStore(Protocol):
    """Write side of the fragment API."""

    async def create_fragment(self, kind: NodeKind, payload: FragmentPayload) -> Reference:
        """Create one fragment and return its reference."""
        ...

    async def find_fragment_id(self, path: str) -> str:
        """Look up the ID of the fragment stored at ``path``."""
        ...

    async def fetch_version_tag(self, fragment_id: str) -> str:
        """Return the current version tag (ETag) of a fragment."""
        ...

    async def update_fragment(
        self, fragment_id: str, payload: FragmentPayload, version_tag: str
    ) -> Reference:
        """Replace a fragment's content if its version tag still matches."""
        ...


class BuildState(str, Enum):
    """Lifecycle of one node during a build."""

    PENDING = "pending"
    CHILDREN_BUILDING = "children-building"
    SELF_WRITING = "self-writing"
    DONE = "done"
    FAILED = "failed"


async def build_fragment_graph(
    node: Node,
    store: FragmentStore,
    context: TranscodeContext,
    *,
    root_path: str | None = None,
) -> Reference:
    """Write ``node`` and its subtree, returning the reference of ``node``.

    Args:
        node: Root of the subtree to write.
        store: Fragment API write capability.
        context: Naming prefix, target folder and model root.
        root_path: Path of an existing page fragment. When ``node`` is a
            ``Page`` and this is given, the page is updated in place under
            optimistic concurrency instead of being created.

    Returns:
        Reference of the written root fragment.

    Raises:
        UnsupportedNodeKindError: If the tree holds a node that cannot be
            stored as a fragment.
        VersionConflictError: If the root page changed between reading its
            version tag and updating it.
        RejectedPayloadError, TransportError, NotFoundError: Propagated from
            ``store`` without retrying.
    """
    return await _build_node(node, store, context, root_path=root_path)


async def _build_node(
    node: Node,
    store: FragmentStore,
    context: TranscodeContext,
    *,
    root_path: str | None = None,
) -> Reference:
    kind = getattr(node, "kind", None)
    rule = _RULES.get(kind)
    if rule is None:
        raise UnsupportedNodeKindError(f"Cannot store node as a fragment: {node!r}")
    children_of, fields_of = rule

    try:
        _log_state(kind, BuildState.CHILDREN_BUILDING)
        child_references = await gather_in_order(
            _build_node(child, store, context) for child in children_of(node)
        )

        _log_state(kind, BuildState.SELF_WRITING)
        payload = FragmentPayload(
            title=_fragment_title(context, kind),
            model_id=encode_model_id(kind.model_path(context.model_root)),
            parent_path=context.parent_path,
            fields=fields_of(node, child_references),
        )
        if kind is NodeKind.PAGE and root_path:
            reference = await _update_root(store, root_path, payload)
        else:
            reference = await store.create_fragment(kind, payload)
    except Exception:
        _log_state(kind, BuildState.FAILED)
        raise

    _log_state(kind, BuildState.DONE)
    return reference


async def _update_root(store: FragmentStore, root_path: str, payload: FragmentPayload) -> Reference:
    fragment_id = await store.find_fragment_id(root_path)
    version_tag = await store.fetch_version_tag(fragment_id)
    logger.info(
        "Updating page fragment",
        extra={"root_path": root_path, "fragment_id": fragment_id, "version_tag": version_tag},
    )
    return await store.update_fragment(fragment_id, payload, version_tag)


def _log_state(kind: NodeKind, state: BuildState) -> None:
    logger.debug("Build state changed", extra={"kind": kind.value, "state": state.value})


def _fragment_title(context: TranscodeContext, kind: NodeKind) -> str:
    return f"{context.prefix}-{kind.value}-{uuid.uuid4().hex[:8]}"


def _reference_field(name: str, references: Sequence[Reference]) -> FragmentField:
    return FragmentField(
        name=name,
        type="content-fragment",
        multiple=len(references) > 0,
        values=list(references),
    )


def _page_fields(node: Page, references: Sequence[Reference]) -> list[FragmentField]:
    return [_reference_field("sections", references)]


def _section_fields(node: Section, references: Sequence[Reference]) -> list[FragmentField]:
    return [_reference_field("children", references)]


def _block_fields(node: Block, references: Sequence[Reference]) -> list[FragmentField]:
    return [
        FragmentField(name="blockName", type="text", multiple=False, values=[node.name]),
        _reference_field("rows", references),
    ]


def _block_row_fields(node: BlockRow, references: Sequence[Reference]) -> list[FragmentField]:
    return [
        FragmentField(
            name="columns",
            type="long-text",
            mime_type=_HTML_MIME_TYPE,
            multiple=len(node.columns) > 0,
            values=[column.text for column in node.columns],
        )
    ]


def _title_fields(node: Title, references: Sequence[Reference]) -> list[FragmentField]:
    return [
        FragmentField(name="title", type="text", values=[node.text]),
        FragmentField(name="titleLevel", type="enumeration", values=[node.level.value]),
    ]


def _paragraph_fields(node: Paragraph, references: Sequence[Reference]) -> list[FragmentField]:
    return [
        FragmentField(
            name="paragraph", type="long-text", mime_type=_HTML_MIME_TYPE, values=[node.text]
        )
    ]


def _image_fields(node: Image, references: Sequence[Reference]) -> list[FragmentField]:
    return [FragmentField(name="image", type="content-reference", values=[node.path])]


def _no_children(node: Node) -> list[Node]:
    return []


_Rule = tuple[
    Callable[[Node], Sequence[Node]],
    Callable[[Node, Sequence[Reference]], list[FragmentField]],
]

# Block rows carry their columns inline, so they have no child fragments.
_RULES: dict[NodeKind, _Rule] = {
    NodeKind.PAGE: (lambda node: node.sections, _page_fields),
    NodeKind.SECTION: (lambda node: node.children, _section_fields),
    NodeKind.BLOCK: (lambda node: node.rows, _block_fields),
    NodeKind.BLOCK_ROW: (_no_children, _block_row_fields),
    NodeKind.TITLE: (_no_children, _title_fields),
    NodeKind.PARAGRAPH: (_no_children, _paragraph_fields),
    NodeKind.IMAGE: (_no_children, _image_fields),
}
