"""Read and write pipelines for page transcoding."""

from __future__ import annotations

import logging

from cftranscoder.builder import FragmentStore, build_fragment_graph
from cftranscoder.config import DEFAULT_MODEL_ROOT
from cftranscoder.exceptions import NotFoundError
from cftranscoder.html_parser import parse_page_html
from cftranscoder.renderer import render_html
from cftranscoder.resolver import Dereference, resolve_fragment
from cftranscoder.schemas import NodeKind, Reference, TranscodeContext

logger = logging.getLogger(__name__)


async def resolve_and_render(
    root_reference: Reference,
    dereference: Dereference,
    author_base: str,
    *,
    model_root: str = DEFAULT_MODEL_ROOT,
) -> str:
    """Fetch the page fragment at ``root_reference`` and render it as HTML.

    Raises:
        NotFoundError: If the reference is missing or is not a page fragment.
        TransportError: If any fragment of the page cannot be fetched.
        UnsupportedNodeKindError: If the graph holds an unknown fragment model.
    """
    record = await dereference(root_reference)
    if record.model_path is None:
        raise NotFoundError(f"{root_reference} is not a content fragment")
    if record.kind_in(model_root) is not NodeKind.PAGE:
        raise NotFoundError(f"{root_reference} is not a page fragment")

    page = await resolve_fragment(record, dereference, model_root=model_root)
    logger.info(
        "Rendering page",
        extra={"reference": root_reference, "sections": len(page.sections)},
    )
    return render_html(page, author_base)


async def import_page_html(
    html: str,
    store: FragmentStore,
    context: TranscodeContext,
    *,
    root_path: str | None = None,
) -> Reference:
    """Parse ``html`` and write it as a fragment graph.

    With ``root_path`` the existing page fragment there is updated; otherwise a
    new page fragment is created.
    """
    page = parse_page_html(html)
    logger.info(
        "Importing page",
        extra={"root_path": root_path, "sections": len(page.sections)},
    )
    return await build_fragment_graph(page, store, context, root_path=root_path)
