"""Page endpoints: render a page fragment graph, or import HTML into one."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from cftranscoder import (
    FragmentsClient,
    NotFoundError,
    RejectedPayloadError,
    TranscodeContext,
    TransportError,
    VersionConflictError,
    import_page_html,
    resolve_and_render,
)
from cftranscoder.fragments_client import DAM_ROOT
from cftranscoder.utils.logging_config import get_logger
from server.dependencies import get_context, get_fragments_client
from server.server_config import HTML_MEDIA_TYPE, INDEX_PAGE_NAME

logger = get_logger(__name__)

router = APIRouter()


def page_reference(page_path: str) -> str:
    """Map a request path to the DAM path of its page fragment.

    A trailing ``/`` addresses the folder's index page.
    """
    path = f"/{page_path}"
    if path.endswith("/"):
        path = f"{path}{INDEX_PAGE_NAME}"
    return f"{DAM_ROOT}{path}"


@router.get("/{page_path:path}", response_class=HTMLResponse)
async def render_page(
    page_path: str,
    client: FragmentsClient = Depends(get_fragments_client),
    context: TranscodeContext = Depends(get_context),
) -> HTMLResponse:
    """Resolve the page fragment behind ``page_path`` and return it as HTML.

    **Raises**

    - **HTTPException**: **404** - no page fragment at this path
    - **HTTPException**: **502** - the fragment API could not be read
    """
    reference = page_reference(page_path)
    try:
        html = await resolve_and_render(
            reference, client.dereference, context.author_base, model_root=context.model_root
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except TransportError as exc:
        logger.warning("Failed to render page", extra={"reference": reference, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return HTMLResponse(html)


@router.api_route("/{page_path:path}", methods=["POST", "PUT"])
async def import_page(
    page_path: str,
    request: Request,
    client: FragmentsClient = Depends(get_fragments_client),
    context: TranscodeContext = Depends(get_context),
) -> JSONResponse:
    """Store an HTML page body as a page fragment graph.

    POST creates a new page fragment. PUT replaces the page fragment at
    ``page_path`` under optimistic concurrency.

    **Raises**

    - **HTTPException**: **415** - body is not ``text/html``
    - **HTTPException**: **404** - PUT to a path with no page fragment
    - **HTTPException**: **409** - the page changed while it was being written
    - **HTTPException**: **422** - the fragment API rejected a payload
    - **HTTPException**: **502** - the fragment API could not be reached
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != HTML_MEDIA_TYPE:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Expected {HTML_MEDIA_TYPE}, got {media_type or 'no content type'}",
        )

    reference = page_reference(page_path)
    root_path = reference if request.method == "PUT" else None
    html = (await request.body()).decode("utf-8", errors="replace")
    try:
        written = await import_page_html(html, client, context, root_path=root_path)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except VersionConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RejectedPayloadError as exc:
        raise HTTPException(
            status_code=422, detail=str(exc)
        ) from exc
    except TransportError as exc:
        logger.warning("Failed to import page", extra={"reference": reference, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return JSONResponse({"path": written})
