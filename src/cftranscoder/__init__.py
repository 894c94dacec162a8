"""cftranscoder: transcode pages between HTML and content fragment graphs."""

from cftranscoder.builder import BuildState, FragmentStore, build_fragment_graph
from cftranscoder.exceptions import (
    CftranscoderError,
    FetchError,
    NotFoundError,
    RejectedPayloadError,
    TransportError,
    UnsupportedNodeKindError,
    VersionConflictError,
    WriteError,
)
from cftranscoder.fragments_client import FragmentsClient
from cftranscoder.html_parser import StructuralExtractor, parse_html, parse_page_html
from cftranscoder.renderer import render_html, rewrite_asset_links
from cftranscoder.resolver import Dereference, resolve_fragment, resolve_reference
from cftranscoder.schemas import FragmentRecord, NodeKind, Page, TranscodeContext
from cftranscoder.transcode import import_page_html, resolve_and_render

__all__ = [
    "BuildState",
    "CftranscoderError",
    "Dereference",
    "FetchError",
    "FragmentRecord",
    "FragmentStore",
    "FragmentsClient",
    "NodeKind",
    "NotFoundError",
    "Page",
    "RejectedPayloadError",
    "StructuralExtractor",
    "TranscodeContext",
    "TransportError",
    "UnsupportedNodeKindError",
    "VersionConflictError",
    "WriteError",
    "build_fragment_graph",
    "import_page_html",
    "parse_html",
    "parse_page_html",
    "render_html",
    "resolve_and_render",
    "resolve_fragment",
    "resolve_reference",
    "rewrite_asset_links",
]
