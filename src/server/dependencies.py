"""Request-scoped dependencies resolved from application state."""

from __future__ import annotations

from fastapi import Request

from cftranscoder import FragmentsClient, TranscodeContext


def get_context(request: Request) -> TranscodeContext:
    return request.app.state.context


def get_fragments_client(request: Request) -> FragmentsClient:
    return request.app.state.fragments_client
