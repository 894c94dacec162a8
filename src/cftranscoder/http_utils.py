"""HTTP utilities for reading from the fragment API with retry logic."""

from __future__ import annotations

import asyncio
from typing import Any, Final, Mapping

import httpx

from cftranscoder.config import (
    CFT_FETCH_BACKOFF_S,
    CFT_FETCH_MAX_RETRIES,
    CFT_FETCH_TIMEOUT_S,
    CFT_USER_AGENT,
)
from cftranscoder.exceptions import NotFoundError, TransportError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


def build_client(*, headers: Mapping[str, str] | None = None) -> httpx.AsyncClient:
    """Create the shared async client used for fragment API calls."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(CFT_FETCH_TIMEOUT_S),
        headers={"User-Agent": CFT_USER_AGENT, **(headers or {})},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    )


async def get_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
    on_404_message: str | None = None,
) -> httpx.Response:
    """GET a URL, retrying transient failures.

    Only reads go through here; writes are never retried.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        headers: Extra request headers, e.g. authorization.
        params: Query string parameters.
        on_404_message: Custom error message for 404 responses. If None,
            a generic message is used.

    Returns:
        The successful response.

    Raises:
        NotFoundError: If the resource does not exist.
        TransportError: If the fetch fails after all retries.
    """
    last_exc: Exception | None = None

    async def do_fetch(http_client: httpx.AsyncClient) -> httpx.Response:
        nonlocal last_exc

        for attempt in range(CFT_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.get(url, headers=headers, params=params)

                if response.status_code == 404:
                    raise NotFoundError(on_404_message or f"Resource not found at {url}")

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = TransportError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return response
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < CFT_FETCH_MAX_RETRIES:
                backoff = CFT_FETCH_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        raise TransportError(f"Failed to fetch {url}: {last_exc}")

    if client is not None:
        return await do_fetch(client)

    async with build_client() as new_client:
        return await do_fetch(new_client)


def response_json(response: httpx.Response) -> Any:
    """Decode a JSON body, reporting malformed bodies as transport failures."""
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(f"Invalid JSON from {response.request.url}: {exc}") from exc
