"""Fragment API client backing the dereference and store capabilities."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cftranscoder.exceptions import (
    NotFoundError,
    RejectedPayloadError,
    TransportError,
    VersionConflictError,
)
from cftranscoder.http_utils import build_client, get_with_retries, response_json
from cftranscoder.schemas import (
    FragmentPayload,
    FragmentRecord,
    NodeKind,
    Reference,
    TranscodeContext,
)

logger = logging.getLogger(__name__)

DAM_ROOT = "/content/dam"
FRAGMENTS_ENDPOINT = "/adobe/sites/cf/fragments"
ASSETS_ENDPOINT = "/api/assets"

_REJECTED_STATUS_CODES = frozenset({400, 422})


class FragmentsClient:
    """Read and write content fragments on an author instance.

    ``dereference`` retries transient read failures. Create and update calls
    are sent once; deciding to retry them is left to the caller.

    Usage::

        async with FragmentsClient(TranscodeContext.from_config()) as client:
            record = await client.dereference("/content/dam/site/index")
    """

    def __init__(
        self, context: TranscodeContext, *, client: httpx.AsyncClient | None = None
    ) -> None:
        self._context = context
        self._owns_client = client is None
        self._client = client or build_client()

    async def __aenter__(self) -> FragmentsClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self._context.author_base.rstrip('/')}{path}"

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {"X-Aem-Affinity-Type": "api", **extra}
        if self._context.token:
            headers["Authorization"] = f"Bearer {self._context.token}"
        return headers

    async def dereference(self, reference: Reference) -> FragmentRecord:
        """Fetch the fragment record stored at ``reference``.

        Raises:
            NotFoundError: If nothing is stored at ``reference``.
            TransportError: If the fetch fails after retries.
        """
        asset_path = reference
        if asset_path.startswith(DAM_ROOT):
            asset_path = asset_path[len(DAM_ROOT):]
        url = self._url(f"{ASSETS_ENDPOINT}{asset_path}.json")
        logger.debug("Dereferencing fragment", extra={"url": url})

        response = await get_with_retries(
            url,
            client=self._client,
            headers=self._headers(),
            on_404_message=f"No fragment found at {reference}",
        )
        data = response_json(response)
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected asset response for {reference}")
        return FragmentRecord.from_asset_json(data, path=reference)

    async def create_fragment(self, kind: NodeKind, payload: FragmentPayload) -> Reference:
        response = await self._send(
            "POST",
            self._url(FRAGMENTS_ENDPOINT),
            json=payload.to_json(),
            headers=self._headers(),
        )
        path = _body(response).get("path")
        if not path:
            raise TransportError(f"Created {kind.value} fragment but no path was returned")
        logger.debug("Created fragment", extra={"kind": kind.value, "fragment": path})
        return path

    async def find_fragment_id(self, path: str) -> str:
        response = await get_with_retries(
            self._url(FRAGMENTS_ENDPOINT),
            client=self._client,
            headers=self._headers(),
            params={"path": path},
            on_404_message=f"No fragment found at {path}",
        )
        items = _body(response).get("items") or []
        if not items or not items[0].get("id"):
            raise NotFoundError(f"No fragment found at {path}")
        return items[0]["id"]

    async def fetch_version_tag(self, fragment_id: str) -> str:
        response = await get_with_retries(
            self._url(f"{FRAGMENTS_ENDPOINT}/{fragment_id}"),
            client=self._client,
            headers=self._headers(),
            on_404_message=f"Fragment {fragment_id} not found",
        )
        etag = response.headers.get("ETag")
        if not etag:
            raise TransportError(f"Fragment {fragment_id} has no ETag")
        return etag

    async def update_fragment(
        self, fragment_id: str, payload: FragmentPayload, version_tag: str
    ) -> Reference:
        body = payload.to_json()
        response = await self._send(
            "PUT",
            self._url(f"{FRAGMENTS_ENDPOINT}/{fragment_id}"),
            json={"title": body["title"], "fields": body["fields"]},
            headers=self._headers(**{"If-Match": version_tag}),
        )
        return _body(response).get("path") or fragment_id

    async def _send(
        self, method: str, url: str, *, json: Any, headers: dict[str, str]
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, json=json, headers=headers)
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.is_success:
            return response
        if response.status_code == 412:
            raise VersionConflictError(f"{url} was modified since its version tag was read")
        if response.status_code in _REJECTED_STATUS_CODES:
            raise RejectedPayloadError(
                f"{method} {url} rejected with HTTP {response.status_code}: {response.text}"
            )
        if response.status_code == 404:
            raise NotFoundError(f"{method} {url} returned 404")
        raise TransportError(f"{method} {url} returned HTTP {response.status_code}")


def _body(response: httpx.Response) -> dict[str, Any]:
    data = response_json(response)
    if not isinstance(data, dict):
        raise TransportError(f"Unexpected response body from {response.request.url}")
    return data
