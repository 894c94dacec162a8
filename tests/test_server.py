"""Tests for the page endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cftranscoder.exceptions import TransportError
from cftranscoder.schemas import NodeKind
from server.dependencies import get_context, get_fragments_client
from server.main import app
from server.routers.pages import page_reference


@pytest.fixture
def records(record_factory) -> dict:
    return {
        "/content/dam/site/index": record_factory("page", sections=["/s"]),
        "/s": record_factory("section", children=["/t"]),
        "/t": record_factory("title", title="Home"),
        "/content/dam/site/title-only": record_factory("title", title="Loose"),
    }


@pytest.fixture
def make_test_client(context, fragment_source_factory, store_factory):
    """Build a TestClient whose fragments client is an in-memory fake."""

    def _make(records: dict, **kwargs):
        source = fragment_source_factory(records, failures=kwargs.pop("failures", None))
        fake = store_factory(source=source, **kwargs)
        app.dependency_overrides[get_fragments_client] = lambda: fake
        app.dependency_overrides[get_context] = lambda: context
        return TestClient(app), fake

    yield _make
    app.dependency_overrides.clear()


class TestPageReference:
    """Tests for page_reference."""

    def test_trailing_slash_maps_to_index(self) -> None:
        assert page_reference("site/") == "/content/dam/site/index"
        assert page_reference("") == "/content/dam/index"

    def test_plain_path(self) -> None:
        assert page_reference("site/about") == "/content/dam/site/about"


class TestRenderPage:
    """Tests for GET requests."""

    def test_renders_page(self, make_test_client, records) -> None:
        client, _ = make_test_client(records)

        response = client.get("/site/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text == (
            "<body><header></header><main><div><h1>Home</h1></div></main><footer></footer></body>"
        )

    def test_missing_page(self, make_test_client, records) -> None:
        client, _ = make_test_client({})

        response = client.get("/site/missing")

        assert response.status_code == 404

    def test_non_page_fragment(self, make_test_client, records) -> None:
        client, _ = make_test_client(records)

        assert client.get("/site/title-only").status_code == 404

    def test_transport_failure(self, make_test_client, records) -> None:
        client, _ = make_test_client(records, failures={"/t": TransportError("down")})

        assert client.get("/site/").status_code == 502


class TestImportPage:
    """Tests for POST and PUT requests."""

    def test_imports_html(self, make_test_client, records) -> None:
        client, fake = make_test_client(records)

        response = client.put(
            "/site/",
            content="<main><div><h1>New</h1></div></main>",
            headers={"Content-Type": "text/html; charset=utf-8"},
        )

        assert response.status_code == 200
        assert response.json() == {"path": "/content/dam/site/index"}
        assert fake.lookups == ["/content/dam/site/index"]

    def test_post_creates_page(self, make_test_client, records) -> None:
        """POST never looks up or updates an existing page."""
        client, fake = make_test_client(records, missing_pages={"/content/dam/site/new"})

        response = client.post(
            "/site/new",
            content="<main><div><h1>New</h1></div></main>",
            headers={"Content-Type": "text/html"},
        )

        assert response.status_code == 200
        pages = fake.created_of(NodeKind.PAGE)
        assert len(pages) == 1
        assert response.json() == {"path": pages[0][2]}
        assert fake.lookups == []
        assert fake.updates == []

    def test_put_to_missing_page(self, make_test_client, records) -> None:
        client, fake = make_test_client(records, missing_pages={"/content/dam/site/new"})

        response = client.put(
            "/site/new", content="<main></main>", headers={"Content-Type": "text/html"}
        )

        assert response.status_code == 404
        assert fake.updates == []

    def test_version_conflict(self, make_test_client, records) -> None:
        client, _ = make_test_client(records, modify_after_read=True)

        response = client.put(
            "/site/", content="<main></main>", headers={"Content-Type": "text/html"}
        )

        assert response.status_code == 409

    def test_rejects_non_html(self, make_test_client, records) -> None:
        client, fake = make_test_client(records)

        response = client.post("/site/", json={"html": "<main></main>"})

        assert response.status_code == 415
        assert fake.created == []
