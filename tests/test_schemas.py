"""Tests for node kinds, payloads and the transcode context."""

from __future__ import annotations

import base64

import pytest
from pydantic import ValidationError

from cftranscoder.exceptions import UnsupportedNodeKindError
from cftranscoder.schemas import (
    FragmentField,
    FragmentPayload,
    NodeKind,
    Section,
    TranscodeContext,
    encode_model_id,
)


class TestNodeKind:
    """Tests for mapping node kinds to fragment models."""

    def test_model_path(self) -> None:
        assert NodeKind.BLOCK_ROW.model_path("/conf/site/models/") == "/conf/site/models/block-row"

    def test_from_model_path_under_custom_root(self) -> None:
        assert NodeKind.from_model_path("/conf/site/models/section/", "/conf/site/models") is NodeKind.SECTION

    def test_from_model_path_rejects_foreign_root(self) -> None:
        """Only the last segment matching is not enough."""
        with pytest.raises(UnsupportedNodeKindError):
            NodeKind.from_model_path("/conf/other/models/page")

    @pytest.mark.parametrize("model_path", [None, "", "/conf/models/carousel", "/conf/models/block-column"])
    def test_unsupported_models(self, model_path: str | None) -> None:
        with pytest.raises(UnsupportedNodeKindError):
            NodeKind.from_model_path(model_path)

    def test_block_column_has_no_model(self) -> None:
        with pytest.raises(UnsupportedNodeKindError):
            NodeKind.BLOCK_COLUMN.model_path()


class TestSectionChildren:
    """Tests for the section child union."""

    def test_validates_from_dicts_by_kind(self) -> None:
        section = Section.model_validate(
            {"children": [{"kind": "title", "text": "Hi"}, {"kind": "image", "path": "/a.png"}]}
        )
        assert [child.kind for child in section.children] == [NodeKind.TITLE, NodeKind.IMAGE]

    def test_rejects_rows_as_section_children(self) -> None:
        with pytest.raises(ValidationError):
            Section.model_validate({"children": [{"kind": "block-row"}]})


class TestFragmentPayload:
    """Tests for payload serialization."""

    def test_to_json_uses_api_field_names(self) -> None:
        payload = FragmentPayload(
            title="t",
            model_id=encode_model_id("/conf/models/paragraph"),
            parent_path="/content/dam/pages",
            fields=[FragmentField(name="paragraph", type="long-text", mime_type="text/html", values=["<p>x</p>"])],
        )

        assert payload.to_json() == {
            "title": "t",
            "modelId": base64.b64encode(b"/conf/models/paragraph").decode(),
            "parentPath": "/content/dam/pages",
            "fields": [
                {"name": "paragraph", "type": "long-text", "mimeType": "text/html", "values": ["<p>x</p>"]}
            ],
        }

    def test_field_lookup(self) -> None:
        payload = FragmentPayload(title="t", model_id="m", parent_path="/p")
        assert payload.field("missing") is None


class TestTranscodeContext:
    """Tests for TranscodeContext."""

    def test_is_immutable(self, context: TranscodeContext) -> None:
        with pytest.raises(ValidationError):
            context.prefix = "other"  # type: ignore[misc]

    def test_token_not_in_repr(self, context: TranscodeContext) -> None:
        assert "secret-token" not in repr(context)

    def test_from_config(self) -> None:
        context = TranscodeContext.from_config()
        assert context.model_root.endswith("models")
        assert not context.author_base.endswith("/")
