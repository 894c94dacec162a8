"""Fragment records as read from, and payloads as written to, the fragment API."""

from __future__ import annotations

import base64
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from cftranscoder.config import DEFAULT_MODEL_ROOT
from cftranscoder.schemas.nodes import NodeKind

Reference: TypeAlias = str


class FragmentRecord(BaseModel):
    """A fetched fragment: its model path and flat element values.

    Attributes:
        model_path: Path of the fragment model (``cq:model``) that decides
            which node kind the record decodes to.
        path: Reference the record was fetched from, when known.
        elements: Element name to element value.
    """

    model_config = ConfigDict(protected_namespaces=())

    model_path: str | None = None
    path: str | None = None
    elements: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_asset_json(cls, data: dict[str, Any], *, path: str | None = None) -> FragmentRecord:
        """Build a record from an assets API ``.json`` response."""
        properties = data.get("properties") or {}
        model = properties.get("cq:model") or {}
        elements = {
            name: (element or {}).get("value")
            for name, element in (properties.get("elements") or {}).items()
        }
        return cls(model_path=model.get("path"), path=path, elements=elements)

    @property
    def kind(self) -> NodeKind:
        """Node kind under the default model root."""
        return self.kind_in(DEFAULT_MODEL_ROOT)

    def kind_in(self, model_root: str) -> NodeKind:
        return NodeKind.from_model_path(self.model_path, model_root)

    def value(self, name: str, default: Any = None) -> Any:
        value = self.elements.get(name)
        return default if value is None else value

    def values(self, name: str) -> list[Any]:
        """Return a multi-valued element as a list; single values are wrapped."""
        value = self.elements.get(name)
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]


class FragmentField(BaseModel):
    """One field of a create/update payload."""

    name: str
    type: str
    values: list[str] = Field(default_factory=list)
    multiple: bool | None = None
    mime_type: str | None = Field(default=None, serialization_alias="mimeType")


class FragmentPayload(BaseModel):
    """Create/update body for one fragment."""

    model_config = ConfigDict(protected_namespaces=())

    title: str
    model_id: str = Field(serialization_alias="modelId")
    parent_path: str = Field(serialization_alias="parentPath")
    fields: list[FragmentField] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def field(self, name: str) -> FragmentField | None:
        for item in self.fields:
            if item.name == name:
                return item
        return None


def encode_model_id(model_path: str) -> str:
    """Encode a model path the way the fragment API expects ``modelId``."""
    return base64.b64encode(model_path.encode("utf-8")).decode("ascii")
