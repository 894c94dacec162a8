"""Canonical page tree shared by the parser, renderer, resolver and builder."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from cftranscoder.config import DEFAULT_MODEL_ROOT
from cftranscoder.exceptions import UnsupportedNodeKindError


class NodeKind(str, Enum):
    """Closed set of node variants."""

    PAGE = "page"
    SECTION = "section"
    BLOCK = "block"
    BLOCK_ROW = "block-row"
    BLOCK_COLUMN = "block-column"
    TITLE = "title"
    PARAGRAPH = "paragraph"
    IMAGE = "image"

    def model_path(self, model_root: str = DEFAULT_MODEL_ROOT) -> str:
        """Return the fragment model path records of this kind are stored under."""
        if self is NodeKind.BLOCK_COLUMN:
            raise UnsupportedNodeKindError("Block columns are stored inline, not as fragments")
        return f"{model_root.rstrip('/')}/{self.value}"

    @classmethod
    def from_model_path(
        cls, model_path: str | None, model_root: str = DEFAULT_MODEL_ROOT
    ) -> NodeKind:
        """Map a fragment model path under ``model_root`` to its node kind.

        The whole path must match; a model of the same name under another
        root is not one of ours.
        """
        if not model_path:
            raise UnsupportedNodeKindError("Fragment record carries no model path")
        wanted = model_path.rstrip("/")
        for kind in cls:
            if kind is not NodeKind.BLOCK_COLUMN and kind.model_path(model_root) == wanted:
                return kind
        raise UnsupportedNodeKindError(f"Unsupported fragment model: {model_path}")


class TitleLevel(str, Enum):
    """Heading tag used for a title."""

    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"


class BlockColumn(BaseModel):
    """One cell of a block row, holding a raw HTML fragment."""

    kind: Literal[NodeKind.BLOCK_COLUMN] = NodeKind.BLOCK_COLUMN
    text: str = ""


class BlockRow(BaseModel):
    kind: Literal[NodeKind.BLOCK_ROW] = NodeKind.BLOCK_ROW
    columns: list[BlockColumn] = Field(default_factory=list)


class Block(BaseModel):
    """A named block; ``name`` is the CSS class it renders with."""

    kind: Literal[NodeKind.BLOCK] = NodeKind.BLOCK
    name: str
    rows: list[BlockRow] = Field(default_factory=list)


class Title(BaseModel):
    kind: Literal[NodeKind.TITLE] = NodeKind.TITLE
    text: str = ""
    level: TitleLevel = TitleLevel.H1


class Paragraph(BaseModel):
    """Paragraph whose ``text`` is already wrapped in ``<p>``."""

    kind: Literal[NodeKind.PARAGRAPH] = NodeKind.PARAGRAPH
    text: str = ""


class Image(BaseModel):
    kind: Literal[NodeKind.IMAGE] = NodeKind.IMAGE
    path: str


SectionChild = Annotated[
    Union[Title, Paragraph, Block, Image],
    Field(discriminator="kind"),
]


class Section(BaseModel):
    kind: Literal[NodeKind.SECTION] = NodeKind.SECTION
    children: list[SectionChild] = Field(default_factory=list)


class Page(BaseModel):
    """Root of the tree."""

    kind: Literal[NodeKind.PAGE] = NodeKind.PAGE
    sections: list[Section] = Field(default_factory=list)


Node = Union[Page, Section, Block, BlockRow, BlockColumn, Title, Paragraph, Image]
