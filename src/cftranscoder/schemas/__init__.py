"""Shared schemas for cftranscoder."""

from cftranscoder.schemas.context import TranscodeContext
from cftranscoder.schemas.fragments import (
    FragmentField,
    FragmentPayload,
    FragmentRecord,
    Reference,
    encode_model_id,
)
from cftranscoder.schemas.nodes import (
    Block,
    BlockColumn,
    BlockRow,
    Image,
    Node,
    NodeKind,
    Page,
    Paragraph,
    Section,
    SectionChild,
    Title,
    TitleLevel,
)

__all__ = [
    "Block",
    "BlockColumn",
    "BlockRow",
    "FragmentField",
    "FragmentPayload",
    "FragmentRecord",
    "Image",
    "Node",
    "NodeKind",
    "Page",
    "Paragraph",
    "Reference",
    "Section",
    "SectionChild",
    "Title",
    "TitleLevel",
    "TranscodeContext",
    "encode_model_id",
]
