"""Per-request transcoding context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cftranscoder.config import (
    CFT_AUTHOR_BASE,
    CFT_MODEL_ROOT,
    CFT_PARENT_PATH,
    CFT_PREFIX,
    CFT_TOKEN,
    DEFAULT_MODEL_ROOT,
    DEFAULT_PARENT_PATH,
    DEFAULT_PREFIX,
)


class TranscodeContext(BaseModel):
    """Instance URL, credential and naming settings passed to every capability.

    Attributes:
        author_base: Author instance base URL, e.g. ``https://author.example.com``.
        token: Bearer token for the fragment API.
        prefix: Prefix for generated fragment titles.
        parent_path: Folder that new fragments are created in.
        model_root: Folder holding the fragment models.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    author_base: str
    token: str = Field(default="", repr=False)
    prefix: str = DEFAULT_PREFIX
    parent_path: str = DEFAULT_PARENT_PATH
    model_root: str = DEFAULT_MODEL_ROOT

    @classmethod
    def from_config(cls) -> TranscodeContext:
        return cls(
            author_base=CFT_AUTHOR_BASE,
            token=CFT_TOKEN,
            prefix=CFT_PREFIX,
            parent_path=CFT_PARENT_PATH,
            model_root=CFT_MODEL_ROOT,
        )
