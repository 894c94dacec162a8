"""Test setup for cftranscoder."""

from __future__ import annotations

import asyncio
import itertools
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cftranscoder.exceptions import NotFoundError, VersionConflictError  # noqa: E402
from cftranscoder.schemas import (  # noqa: E402
    FragmentPayload,
    FragmentRecord,
    NodeKind,
    TranscodeContext,
)

MODEL_ROOT = "/conf/global/settings/dam/cfm/models"


def make_record(kind: str, path: str | None = None, **elements: object) -> FragmentRecord:
    """Build a fragment record for the model named ``kind``."""
    return FragmentRecord(model_path=f"{MODEL_ROOT}/{kind}", path=path, elements=elements)


class FakeFragmentSource:
    """In-memory dereference capability.

    ``delays`` maps a reference to the seconds its fetch should take, so tests
    can force completion order.
    """

    def __init__(
        self,
        records: dict[str, FragmentRecord],
        *,
        delays: dict[str, float] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.records = records
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: list[str] = []
        self.completed: list[str] = []

    async def dereference(self, reference: str) -> FragmentRecord:
        self.calls.append(reference)
        await asyncio.sleep(self.delays.get(reference, 0))
        if reference in self.failures:
            raise self.failures[reference]
        if reference not in self.records:
            raise NotFoundError(f"No fragment found at {reference}")
        self.completed.append(reference)
        return self.records[reference]


class RecordingStore:
    """Fragment store that records every call with its position in a shared log.

    With a ``source`` it also answers ``dereference``, standing in for a full
    fragments client.
    """

    def __init__(
        self,
        *,
        delays: dict[NodeKind, float] | None = None,
        failures: dict[NodeKind, Exception] | None = None,
        modify_after_read: bool = False,
        source: FakeFragmentSource | None = None,
        missing_pages: set[str] | None = None,
    ) -> None:
        self.delays = delays or {}
        self.failures = failures or {}
        self.modify_after_read = modify_after_read
        self.source = source or FakeFragmentSource({})
        self.missing_pages = missing_pages or set()
        self.log: list[tuple[str, str]] = []
        self.created: list[tuple[int, NodeKind, FragmentPayload, str]] = []
        self.updates: list[tuple[str, FragmentPayload, str]] = []
        self.lookups: list[str] = []
        self.current_tag = '"v1"'
        self._ids = itertools.count(1)

    async def dereference(self, reference: str) -> FragmentRecord:
        return await self.source.dereference(reference)

    async def create_fragment(self, kind: NodeKind, payload: FragmentPayload) -> str:
        begin = len(self.log)
        self.log.append(("begin", kind.value))
        await asyncio.sleep(self.delays.get(kind, 0))
        if kind in self.failures:
            raise self.failures[kind]
        reference = f"/content/dam/test-pages/{kind.value}-{next(self._ids)}"
        self.log.append(("end", reference))
        self.created.append((begin, kind, payload, reference))
        return reference

    async def find_fragment_id(self, path: str) -> str:
        self.lookups.append(path)
        if path in self.missing_pages:
            raise NotFoundError(f"No fragment found at {path}")
        return "page-id"

    async def fetch_version_tag(self, fragment_id: str) -> str:
        tag = self.current_tag
        if self.modify_after_read:
            # Someone else saves the page right after we read its tag
            self.current_tag = '"v2"'
        return tag

    async def update_fragment(
        self, fragment_id: str, payload: FragmentPayload, version_tag: str
    ) -> str:
        if version_tag != self.current_tag:
            raise VersionConflictError(f"{fragment_id} is at {self.current_tag}, not {version_tag}")
        self.updates.append((fragment_id, payload, version_tag))
        return "/content/dam/site/index"

    def created_of(self, kind: NodeKind) -> list[tuple[int, FragmentPayload, str]]:
        return [(begin, payload, ref) for begin, k, payload, ref in self.created if k is kind]


@pytest.fixture
def context() -> TranscodeContext:
    """Context pointing at a fake author instance."""
    return TranscodeContext(
        author_base="https://author.example.com",
        token="secret-token",
        prefix="test",
        parent_path="/content/dam/test-pages",
        model_root=MODEL_ROOT,
    )


@pytest.fixture
def record_factory() -> Callable[..., FragmentRecord]:
    return make_record


@pytest.fixture
def fragment_source_factory() -> type[FakeFragmentSource]:
    return FakeFragmentSource


@pytest.fixture
def store_factory() -> type[RecordingStore]:
    return RecordingStore
