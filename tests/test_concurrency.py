"""Tests for ordered fan-out."""

from __future__ import annotations

import asyncio

import pytest

from cftranscoder.concurrency import gather_in_order
from cftranscoder.exceptions import NotFoundError


async def _value_after(value: int, delay: float, finished: list[int]) -> int:
    await asyncio.sleep(delay)
    finished.append(value)
    return value


class TestGatherInOrder:
    """Tests for gather_in_order."""

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self) -> None:
        """Results are reassembled by index, not completion order."""
        finished: list[int] = []
        delays = [0.03, 0.0, 0.02, 0.01]

        results = await gather_in_order(
            _value_after(index, delay, finished) for index, delay in enumerate(delays)
        )

        assert results == [0, 1, 2, 3]
        assert finished == [1, 3, 2, 0]

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await gather_in_order([]) == []

    @pytest.mark.asyncio
    async def test_first_failure_is_raised_unchanged(self) -> None:
        async def fail() -> int:
            raise NotFoundError("missing")

        with pytest.raises(NotFoundError, match="missing"):
            await gather_in_order([_value_after(1, 0.01, []), fail()])

    @pytest.mark.asyncio
    async def test_failure_cancels_pending_siblings(self) -> None:
        """A slow sibling is cancelled once another sibling fails."""
        cancelled = asyncio.Event()

        async def slow() -> int:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return 1

        async def fail() -> int:
            await asyncio.sleep(0)
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await gather_in_order([slow(), fail()])

        assert cancelled.is_set()
