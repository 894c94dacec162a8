"""Fan-out helpers shared by the resolver and the builder."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, TypeVar

T = TypeVar("T")


async def gather_in_order(awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """Run ``awaitables`` concurrently and return their results in input order.

    Completion order does not matter; results are placed back at their input
    index. On the first failure the still-running siblings are cancelled and
    that failure is re-raised unchanged.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    if not tasks:
        return []

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    for task in tasks:
        if task not in done or task.cancelled():
            continue
        exc = task.exception()
        if exc is not None:
            raise exc

    return [task.result() for task in tasks]
