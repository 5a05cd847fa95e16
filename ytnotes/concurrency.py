"""Small asyncio helpers shared by the pipeline stages."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """Await every awaitable concurrently and return results in argument order.

    On the first failure the remaining tasks are cancelled (and drained) before
    the exception propagates, so no provider call outlives a failed run.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
