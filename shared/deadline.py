"""
Deadline enforcement for service operations.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from shared.errors import DeadlineExceededError

T = TypeVar("T")


async def run_with_deadline(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await ``awaitable``, failing with DeadlineExceededError once ``timeout`` seconds pass.

    A missing or non-positive timeout disables the deadline. On expiry the
    in-flight operation is cancelled, which releases any pooled connection it
    holds. Caller cancellation propagates unchanged as CancelledError.
    """
    if timeout is None or timeout <= 0:
        return await awaitable

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise DeadlineExceededError(
            f"Operation did not complete within {timeout:g}s",
            details={"timeout_seconds": timeout},
        ) from exc
