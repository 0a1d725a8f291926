"""Fixed-size concurrency windows for fan-out requests."""

import asyncio
from typing import Awaitable, Callable, Dict, Hashable, List, Optional, Sequence, TypeVar

from ..exceptions import RequestCancelled
from ..logging_config import setup_logging

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

# Create module-specific logger
logger = setup_logging("batching")


async def gather_in_batches(
    keys: Sequence[K],
    fetch: Callable[[K], Awaitable[T]],
    batch_size: int = 4,
) -> Dict[K, Optional[T]]:
    """Run ``fetch`` for every key, at most ``batch_size`` at a time.

    A window must fully settle before the next one starts. A failing fetch is
    logged and recorded as None; cancellation is never swallowed.

    Args:
        keys: Keys to fetch, in order
        fetch: Coroutine function producing the value for one key
        batch_size: Size of each concurrency window

    Returns:
        Dict mapping each key to its value, or None when the fetch failed
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    results: Dict[K, Optional[T]] = {}
    for start in range(0, len(keys), batch_size):
        chunk: List[K] = list(keys[start:start + batch_size])
        settled = await asyncio.gather(*(fetch(key) for key in chunk), return_exceptions=True)
        for key, outcome in zip(chunk, settled):
            if isinstance(outcome, (asyncio.CancelledError, RequestCancelled)):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning("Batched fetch failed", extra={
                    "key": str(key),
                    "error": str(outcome),
                })
                results[key] = None
            else:
                results[key] = outcome
    return results
