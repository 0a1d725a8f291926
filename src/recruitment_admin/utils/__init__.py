"""Async helpers shared by the console services."""

from .batching import gather_in_batches
from .cancellation import CancellationToken, guarded

__all__ = ["gather_in_batches", "CancellationToken", "guarded"]
