"""Concurrent fan-out for independent store reads."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict

from ..core.constants import DEFAULT_FETCH_WORKERS


def fetch_all(loaders: Dict[str, Callable[[], Any]], *, max_workers: int = DEFAULT_FETCH_WORKERS) -> Dict[str, Any]:
    """Run every loader concurrently and join on all of them.

    The first exception raised by a loader is re-raised after every loader
    has finished, so no read is left running behind the caller.
    """

    if not loaders:
        return {}

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(loaders)))) as pool:
        futures = {name: pool.submit(fn) for name, fn in loaders.items()}

    return {name: fut.result() for name, fut in futures.items()}
