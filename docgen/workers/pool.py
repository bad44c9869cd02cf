from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from docgen.core.errors import GenerationQueueFull


class GenerationWorkerPool:
    """Fixed-size thread pool with a bounded backlog.

    At most ``max_workers`` tasks run at once and at most ``queue_capacity``
    more wait for a thread; beyond that ``submit`` raises instead of blocking.
    """

    def __init__(self, max_workers: int = 5, queue_capacity: int = 25, *, thread_name_prefix: str = "docgen-worker") -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if queue_capacity < 0:
            raise ValueError("queue_capacity cannot be negative")
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
        self._slots = threading.BoundedSemaphore(max_workers + queue_capacity)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        if not self._slots.acquire(blocking=False):
            raise GenerationQueueFull("Document generation queue is full, try again later.")
        try:
            future = self._executor.submit(fn, *args, **kwargs)
        except BaseException:
            self._slots.release()
            raise
        future.add_done_callback(self._release_slot)
        return future

    def _release_slot(self, _future: Future) -> None:
        self._slots.release()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
