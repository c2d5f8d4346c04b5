from __future__ import annotations

import logging
import os
import time
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        return max(0, self.tasks_submitted - (self.tasks_completed + self.tasks_failed))


class ThreadManager(Generic[T, R]):
    """
    Bounded thread pool for subprocess-heavy fan-out (one ffprobe per file).

    - submit(fn, *args, **kwargs) -> Future
    - map(fn, iterable) -> List[R], results in input order (join-all)
    - max_queue caps outstanding tasks so a huge tree does not spawn
      thousands of pending probes at once
    - stats snapshot, context manager support
    """

    def __init__(
        self,
        name: str = "worker",
        max_workers: Optional[int] = None,
        max_queue: Optional[int] = None,
        log_exceptions: bool = True,
    ) -> None:
        """
        Parameters
        ----------
        name:
            Logical name, used as thread name prefix and in log lines.
        max_workers:
            Max threads in the pool. Default: available CPUs.
        max_queue:
            Max number of outstanding tasks (submitted but not finished).
            None or <= 0 means unbounded.
        log_exceptions:
            If True, exceptions in tasks are logged when futures complete.
        """
        if max_workers is None:
            max_workers = max(1, os.cpu_count() or 4)

        self._name = name
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._stats = ThreadStats(start_ts=time.time())
        self._log_exceptions = log_exceptions
        self._slots = threading.Semaphore(max_queue) if max_queue and max_queue > 0 else None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager[T, R]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_futures=exc_type is not None)

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        if self._closed:
            raise RuntimeError(f"{self._name}: submit() after shutdown")

        # backpressure when bounded
        if self._slots is not None:
            self._slots.acquire()

        def _wrapped(*a, **kw) -> R:
            try:
                return fn(*a, **kw)
            finally:
                if self._slots is not None:
                    self._slots.release()

        with self._lock:
            self._stats.tasks_submitted += 1

        fut: Future[R] = self._executor.submit(_wrapped, *args, **kwargs)

        def _cb(f: Future[R]) -> None:
            if f.cancelled():
                # never ran, so _wrapped did not give the slot back
                if self._slots is not None:
                    self._slots.release()
                with self._lock:
                    self._stats.tasks_failed += 1
                return
            exc = f.exception()
            with self._lock:
                if exc is None:
                    self._stats.tasks_completed += 1
                else:
                    self._stats.tasks_failed += 1
            if exc is not None and self._log_exceptions:
                log.error("%s task failed: %s", self._name, exc)

        fut.add_done_callback(_cb)
        return fut

    def map(self, fn: Callable[[T], R], iterable: Iterable[T]) -> List[R]:
        """
        Run ``fn`` over every item and wait for all of them.
        Result i belongs to item i regardless of completion order.
        """
        futures_list = [self.submit(fn, item) for item in iterable]
        return [f.result() for f in futures_list]
