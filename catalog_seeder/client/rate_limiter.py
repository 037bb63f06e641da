"""
Fixed-window rate-limited work queue.

Every outbound TMDB call is submitted here. At most `max_per_interval`
units of work are *started* in any window of `interval` seconds, no matter
how many are submitted concurrently. Admitted work runs on a small thread
pool so independent fetches can overlap.

The queue knows nothing about HTTP. It takes any callable and returns a
`concurrent.futures.Future` for its result.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimitedQueue:
    """
    Submit-and-await scheduler with a fixed-window admission counter.

    Usage:
        with RateLimitedQueue(max_per_interval=40, interval=1.0) as queue:
            future = queue.submit(session.get, url)
            response = future.result()
    """

    def __init__(
        self,
        max_per_interval: int,
        interval: float = 1.0,
        *,
        max_workers: int = 4,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            max_per_interval: Upper bound on work units started per window.
            interval: Window length in seconds.
            max_workers: Threads executing admitted work.
            clock: Monotonic time source (injectable for tests).
            sleep: Blocking sleep used while waiting for the next window.
        """
        if max_per_interval < 1:
            raise ValueError("max_per_interval must be >= 1")
        if interval <= 0:
            raise ValueError("interval must be > 0")

        self._max_per_interval = max_per_interval
        self._interval = interval
        self._clock = clock
        self._sleep = sleep

        self._lock = threading.Lock()
        self._window_start = clock()
        self._window_count = 0
        self._pending = 0

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="tmdb-queue"
        )

    def __enter__(self) -> RateLimitedQueue:
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    @property
    def pending(self) -> int:
        """Queued plus in-flight work units."""
        with self._lock:
            return self._pending

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """
        Queue one unit of work. Its future resolves once the work has been
        admitted by the limiter and has run.
        """
        return self._enqueue(fn, args, kwargs, admit=True)

    def dispatch(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """
        Run `fn` on the pool without taking a slot for it.

        For work that makes several outbound calls (e.g. a request plus its
        retries): `fn` must call `acquire()` before each one.
        """
        return self._enqueue(fn, args, kwargs, admit=False)

    def acquire(self) -> None:
        """Block until the current window has a free slot, then take it."""
        self._admit()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _enqueue(self, fn: Callable[..., T], args: tuple, kwargs: dict, *, admit: bool) -> Future[T]:
        with self._lock:
            self._pending += 1
        try:
            return self._executor.submit(self._run, fn, args, kwargs, admit)
        except RuntimeError:
            with self._lock:
                self._pending -= 1
            raise

    def _run(self, fn: Callable[..., T], args: tuple, kwargs: dict, admit: bool) -> T:
        try:
            if admit:
                self._admit()
            return fn(*args, **kwargs)
        finally:
            with self._lock:
                self._pending -= 1

    def _admit(self) -> None:
        while True:
            with self._lock:
                now = self._clock()
                if now - self._window_start >= self._interval:
                    self._window_start = now
                    self._window_count = 0

                if self._window_count < self._max_per_interval:
                    self._window_count += 1
                    return

                wait = self._window_start + self._interval - now

            logger.debug("RATE_LIMIT_WAIT wait_s=%.3f pending=%d", wait, self.pending)
            self._sleep(wait)
