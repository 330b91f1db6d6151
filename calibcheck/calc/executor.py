"""
Thread pool whose workers never keep the interpreter alive.

``ThreadPoolExecutor`` joins its workers at interpreter exit, so a cell
stuck in a long QuantLib call after a timeout would block the process
until it returns. These workers are daemon threads: once the pool is shut
down without waiting, a running cell is simply abandoned at exit.
"""

import logging
import queue
import threading
from concurrent.futures import Executor, Future
from typing import List

logger = logging.getLogger(__name__)


class DaemonThreadPoolExecutor(Executor):
    """Fixed-size pool of daemon worker threads with the ``Executor`` API."""

    def __init__(self, max_workers: int, thread_name_prefix: str = "worker"):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._work_queue: "queue.SimpleQueue" = queue.SimpleQueue()
        self._shutdown_lock = threading.Lock()
        self._shutdown = False
        self._threads: List[threading.Thread] = []
        for i in range(max_workers):
            thread = threading.Thread(
                target=self._worker, name=f"{thread_name_prefix}_{i}", daemon=True
            )
            thread.start()
            self._threads.append(thread)

    @property
    def threads(self) -> List[threading.Thread]:
        return list(self._threads)

    def submit(self, fn, /, *args, **kwargs) -> Future:
        with self._shutdown_lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new futures after shutdown")
            future: Future = Future()
            self._work_queue.put((future, fn, args, kwargs))
            return future

    def _worker(self) -> None:
        while True:
            item = self._work_queue.get()
            if item is None:
                return
            future, fn, args, kwargs = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._shutdown_lock:
            if not self._shutdown:
                self._shutdown = True
                if cancel_futures:
                    self._cancel_queued()
                # one stop marker per worker, queued behind any remaining work
                for _ in self._threads:
                    self._work_queue.put(None)
        if wait:
            for thread in self._threads:
                thread.join()

    def _cancel_queued(self) -> None:
        cancelled = 0
        while True:
            try:
                item = self._work_queue.get_nowait()
            except queue.Empty:
                break
            if item is not None and item[0].cancel():
                cancelled += 1
        if cancelled:
            logger.debug("Cancelled %d queued task(s)", cancelled)
