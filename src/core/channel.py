# Copyright (c) 2025 Trae AI. All rights reserved.

import queue
import threading
from typing import Any, Iterator, Optional
from .errors import CancelledError, QueueClosed

POLL_INTERVAL = 0.1  # seconds between cancellation checks while blocked


class CancelToken:
    """
    Cooperative cancellation flag shared by the pipeline threads.
    A child token is cancelled when either it or its parent is.
    """

    def __init__(self, parent: Optional["CancelToken"] = None):
        self._event = threading.Event()
        self._parent = parent

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def raise_if_cancelled(self):
        if self.cancelled:
            raise CancelledError("Operation cancelled")

    def child(self) -> "CancelToken":
        return CancelToken(parent=self)


class BoundedQueue:
    """
    Fixed-capacity FIFO with explicit close semantics.

    `put` blocks while full and `get` blocks while empty, both checking the
    cancel token every POLL_INTERVAL. Items buffered before `close` are still
    delivered; `get` raises QueueClosed only once closed and drained.
    """

    def __init__(self, maxsize: int = 128):
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()

    def close(self):
        self._closed.set()

    def put(self, item: Any, token: Optional[CancelToken] = None):
        while True:
            if token is not None:
                token.raise_if_cancelled()
            if self._closed.is_set():
                raise QueueClosed("Cannot put into a closed queue")
            try:
                self._queue.put(item, timeout=POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def get(self, token: Optional[CancelToken] = None) -> Any:
        while True:
            if token is not None:
                token.raise_if_cancelled()
            try:
                return self._queue.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                if self._closed.is_set() and self._queue.empty():
                    raise QueueClosed("Queue closed and drained")

    def drain(self, token: Optional[CancelToken] = None) -> Iterator[Any]:
        while True:
            try:
                item = self.get(token)
            except QueueClosed:
                return
            yield item


def join_all(threads, token: Optional[CancelToken] = None):
    """
    Joins threads, returning early once the token is cancelled.
    """
    for thread in threads:
        while thread.is_alive():
            if token is not None and token.cancelled:
                return
            thread.join(POLL_INTERVAL)
