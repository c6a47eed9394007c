"""FIFO scheduler that runs continuations when drained."""

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from ucjs_loader.integrations.scheduler.abc import Scheduler

logger = logging.getLogger(__name__)


class QueueScheduler(Scheduler):
    """Single-threaded scheduler backed by a queue.

    A continuation that raises is reported and recorded; the remaining
    continuations still run. This is the host-side fault isolation that keeps
    one failing script from stopping its siblings.
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._failures: list[Exception] = []

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    @property
    def failures(self) -> list[Exception]:
        """Exceptions raised by continuations, in the order they occurred."""
        return self._failures

    def defer(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.append((callback, args))

    def run_next(self) -> bool:
        """Run the oldest pending continuation.

        Returns:
            False if nothing was pending
        """
        if not self._queue:
            return False
        callback, args = self._queue.popleft()
        try:
            callback(*args)
        except Exception as e:
            logger.exception("Deferred task %s failed", getattr(callback, "__name__", callback))
            self._failures.append(e)
        return True

    def run_pending(self) -> int:
        """Run continuations until the queue is empty.

        Continuations deferred while draining run in the same call.

        Returns:
            Number of continuations run
        """
        count = 0
        while self.run_next():
            count += 1
        return count
