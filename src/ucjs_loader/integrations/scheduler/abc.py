"""Deferred execution abstraction.

The loader runs on a single thread and never blocks. Anything that has to
wait for the host (session initialization, a document's own load sequence) is
expressed as a continuation handed to the scheduler.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class Scheduler(ABC):
    """Abstract cooperative scheduler for dependency injection."""

    @abstractmethod
    def defer(self, callback: Callable[..., Any], *args: Any) -> None:
        """Run `callback(*args)` after the current turn completes.

        Continuations run in the order they were deferred.
        """
        ...
