"""Host operations abstraction.

The loader never talks to a browser directly. Everything it needs from the
surrounding application goes through this interface, which production code
implements against a real host and tests implement with in-memory fakes.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from ucjs_loader.core.overlay import OverlayDocument
from ucjs_loader.integrations.host.types import Document, DocumentEvent

DocumentListener = Callable[[DocumentEvent, Document], None]


class Host(ABC):
    """Abstract host operations for dependency injection."""

    @abstractmethod
    def resolve_primary_url(self) -> str:
        """Return the URL of the host's primary document.

        This is what the `main` alias in script headers resolves to.
        """
        ...

    @abstractmethod
    def execute_in_context(self, location: str, document: Document) -> None:
        """Execute the script at `location` in the document's context.

        Fire-and-forget. Failures are reported by the host itself, typically by
        raising InjectionFailure into the scheduler.

        Args:
            location: Run URL of the script, including its freshness token
            document: Target document
        """
        ...

    @abstractmethod
    def load_overlay_document(self, overlay: OverlayDocument, document: Document) -> None:
        """Load a batched overlay document into the target document.

        Args:
            overlay: Synthetic overlay referencing every accepted overlay unit
            document: Target document
        """
        ...

    @abstractmethod
    def version_satisfies(self, min_version: str) -> bool:
        """Check whether the host is at least `min_version`."""
        ...

    @abstractmethod
    def watch_documents(self, window: Document, listener: DocumentListener) -> None:
        """Call `listener` whenever an auxiliary document inside `window` loads or unloads."""
        ...

    @abstractmethod
    def unwatch_documents(self, window: Document, listener: DocumentListener) -> None:
        """Stop calling `listener` for documents loaded inside `window`."""
        ...
