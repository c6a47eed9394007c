"""Per-window loader sessions.

A session is the loader's state for one top-level host window:

    CREATED -> GATED -> SCANNING -> READY -> TORN_DOWN
        \\____________________________________/
               (gate failure)

While READY, every auxiliary document loaded inside the window (a side panel,
for instance) is matched against the shared Registry and injected. This never
re-scans or mutates the Registry. Bookkeeping for an auxiliary document is
dropped when the host reports it unloaded, and injections still pending for it
are skipped.
"""

import logging
from enum import Enum

from ucjs_loader.core.errors import GateFailure
from ucjs_loader.core.loader import LivenessCheck, Loader
from ucjs_loader.core.patterns import UrlBlockList
from ucjs_loader.core.registry import Registry, RegistryPool
from ucjs_loader.integrations.host.abc import Host
from ucjs_loader.integrations.host.types import Document, DocumentEvent
from ucjs_loader.integrations.scheduler.abc import Scheduler

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CREATED = "created"
    GATED = "gated"
    SCANNING = "scanning"
    READY = "ready"
    TORN_DOWN = "torn-down"


class DocumentState(Enum):
    """Progress of one auxiliary document within a READY session."""

    MATCHING = "matching"
    IDLE = "idle"


class Session:
    """Loader state for one top-level window and its auxiliary documents.

    Sessions of the same window group share one Registry through the pool.
    A session that fails its gate performs no scan and installs no watcher.
    """

    def __init__(
        self,
        *,
        session_key: str,
        window: Document,
        host: Host,
        scheduler: Scheduler,
        pool: RegistryPool,
        loader: Loader,
        block_list: UrlBlockList,
        min_host_version: str,
    ) -> None:
        self.session_key = session_key
        self.window = window
        self._host = host
        self._scheduler = scheduler
        self._pool = pool
        self._loader = loader
        self._block_list = block_list
        self._min_host_version = min_host_version
        self._state = SessionState.CREATED
        self._registry: Registry | None = None
        self._watching = False
        self._documents: dict[Document, DocumentState] = {}
        self.gate_failure: GateFailure | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def registry(self) -> Registry | None:
        return self._registry

    @property
    def is_alive(self) -> bool:
        return self._state is SessionState.READY

    @property
    def is_watching(self) -> bool:
        return self._watching

    def document_state(self, document: Document) -> DocumentState | None:
        return self._documents.get(document)

    def open(self) -> bool:
        """Gate, acquire the Registry, inject into the window and start watching.

        Returns:
            True if the session is READY, False if it failed its gate
        """
        if self._state is not SessionState.CREATED:
            raise ValueError(f"Session already opened (state: {self._state.value})")

        try:
            self._check_gate()
        except GateFailure as e:
            logger.info("Not init window: %s", e)
            self.gate_failure = e
            self._state = SessionState.TORN_DOWN
            return False

        self._state = SessionState.GATED
        logger.info("Init window: %s", self.window.url)

        self._state = SessionState.SCANNING
        self._registry = self._pool.acquire(self.session_key)
        self._state = SessionState.READY

        self._loader.inject(self._registry, self.window, self._liveness(self.window))
        self._host.watch_documents(self.window, self._on_document_event)
        self._watching = True
        return True

    def close(self) -> None:
        """Tear the session down; pending injections for it are skipped."""
        if self._state is SessionState.TORN_DOWN:
            return
        if self._watching:
            self._host.unwatch_documents(self.window, self._on_document_event)
            self._watching = False
        if self._registry is not None:
            self._pool.release(self.session_key)
            self._registry = None
        for document in self._documents:
            self._loader.forget(document)
        self._documents.clear()
        self._loader.forget(self.window)
        self._state = SessionState.TORN_DOWN
        logger.info("Closed window: %s", self.window.url)

    def _check_gate(self) -> None:
        if not self._host.version_satisfies(self._min_host_version):
            raise GateFailure(
                "version",
                self.window.url,
                f"Required host version {self._min_host_version} or higher",
            )
        if self._block_list.is_blocked(self.window.url):
            raise GateFailure("blocked", self.window.url, f"Blocked URL: {self.window.url}")

    def _liveness(self, document: Document) -> LivenessCheck:
        """Build the check run before each deferred step for one document."""

        def check() -> bool:
            if not self.is_alive:
                return False
            return document == self.window or document in self._documents

        return check

    def _on_document_event(self, event: DocumentEvent, document: Document) -> None:
        if event is DocumentEvent.LOADED:
            self._on_document_loaded(document)
        else:
            self._on_document_unloaded(document)

    def _on_document_loaded(self, document: Document) -> None:
        if not self.is_alive or self._registry is None:
            return
        if self._block_list.is_blocked(document.url):
            logger.info("Not init sidebar: blocked URL %s", document.url)
            return

        logger.info("Init sidebar: %s", document.url)
        self._documents[document] = DocumentState.MATCHING
        self._loader.inject(self._registry, document, self._liveness(document))
        self._scheduler.defer(self._settle, document)

    def _on_document_unloaded(self, document: Document) -> None:
        # Pending injections for the document see it gone and do nothing.
        if self._documents.pop(document, None) is None:
            return
        self._loader.forget(document)
        logger.info("Unload sidebar: %s", document.url)

    def _settle(self, document: Document) -> None:
        if document in self._documents:
            self._documents[document] = DocumentState.IDLE
