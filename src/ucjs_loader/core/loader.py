"""Matching and injection of units into documents."""

import logging
from collections.abc import Callable

from ucjs_loader.core.matching import MatchResult, match_units
from ucjs_loader.core.overlay import OverlayDocument, build_overlay_document
from ucjs_loader.core.registry import Registry
from ucjs_loader.core.units import FreshnessPolicy, ScriptUnit
from ucjs_loader.integrations.host.abc import Host
from ucjs_loader.integrations.host.types import Document
from ucjs_loader.integrations.scheduler.abc import Scheduler

logger = logging.getLogger(__name__)

LivenessCheck = Callable[[], bool]


class Loader:
    """Injects matching units into documents of one session.

    Injection is deferred twice: once so that the session finishes its own
    initialization, and once more so that the target document finishes its
    load sequence. Every continuation checks `is_alive` first and does nothing
    once the session is torn down.

    A unit is injected at most once per document, so a document reported twice
    does not get its scripts applied twice.
    """

    def __init__(
        self,
        *,
        host: Host,
        scheduler: Scheduler,
        freshness: FreshnessPolicy,
        overlay_container_id: str,
    ) -> None:
        self._host = host
        self._scheduler = scheduler
        self._freshness = freshness
        self._overlay_container_id = overlay_container_id
        self._injected: dict[int, set[ScriptUnit]] = {}

    def inject(self, registry: Registry, document: Document, is_alive: LivenessCheck) -> None:
        """Schedule matching and injection of the registry's units into a document."""
        self._scheduler.defer(self._run_matched, registry, document, is_alive)

    def forget(self, document: Document) -> None:
        """Drop injection bookkeeping for a document that went away."""
        self._injected.pop(document.doc_id, None)

    def injected_units(self, document: Document) -> frozenset[ScriptUnit]:
        return frozenset(self._injected.get(document.doc_id, ()))

    def _run_matched(
        self, registry: Registry, document: Document, is_alive: LivenessCheck
    ) -> MatchResult | None:
        if not is_alive():
            logger.debug("Session closed before matching %s", document.url)
            return None

        result = match_units(registry, document.url, self._host.resolve_primary_url())
        injected = self._injected.setdefault(document.doc_id, set())

        for unit in result.to_execute:
            if unit in injected:
                continue
            injected.add(unit)
            self._scheduler.defer(self._execute_unit, unit, document, is_alive)

        overlays = [unit for unit in result.to_overlay if unit not in injected]
        injected.update(overlays)
        overlay = build_overlay_document(overlays, self._overlay_container_id, self._freshness)
        if overlay is not None:
            self._scheduler.defer(self._load_overlay, overlay, overlays, document, is_alive)

        return result

    def _execute_unit(self, unit: ScriptUnit, document: Document, is_alive: LivenessCheck) -> None:
        if not is_alive():
            return
        logger.debug("Run JS: %s -> %s", unit.relative_path, document.url)
        self._host.execute_in_context(unit.run_url(self._freshness), document)

    def _load_overlay(
        self,
        overlay: OverlayDocument,
        units: list[ScriptUnit],
        document: Document,
        is_alive: LivenessCheck,
    ) -> None:
        if not is_alive():
            return
        for count, unit in enumerate(units, start=1):
            logger.debug("Run XUL: %d. %s", count, unit.relative_path)
        self._host.load_overlay_document(overlay, document)
