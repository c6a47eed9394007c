"""Scanned unit registries and their process-wide pool.

A Registry is read-only once built. The RegistryPool hands the same Registry
to every session of a window group, so a group scans at most once while any
of its sessions is alive.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ucjs_loader.core.errors import ScanWarning
from ucjs_loader.core.scanner import ScanResult
from ucjs_loader.core.units import ScriptKind, ScriptUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registry:
    """Units of one scan, partitioned by kind once."""

    executable: tuple[ScriptUnit, ...]
    overlay: tuple[ScriptUnit, ...]
    warnings: tuple[ScanWarning, ...] = ()

    @staticmethod
    def from_scan(result: ScanResult) -> "Registry":
        return Registry(
            executable=tuple(u for u in result.units if u.kind is ScriptKind.EXECUTABLE),
            overlay=tuple(u for u in result.units if u.kind is ScriptKind.OVERLAY),
            warnings=result.warnings,
        )

    def all_units(self) -> tuple[ScriptUnit, ...]:
        return self.executable + self.overlay

    def __len__(self) -> int:
        return len(self.executable) + len(self.overlay)


@dataclass
class _PoolEntry:
    registry: Registry
    references: int


class RegistryPool:
    """Process-wide registries keyed by window group.

    Sessions receive the pool at construction, acquire a Registry for their
    group and release it on teardown. The entry is dropped when its last
    reference is released; the next acquire for that group scans again.
    """

    def __init__(self, scan: Callable[[], ScanResult]) -> None:
        self._scan = scan
        self._entries: dict[str, _PoolEntry] = {}
        self._scan_count = 0

    @property
    def scan_count(self) -> int:
        """Number of scans performed by this pool."""
        return self._scan_count

    def acquire(self, session_key: str) -> Registry:
        """Return the group's Registry, scanning only if none is held."""
        entry = self._entries.get(session_key)
        if entry is not None:
            entry.references += 1
            logger.info(
                "Copy script data from window group %r (%d references)",
                session_key,
                entry.references,
            )
            return entry.registry

        self._scan_count += 1
        registry = Registry.from_scan(self._scan())
        self._entries[session_key] = _PoolEntry(registry=registry, references=1)
        logger.info(
            "Scanned %d executable and %d overlay units for window group %r",
            len(registry.executable),
            len(registry.overlay),
            session_key,
        )
        return registry

    def release(self, session_key: str) -> None:
        """Drop one reference to the group's Registry."""
        entry = self._entries.get(session_key)
        if entry is None:
            raise ValueError(f"No registry held for window group {session_key!r}")
        entry.references -= 1
        if entry.references == 0:
            del self._entries[session_key]
            logger.debug("Released registry of window group %r", session_key)

    def get(self, session_key: str) -> Registry | None:
        """Return the group's Registry without taking a reference."""
        entry = self._entries.get(session_key)
        if entry is None:
            return None
        return entry.registry

    def references(self, session_key: str) -> int:
        entry = self._entries.get(session_key)
        if entry is None:
            return 0
        return entry.references
