"""Script units: one discovered script file with its kind and metadata."""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path

from ucjs_loader.core.metadata import MetadataFields

logger = logging.getLogger(__name__)


class ScriptKind(Enum):
    """How a unit is injected into a document."""

    EXECUTABLE = "executable"  # Loaded directly into the document's context
    OVERLAY = "overlay"  # Referenced from the batched overlay document


class FreshnessPolicy(Enum):
    """Source of the freshness token appended to a unit's run URL.

    The token only exists so that a host script cache keyed by URL sees an
    edited file as a new resource. It is chosen once, at startup.
    """

    SCAN_TIME = "scan-time"  # Modified time captured when the unit was scanned
    RUN_TIME = "run-time"  # Modified time re-read every time the URL is built

    @staticmethod
    def from_flag(validate_at_run: bool) -> "FreshnessPolicy":
        return FreshnessPolicy.RUN_TIME if validate_at_run else FreshnessPolicy.SCAN_TIME


@dataclass(frozen=True)
class ExtensionClassifier:
    """Maps file names to unit kinds by their extension.

    The extension is everything from the first dot of the file name, so
    `a.uc.js` has the extension `.uc.js`. Both sets are matched exactly.
    """

    executable_exts: frozenset[str]
    overlay_exts: frozenset[str]

    def __post_init__(self) -> None:
        overlap = self.executable_exts & self.overlay_exts
        if overlap:
            raise ValueError(
                f"Extensions cannot be both executable and overlay: {', '.join(sorted(overlap))}"
            )

    def classify(self, file_name: str) -> ScriptKind | None:
        dot = file_name.find(".")
        if dot == -1:
            return None
        ext = file_name[dot:]
        if ext in self.executable_exts:
            return ScriptKind.EXECUTABLE
        if ext in self.overlay_exts:
            return ScriptKind.OVERLAY
        return None


def _modified_ms(path: Path) -> int:
    return path.stat().st_mtime_ns // 1_000_000


@dataclass(frozen=True)
class ScriptUnit:
    """Immutable description of one discovered script.

    Re-scanning produces new instances; a unit is never patched in place.
    """

    path: Path
    kind: ScriptKind
    metadata: MetadataFields
    base_dir: Path
    modified_ms: int

    @cached_property
    def file_name(self) -> str:
        return self.path.name

    @cached_property
    def relative_path(self) -> str:
        """Path relative to the scan base, with forward slashes."""
        return self.path.relative_to(self.base_dir).as_posix()

    @cached_property
    def folder(self) -> str:
        """Directory of the unit relative to the scan base, ending with '/'."""
        parent = self.path.parent.relative_to(self.base_dir).as_posix()
        return "" if parent == "." else f"{parent}/"

    @cached_property
    def location(self) -> str:
        """file: URL of the unit, without a freshness token."""
        return self.path.as_uri()

    def run_url(self, policy: FreshnessPolicy) -> str:
        """Location plus a freshness token used as a host cache key."""
        if policy is FreshnessPolicy.SCAN_TIME:
            return f"{self.location}?{self.modified_ms}"
        try:
            stamp = str(_modified_ms(self.path))
        except OSError as e:
            logger.debug("Cannot stat %s for freshness: %s", self.path, e)
            stamp = ""
        return f"{self.location}?{stamp}"

    @property
    def display_name(self) -> str:
        if self.metadata.name:
            return self.metadata.name[0]
        return self.file_name
