"""Directory scanning for script units."""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from ucjs_loader.core.errors import ScanWarning
from ucjs_loader.core.metadata import parse_metadata
from ucjs_loader.core.units import ExtensionClassifier, ScriptUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanRoot:
    """A configured script folder and whether its descendants are scanned."""

    directory: Path
    recursive: bool

    @staticmethod
    def parse(folder: str, base_dir: Path) -> "ScanRoot | None":
        """Parse a folder entry such as `UCJS_files` or `UCJS_tmp/`.

        A trailing slash requests a recursive scan. Only a single folder name
        is accepted; anything else yields None.
        """
        segments = folder.split("/")
        if len(segments) > 2 or not segments[0]:
            return None
        if len(segments) == 2 and segments[1]:
            return None
        return ScanRoot(directory=base_dir / segments[0], recursive=len(segments) == 2)


@dataclass(frozen=True)
class ScanResult:
    """Units found by a scan, in pre-order, plus the entries that were skipped."""

    units: tuple[ScriptUnit, ...]
    warnings: tuple[ScanWarning, ...]


def _has_hidden_attribute(st: os.stat_result) -> bool:
    attributes = getattr(st, "st_file_attributes", 0)
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


def _directory_identity(directory: Path) -> tuple[int, int]:
    # Symlinked directories resolve to the same (device, inode) as their target.
    try:
        st = directory.stat()
    except OSError as e:
        raise ScanWarning(directory, e) from e
    return (st.st_dev, st.st_ino)


def _read_text(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ScanWarning(path, e) from e
    return data.decode("utf-8", errors="replace")


class _Walker:
    def __init__(self, base_dir: Path, classifier: ExtensionClassifier) -> None:
        self._base_dir = base_dir
        self._classifier = classifier
        self.units: list[ScriptUnit] = []
        self.warnings: list[ScanWarning] = []
        self._walked: set[tuple[int, int]] = set()

    def walk(self, directory: Path, recursive: bool) -> None:
        try:
            identity = _directory_identity(directory)
            if identity in self._walked:
                logger.debug("Directory already scanned: %s", directory)
                return
            self._walked.add(identity)
            entries = self._list_entries(directory)
        except ScanWarning as warning:
            self._warn(warning)
            return

        for entry in entries:
            try:
                self._visit(entry, recursive)
            except ScanWarning as warning:
                self._warn(warning)

    def _list_entries(self, directory: Path) -> list[Path]:
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ScanWarning(directory, e) from e

    def _visit(self, entry: Path, recursive: bool) -> None:
        if entry.name.startswith("."):
            return
        try:
            st = entry.stat()
        except OSError as e:
            raise ScanWarning(entry, e) from e

        if _has_hidden_attribute(st):
            return
        if stat.S_ISDIR(st.st_mode):
            if recursive:
                self.walk(entry, recursive)
            return
        if not stat.S_ISREG(st.st_mode):
            return

        kind = self._classifier.classify(entry.name)
        if kind is None:
            return

        unit = ScriptUnit(
            path=entry,
            kind=kind,
            metadata=parse_metadata(_read_text(entry)),
            base_dir=self._base_dir,
            modified_ms=st.st_mtime_ns // 1_000_000,
        )
        self.units.append(unit)
        logger.debug("Scan: %d. %s", len(self.units), unit.relative_path)

    def _warn(self, warning: ScanWarning) -> None:
        logger.warning("Skipping unreadable entry: %s", warning)
        self.warnings.append(warning)


def scan_roots(
    roots: list[ScanRoot], classifier: ExtensionClassifier, base_dir: Path
) -> ScanResult:
    """Scan configured roots for script units.

    Missing roots are skipped silently; an unused folder is a valid setup.
    Unreadable entries are skipped and reported as ScanWarnings. Within a
    directory, entries are visited in name order and sub-directories are
    descended into where they appear. A directory reached twice, through a
    symlink or a repeated root, is scanned only the first time.

    Args:
        roots: Folders to scan, in configuration order
        classifier: Decides which files are units and of which kind
        base_dir: Directory that unit relative paths are computed from

    Returns:
        ScanResult with all units and the warnings raised on the way
    """
    walker = _Walker(base_dir, classifier)
    for root in roots:
        if not root.directory.is_dir():
            logger.debug("Script folder not present: %s", root.directory)
            continue
        walker.walk(root.directory, root.recursive)
    return ScanResult(units=tuple(walker.units), warnings=tuple(walker.warnings))
