"""Error taxonomy for the script loader.

Three families of failure exist and each is handled at a different place:

- ScanWarning: an unreadable directory or file entry. Raised inside the
  scanner, caught per entry, logged and recorded. Never aborts a scan.
- GateFailure: a session rejected by the host-version gate or the block list.
  Caught by Session.open(), which then behaves as if the loader were absent.
- InjectionFailure: raised by a host when a unit's code or an overlay fails to
  load. The loader never intercepts it; the scheduler reports it per
  continuation so sibling injections still run.
"""

from pathlib import Path
from typing import Literal

GateReason = Literal["version", "blocked"]


class LoaderError(Exception):
    """Base class for all script loader errors."""


class ScanWarning(LoaderError):
    """A directory or file entry could not be read while scanning."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


class GateFailure(LoaderError):
    """A session failed the compatibility gate or its URL is blocked."""

    def __init__(self, reason: GateReason, url: str, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason
        self.url = url


class InjectionFailure(LoaderError):
    """A host failed to execute a unit or load an overlay document."""

    def __init__(self, location: str, detail: str) -> None:
        super().__init__(f"{location}: {detail}")
        self.location = location
