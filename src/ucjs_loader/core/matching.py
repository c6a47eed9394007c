"""Include/exclude matching of units against a target document URL."""

from dataclasses import dataclass

from ucjs_loader.core.metadata import MetadataFields
from ucjs_loader.core.patterns import compile_pattern
from ucjs_loader.core.registry import Registry
from ucjs_loader.core.units import ScriptUnit


@dataclass(frozen=True)
class MatchResult:
    """Units accepted for one document, in registry order."""

    to_execute: tuple[ScriptUnit, ...]
    to_overlay: tuple[ScriptUnit, ...]

    @property
    def is_empty(self) -> bool:
        return not self.to_execute and not self.to_overlay


def is_applicable(metadata: MetadataFields, target_url: str, primary_url: str) -> bool:
    """Decide whether a unit with this metadata applies to a document.

    Exclusion wins over inclusion. A unit without include rules applies to
    the primary document only.
    """
    if any(compile_pattern(p, primary_url)(target_url) for p in metadata.exclude):
        return False

    include = metadata.include or (primary_url,)
    return any(compile_pattern(p, primary_url)(target_url) for p in include)


def _accepted(
    units: tuple[ScriptUnit, ...], target_url: str, primary_url: str
) -> tuple[ScriptUnit, ...]:
    return tuple(u for u in units if is_applicable(u.metadata, target_url, primary_url))


def match_units(registry: Registry, target_url: str, primary_url: str) -> MatchResult:
    """Select the executable and overlay units that apply to a document."""
    return MatchResult(
        to_execute=_accepted(registry.executable, target_url, primary_url),
        to_overlay=_accepted(registry.overlay, target_url, primary_url),
    )
