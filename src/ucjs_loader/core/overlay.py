"""Batching of overlay units into one synthetic overlay document."""

from dataclasses import dataclass
from urllib.parse import quote
from xml.sax.saxutils import quoteattr

from ucjs_loader.core.units import FreshnessPolicy, ScriptUnit

XUL_NAMESPACE = "http://www.mozilla.org/keymaster/gatekeeper/there.is.only.xul"
HTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
DATA_URL_PREFIX = "data:application/vnd.mozilla.xul+xml;charset=utf-8,"


def overlay_directive(href: str) -> str:
    """Return the processing instruction that pulls one overlay in."""
    return f"<?xul-overlay href={quoteattr(href)}?>"


@dataclass(frozen=True)
class OverlayDocument:
    """A synthetic overlay referencing every accepted overlay unit.

    Loading it is a single host call regardless of how many units it carries.
    """

    container_id: str
    hrefs: tuple[str, ...]

    @property
    def directives(self) -> tuple[str, ...]:
        return tuple(overlay_directive(href) for href in self.hrefs)

    def to_xml(self) -> str:
        return (
            '<?xml version="1.0"?>'
            + "".join(self.directives)
            + f"<overlay id={quoteattr(self.container_id)}"
            + f' xmlns="{XUL_NAMESPACE}"'
            + f' xmlns:html="{HTML_NAMESPACE}">'
            + "</overlay>"
        )

    def to_data_url(self) -> str:
        return DATA_URL_PREFIX + quote(self.to_xml(), safe="")


def build_overlay_document(
    units: list[ScriptUnit] | tuple[ScriptUnit, ...],
    container_id: str,
    freshness: FreshnessPolicy,
) -> OverlayDocument | None:
    """Batch overlay units into one document, or None when there are none."""
    if not units:
        return None
    return OverlayDocument(
        container_id=container_id,
        hrefs=tuple(unit.run_url(freshness) for unit in units),
    )
