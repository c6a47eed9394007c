"""Host that reports injections to the terminal instead of a browser."""

import re
from collections import defaultdict

import click

from ucjs_loader.core.overlay import OverlayDocument
from ucjs_loader.integrations.host.abc import DocumentListener, Host
from ucjs_loader.integrations.host.types import Document, DocumentEvent


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version into numeric parts.

    Each part contributes its leading digits, so `4.0b2` parses as (4, 0).
    Trailing zero parts are dropped so that `4` and `4.0` compare equal.
    """
    parts: list[int] = []
    for segment in version.split("."):
        digits = re.match(r"\d*", segment.strip())
        parts.append(int(digits.group(0)) if digits and digits.group(0) else 0)
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


class ConsoleHost(Host):
    """Host stand-in used by `ucjs simulate`.

    Executions and overlay loads are printed rather than performed. Auxiliary
    documents are delivered with dispatch_document_load() and withdrawn with
    dispatch_document_unload().
    """

    def __init__(
        self,
        *,
        primary_url: str,
        host_name: str,
        host_version: str,
        required_host_name: str,
    ) -> None:
        self._primary_url = primary_url
        self._host_name = host_name
        self._host_version = host_version
        self._required_host_name = required_host_name
        self._listeners: dict[int, list[DocumentListener]] = defaultdict(list)

    def resolve_primary_url(self) -> str:
        return self._primary_url

    def execute_in_context(self, location: str, document: Document) -> None:
        click.echo(f"  {click.style('run', fg='green')} {location} -> {document.url}", err=True)

    def load_overlay_document(self, overlay: OverlayDocument, document: Document) -> None:
        click.echo(
            f"  {click.style('overlay', fg='cyan')} {len(overlay.hrefs)} unit(s) -> {document.url}",
            err=True,
        )
        for directive in overlay.directives:
            click.echo(f"    {directive}", err=True)

    def version_satisfies(self, min_version: str) -> bool:
        if self._host_name != self._required_host_name:
            return False
        return parse_version(self._host_version) >= parse_version(min_version)

    def watch_documents(self, window: Document, listener: DocumentListener) -> None:
        self._listeners[window.doc_id].append(listener)

    def unwatch_documents(self, window: Document, listener: DocumentListener) -> None:
        listeners = self._listeners.get(window.doc_id)
        if listeners is None or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[window.doc_id]

    def dispatch_document_load(self, window: Document, document: Document) -> int:
        """Deliver a newly loaded auxiliary document to the window's listeners.

        Returns:
            Number of listeners notified
        """
        return self._dispatch(window, DocumentEvent.LOADED, document)

    def dispatch_document_unload(self, window: Document, document: Document) -> int:
        """Tell the window's listeners that an auxiliary document went away."""
        return self._dispatch(window, DocumentEvent.UNLOADED, document)

    def _dispatch(self, window: Document, event: DocumentEvent, document: Document) -> int:
        listeners = list(self._listeners.get(window.doc_id, []))
        for listener in listeners:
            listener(event, document)
        return len(listeners)
