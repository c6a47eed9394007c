"""Document handles exchanged with the host."""

import itertools
from dataclasses import dataclass, field
from enum import Enum

_document_ids = itertools.count(1)


@dataclass(frozen=True)
class Document:
    """A host document that scripts can be injected into.

    `doc_id` is unique per process, so reloading a URL yields a new document.
    """

    url: str
    title: str = ""
    doc_id: int = field(default_factory=lambda: next(_document_ids))


class DocumentEvent(Enum):
    """What happened to an auxiliary document inside a watched window."""

    LOADED = "loaded"
    UNLOADED = "unloaded"
