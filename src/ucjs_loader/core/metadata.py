"""Script header metadata parsing.

A script declares its applicability in a comment-delimited header block:

    // ==UserScript==
    // @name        TooltipEx.uc.js
    // @description A tooltip of an element
    // @include     main
    // @exclude     chrome://browser/content/preferences/*
    // ==/UserScript==

Only the first block in a file is read. Lines outside the block are ignored,
even when they look like declarations.
"""

import re
from dataclasses import dataclass, field

HEADER_BLOCK_PATTERN = re.compile(
    r"^[ \t]*//[ \t]*==UserScript==[ \t]*\n(?:.*\n)*?[ \t]*//[ \t]*==/UserScript==[ \t]*$",
    re.MULTILINE,
)
HEADER_ENTRY_PATTERN = re.compile(r"^[ \t]*//[ \t]*@([\w-]+)[ \t]+(.+?)[ \t]*$", re.MULTILINE)

RECOGNIZED_KEYS = ("name", "description", "include", "exclude")

NO_METADATA_TEXT = "[No meta data]"


@dataclass(frozen=True)
class MetadataFields:
    """Declared header fields of one script, in file order.

    Duplicates are kept. `extras` holds unrecognized declarations for
    diagnostics only; matching never looks at them.
    """

    name: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    extras: tuple[tuple[str, str], ...] = field(default=())

    def items(self) -> list[tuple[str, tuple[str, ...]]]:
        """Return the recognized fields as (key, values) pairs in canonical order."""
        return [(key, getattr(self, key)) for key in RECOGNIZED_KEYS]

    @property
    def is_empty(self) -> bool:
        return not any(values for _, values in self.items())


def normalize_line_breaks(text: str) -> str:
    """Convert CRLF and lone CR line breaks to LF."""
    return re.sub(r"\r\n?", "\n", text)


def parse_metadata(raw_text: str) -> MetadataFields:
    """Parse the header block of a script into MetadataFields.

    Never raises: text without a header block, or with malformed lines inside
    it, yields empty sequences for the affected fields.

    Args:
        raw_text: Full text of the script file

    Returns:
        MetadataFields with values trimmed and in declaration order
    """
    match = HEADER_BLOCK_PATTERN.search(normalize_line_breaks(raw_text))
    if match is None:
        return MetadataFields()

    values: dict[str, list[str]] = {key: [] for key in RECOGNIZED_KEYS}
    extras: list[tuple[str, str]] = []
    for entry in HEADER_ENTRY_PATTERN.finditer(match.group(0)):
        key, value = entry.group(1), entry.group(2).strip()
        if key in values:
            values[key].append(value)
        else:
            extras.append((key, value))

    return MetadataFields(
        name=tuple(values["name"]),
        description=tuple(values["description"]),
        include=tuple(values["include"]),
        exclude=tuple(values["exclude"]),
        extras=tuple(extras),
    )


def format_metadata_list(fields: MetadataFields, *, with_extras: bool = False) -> str:
    """Render metadata as `@key: value` lines for diagnostics."""
    extras = fields.extras if with_extras else ()
    if fields.is_empty and not extras:
        return NO_METADATA_TEXT
    lines = [f"@{key}: {value}" for key, values in fields.items() for value in values]
    lines.extend(f"@{key}: {value}" for key, value in extras)
    return "\n".join(lines)
