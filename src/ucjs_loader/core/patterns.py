"""Wildcard URL patterns.

A pattern is a literal URL in which `*` stands for any run of characters,
including none. Patterns always match the whole URL. The case-insensitive token
`main` stands for the host's primary document URL.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

PRIMARY_URL_ALIAS = "main"
WILDCARD = "*"

CHROME_DOCUMENT_PATTERN = re.compile(r"^chrome:.+\.xul$", re.IGNORECASE)

UrlPredicate = Callable[[str], bool]


def resolve_alias(pattern: str, primary_url: str) -> str:
    """Substitute the primary URL when the pattern is the alias token."""
    if pattern.lower() == PRIMARY_URL_ALIAS:
        return primary_url
    return pattern


@lru_cache(maxsize=512)
def _compile_regex(pattern: str) -> re.Pattern[str]:
    source = ".*?".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(source)


def compile_pattern(pattern: str, primary_url: str) -> UrlPredicate:
    """Compile a wildcard pattern into a whole-URL predicate.

    Args:
        pattern: Wildcard pattern, or the `main` alias
        primary_url: URL the alias resolves to

    Returns:
        Function returning True when a URL matches the pattern in full
    """
    regex = _compile_regex(resolve_alias(pattern, primary_url))

    def matches(url: str) -> bool:
        return regex.fullmatch(url) is not None

    return matches


@dataclass(frozen=True)
class UrlBlockList:
    """Deny list of documents the loader must never touch.

    A URL is blocked when it matches any configured pattern, or when it does
    not name a chrome document at all.
    """

    patterns: tuple[str, ...]

    def is_blocked(self, url: str) -> bool:
        if CHROME_DOCUMENT_PATTERN.match(url) is None:
            return True
        # The alias is meaningless in a deny list; pass the pattern through.
        return any(_compile_regex(pattern).fullmatch(url) for pattern in self.patterns)
