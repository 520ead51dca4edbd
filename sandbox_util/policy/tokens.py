"""
Capability Token Parsing for Sandbox-Util

This module turns the comma separated capability lists handed to us through
the environment into a canonical token set:
- Application defaults and user overrides are merged
- Empty entries and surrounding whitespace are dropped
- Unknown tokens are kept; they simply never match a query
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

DELIMITER = ","


def parse_list(*sources: str | None) -> tuple[str, ...]:
    """
    Split one or more delimiter separated strings into an ordered list.

    Duplicates are dropped, keeping the first occurrence.

    Args:
        sources: Raw strings, ``None`` is treated as empty

    Returns:
        Tuple of unique, non-empty entries in first-seen order
    """
    seen: dict[str, None] = {}
    for source in sources:
        if not source:
            continue
        for entry in source.split(DELIMITER):
            entry = entry.strip()
            if entry:
                seen.setdefault(entry, None)
    return tuple(seen)


@dataclass(frozen=True)
class TokenSet:
    """De-duplicated, immutable set of capability tokens."""

    tokens: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_sources(cls, application: str | None = None, user: str | None = None) -> "TokenSet":
        """Build a token set from the application default and user override lists."""
        return cls.of(parse_list(application, user))

    @classmethod
    def of(cls, tokens: Iterable[str]) -> "TokenSet":
        return cls(frozenset(t.strip() for t in tokens if t and t.strip()))

    def __contains__(self, token: object) -> bool:
        if isinstance(token, Enum):
            token = token.value
        return token in self.tokens

    def __len__(self) -> int:
        return len(self.tokens)
