"""Regular expression matching that reports captured groups with positions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegexSubmatch:
    """A captured group: its text and its code point offset (-1 if unmatched)."""

    value: str
    position: int


@dataclass(frozen=True)
class RegexMatch:
    """The outcome of a search: whether it matched, and the captured groups."""

    matched: bool = False
    submatches: list[RegexSubmatch] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.matched


class Regex:
    """A compiled pattern that searches strings and collects submatches."""

    def __init__(self, expr: str) -> None:
        self._pattern = re.compile(expr)
        self._expr = expr

    def find(self, expression: str) -> RegexMatch:
        """Search for the first match; every group becomes a submatch."""
        match = self._pattern.search(expression)
        if match is None:
            return RegexMatch()
        submatches = [
            RegexSubmatch(match.group(index) or "", match.start(index))
            for index in range(1, self._pattern.groups + 1)
        ]
        return RegexMatch(True, submatches)

    def find_all(self, expression: str) -> RegexMatch:
        """Find every token; the first group of each becomes a submatch."""
        group = 1 if self._pattern.groups else 0
        submatches = [
            RegexSubmatch(match.group(group) or "", match.start(group))
            for match in self._pattern.finditer(expression)
        ]
        return RegexMatch(bool(submatches), submatches)

    @property
    def pattern(self) -> str:
        return self._expr

    def __str__(self) -> str:
        return self._expr

    def __repr__(self) -> str:
        return f"Regex({self._expr!r})"