"""Tag expressions used to select hooks, and the scenario that carries tags."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from .regex import Regex

_AND_CSV_REGEX = Regex('\\s*"([^"]+)"\\s*(?:,|$)')
_OR_CSV_REGEX = Regex("\\s*@(\\w+)\\s*(?:,|$)")


class TagExpression(ABC):
    """Something that decides whether a list of tags is selected."""

    @abstractmethod
    def matches(self, tags: Iterable[str]) -> bool:
        """Return True if the tags satisfy this expression."""


class OrTagExpression(TagExpression):
    """Matches when any of the listed tags (``@a,@b``) is present."""

    def __init__(self, csv_tag_notation: str) -> None:
        self.or_tags = [s.value for s in _OR_CSV_REGEX.find_all(csv_tag_notation).submatches]

    def matches(self, tags: Iterable[str]) -> bool:
        present = set(tags)
        return any(tag in present for tag in self.or_tags)


class AndTagExpression(TagExpression):
    """Matches when every quoted OR-group (``"@a,@b", "@c"``) matches."""

    def __init__(self, csv_tag_notation: str = "") -> None:
        self.or_expressions = [
            OrTagExpression(s.value)
            for s in _AND_CSV_REGEX.find_all(csv_tag_notation).submatches
        ]

    def matches(self, tags: Iterable[str]) -> bool:
        tag_list = list(tags)
        return all(expr.matches(tag_list) for expr in self.or_expressions)


@dataclass
class Scenario:
    """A running scenario, identified by its tags."""

    tags: list[str] = field(default_factory=list)