"""Step definitions, the registry that matches them, and invocation results."""

from __future__ import annotations

import enum
import itertools
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar

from .regex import Regex, RegexSubmatch
from .table import Table

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class InvokeResultType(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


@dataclass(frozen=True)
class InvokeResult:
    """The outcome of running a step; a bare result counts as a failure."""

    type: InvokeResultType = InvokeResultType.FAILURE
    description: str = ""

    @staticmethod
    def success() -> InvokeResult:
        return InvokeResult(InvokeResultType.SUCCESS)

    @staticmethod
    def failure(description: str | None = None) -> InvokeResult:
        return InvokeResult(InvokeResultType.FAILURE, description or "")

    @staticmethod
    def pending(description: str | None = None) -> InvokeResult:
        return InvokeResult(InvokeResultType.PENDING, description or "")

    def is_success(self) -> bool:
        return self.type is InvokeResultType.SUCCESS

    def is_pending(self) -> bool:
        return self.type is InvokeResultType.PENDING


def _convert(value: str, kind: Callable[[str], Any]) -> Any:
    """Read a value the way a stream extraction would: a leading number is enough."""
    if kind is str:
        return value
    if kind is int:
        found = _INT_PREFIX.match(value)
        if found is None:
            raise ValueError(f"Cannot convert {value!r} to int")
        return int(found.group())
    if kind is float:
        found = _FLOAT_PREFIX.match(value)
        if found is None:
            raise ValueError(f"Cannot convert {value!r} to float")
        return float(found.group())
    return kind(value)


class InvokeArgs:
    """The string arguments and the optional table handed to a step."""

    def __init__(self, args: Iterable[str] | None = None, table: Table | None = None) -> None:
        self.args: list[str] = list(args) if args is not None else []
        self.table: Table = table if table is not None else Table()

    def add_arg(self, arg: str) -> None:
        self.args.append(arg)

    def get_invoke_arg(self, index: int, kind: Callable[[str], Any] = str) -> Any:
        """Return argument ``index`` converted to ``kind``; raise ValueError if it cannot be."""
        return _convert(self.args[index], kind)


@dataclass
class SingleStepMatch:
    """A step that matched a description, with the groups it captured."""

    step_info: StepInfo | None = None
    submatches: list[RegexSubmatch] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.step_info is not None


class MatchResult:
    """Every step that matched a description."""

    def __init__(self) -> None:
        self.result_set: list[SingleStepMatch] = []

    def add_match(self, match: SingleStepMatch) -> None:
        self.result_set.append(match)

    def __bool__(self) -> bool:
        return bool(self.result_set)

    def __len__(self) -> int:
        return len(self.result_set)

    def __iter__(self) -> Iterator[SingleStepMatch]:
        return iter(self.result_set)


class StepInfo:
    """A step definition: its pattern, where it came from and the class that runs it."""

    _ids: ClassVar[Iterator[int]] = itertools.count(1)

    def __init__(
        self,
        step_matcher: str,
        source: str = "",
        step_class: type[BasicStep] | None = None,
    ) -> None:
        self.regex = Regex(step_matcher)
        self.source = source
        self.step_class = step_class
        self.id = next(StepInfo._ids)

    def matches(self, step_description: str) -> SingleStepMatch:
        found = self.regex.find(step_description)
        if not found:
            return SingleStepMatch()
        return SingleStepMatch(self, list(found.submatches))

    def invoke_step(self, args: InvokeArgs) -> InvokeResult:
        """Run a fresh instance of the step class with the given arguments."""
        if self.step_class is None:
            return InvokeResult.failure("Step has no body")
        return self.step_class().invoke(args)

    def __repr__(self) -> str:
        return f"StepInfo(id={self.id}, regex={str(self.regex)!r}, source={self.source!r})"


class StepManager:
    """Registry of step definitions keyed by id."""

    def __init__(self) -> None:
        self._steps: dict[int, StepInfo] = {}

    def add_step(self, step_info: StepInfo) -> int:
        return self._steps.setdefault(step_info.id, step_info).id

    def step_matches(self, step_description: str) -> MatchResult:
        result = MatchResult()
        for _, step_info in sorted(self._steps.items()):
            match = step_info.matches(step_description)
            if match:
                result.add_match(match)
        return result

    def get_step(self, step_id: int) -> StepInfo | None:
        return self._steps.get(step_id)

    def clear(self) -> None:
        self._steps.clear()

    def __len__(self) -> int:
        return len(self._steps)


class BasicStep(ABC):
    """A step body; invoking it turns raised errors into failure results."""

    args: InvokeArgs | None = None
    _arg_index: int = 0
    _current_result: InvokeResult = InvokeResult.success()

    def invoke(self, args: InvokeArgs) -> InvokeResult:
        self.args = args
        self._arg_index = 0
        self._current_result = InvokeResult.success()
        try:
            returned = self.invoke_step_body()
        except Exception as exc:
            return InvokeResult.failure(str(exc))
        if self._current_result.is_pending():
            return self._current_result
        return returned

    def pending(self, description: str | None = None) -> None:
        """Mark the running step as pending."""
        self._current_result = InvokeResult.pending(description)

    def regex_param(self, kind: Callable[[str], Any] = str) -> Any:
        """Return the next argument converted to ``kind``."""
        if self.args is None:
            raise RuntimeError("Step is not being invoked")
        value = self.args.get_invoke_arg(self._arg_index, kind)
        self._arg_index += 1
        return value

    @abstractmethod
    def body(self) -> None:
        """The user's step code."""

    @abstractmethod
    def invoke_step_body(self) -> InvokeResult:
        """Run the body and report its result."""


class GenericStep(BasicStep):
    """A step run without any test framework: returning normally is success."""

    def invoke_step_body(self) -> InvokeResult:
        self.body()
        return InvokeResult.success()