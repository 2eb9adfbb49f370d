"""The interface the wire protocol drives, and the errors a step invocation raises."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class StepMatchArg:
    """A captured argument and its code point offset in the step text."""

    value: str
    position: int


@dataclass
class StepMatch:
    """A step definition that matched, as reported over the wire."""

    id: str
    args: list[StepMatchArg] = field(default_factory=list)
    source: str = ""
    regexp: str = ""


class InvokeException(Exception):
    """A step did not succeed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvokeFailureException(InvokeException):
    """A step failed, with the kind of error that caused it."""

    def __init__(self, message: str, exception_type: str) -> None:
        super().__init__(message)
        self.exception_type = exception_type


class PendingStepException(InvokeException):
    """A step is not implemented yet."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class CukeEngine(ABC):
    """Entry point that finds, runs and describes steps."""

    @abstractmethod
    def step_matches(self, name: str) -> list[StepMatch]:
        """Find the steps whose pattern matches ``name``."""

    @abstractmethod
    def begin_scenario(self, tags: Sequence[str]) -> None:
        """Start a scenario."""

    @abstractmethod
    def invoke_step(
        self, step_id: str, args: Sequence[str], table_arg: Sequence[Sequence[str]]
    ) -> None:
        """Run a step; raise InvokeException if it fails or is pending."""

    @abstractmethod
    def end_scenario(self, tags: Sequence[str]) -> None:
        """End a scenario."""

    @abstractmethod
    def snippet_text(self, keyword: str, name: str, multiline_arg_class: str) -> str:
        """Return a step definition skeleton for an undefined step."""