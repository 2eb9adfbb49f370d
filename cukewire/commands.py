"""Wire protocol commands and the responses they produce when run on an engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .engine import CukeEngine, InvokeFailureException, PendingStepException, StepMatch


@dataclass(frozen=True)
class WireResponse:
    """Something to send back to the client."""


@dataclass(frozen=True)
class SuccessResponse(WireResponse):
    """The command worked and has nothing else to report."""


@dataclass(frozen=True)
class FailureResponse(WireResponse):
    """The command failed, optionally with a message and an error type."""

    message: str = ""
    exception_type: str = ""


@dataclass(frozen=True)
class PendingResponse(WireResponse):
    """The step invoked is not implemented yet."""

    message: str = ""


@dataclass(frozen=True)
class StepMatchesResponse(WireResponse):
    """The steps that matched a name."""

    matching_steps: tuple[StepMatch, ...] = ()


@dataclass(frozen=True)
class SnippetTextResponse(WireResponse):
    """A step definition skeleton."""

    step_snippet: str = ""


class WireCommand(ABC):
    """A decoded request that can be run on an engine."""

    @abstractmethod
    def run(self, engine: CukeEngine) -> WireResponse:
        """Perform the command and describe the outcome."""


@dataclass(frozen=True)
class BeginScenarioCommand(WireCommand):
    """Start a scenario with the given tags."""

    tags: tuple[str, ...] = ()

    def run(self, engine: CukeEngine) -> WireResponse:
        engine.begin_scenario(list(self.tags))
        return SuccessResponse()


@dataclass(frozen=True)
class EndScenarioCommand(WireCommand):
    """End a scenario with the given tags."""

    tags: tuple[str, ...] = ()

    def run(self, engine: CukeEngine) -> WireResponse:
        engine.end_scenario(list(self.tags))
        return SuccessResponse()


@dataclass(frozen=True)
class StepMatchesCommand(WireCommand):
    """Look up the steps that match a name."""

    step_name: str

    def run(self, engine: CukeEngine) -> WireResponse:
        return StepMatchesResponse(tuple(engine.step_matches(self.step_name)))


@dataclass(frozen=True)
class InvokeCommand(WireCommand):
    """Run a step with its arguments and table."""

    step_id: str
    args: tuple[str, ...] = ()
    table_arg: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    def run(self, engine: CukeEngine) -> WireResponse:
        try:
            engine.invoke_step(
                self.step_id, list(self.args), [list(row) for row in self.table_arg]
            )
        except InvokeFailureException as exc:
            return FailureResponse(exc.message, exc.exception_type)
        except PendingStepException as exc:
            return PendingResponse(exc.message)
        except Exception:
            return FailureResponse()
        return SuccessResponse()


@dataclass(frozen=True)
class SnippetTextCommand(WireCommand):
    """Ask for a step definition skeleton."""

    keyword: str
    name: str
    multiline_arg_class: str

    def run(self, engine: CukeEngine) -> WireResponse:
        return SnippetTextResponse(
            engine.snippet_text(self.keyword, self.name, self.multiline_arg_class)
        )


@dataclass(frozen=True)
class FailingCommand(WireCommand):
    """Stands in for a request that could not be understood."""

    def run(self, engine: CukeEngine) -> WireResponse:
        return FailureResponse()