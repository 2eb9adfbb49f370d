"""Hooks run around scenarios and steps, selected by tag expressions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from .steps import InvokeArgs, InvokeResult, StepInfo
from .tags import AndTagExpression, Scenario


class CallableStep(ABC):
    """Continues a chain of around-step hooks."""

    @abstractmethod
    def call(self) -> None:
        """Run the rest of the chain."""


class Hook(ABC):
    """User code that runs when a scenario's tags match the hook's expression."""

    tag_expression: AndTagExpression = AndTagExpression()

    def set_tags(self, csv_tag_notation: str) -> None:
        self.tag_expression = AndTagExpression(csv_tag_notation)

    def invoke_hook(self, scenario: Scenario | None, step: CallableStep | None) -> None:
        if self.tags_match(scenario):
            self.body()
        else:
            self.skip_hook()

    def skip_hook(self) -> None:
        """Called instead of the body when the tags do not match."""

    @abstractmethod
    def body(self) -> None:
        """The user's hook code."""

    def tags_match(self, scenario: Scenario | None) -> bool:
        return scenario is None or self.tag_expression.matches(scenario.tags)


class BeforeHook(Hook):
    """Runs before each scenario."""


class AroundStepHook(Hook):
    """Wraps a step; the body must call ``self.step.call()`` to run it."""

    step: CallableStep | None = None

    def invoke_hook(self, scenario: Scenario | None, step: CallableStep | None) -> None:
        self.step = step
        super().invoke_hook(scenario, None)

    def skip_hook(self) -> None:
        if self.step is not None:
            self.step.call()


class AfterStepHook(Hook):
    """Runs after each step."""


class AfterHook(Hook):
    """Runs after each scenario."""


class UnconditionalHook(Hook):
    """A hook that ignores tags."""

    def invoke_hook(self, scenario: Scenario | None, step: CallableStep | None) -> None:
        self.body()


class BeforeAllHook(UnconditionalHook):
    """Runs once before every scenario."""


class AfterAllHook(UnconditionalHook):
    """Runs once after every scenario."""


class HookRegistrar:
    """Holds the hooks of each kind; after-hooks run in reverse order of registration."""

    def __init__(self) -> None:
        self._before_all: list[Hook] = []
        self._before: list[Hook] = []
        self._around_step: list[AroundStepHook] = []
        self._after_step: list[Hook] = []
        self._after: list[Hook] = []
        self._after_all: list[Hook] = []

    @staticmethod
    def _exec_hooks(hooks: Iterable[Hook], scenario: Scenario | None) -> None:
        for hook in list(hooks):
            hook.invoke_hook(scenario, None)

    def add_before_hook(self, hook: BeforeHook) -> None:
        self._before.append(hook)

    def exec_before_hooks(self, scenario: Scenario | None) -> None:
        self._exec_hooks(self._before, scenario)

    def add_around_step_hook(self, hook: AroundStepHook) -> None:
        self._around_step.append(hook)

    def exec_step_chain(
        self, scenario: Scenario | None, step_info: StepInfo | None, args: InvokeArgs
    ) -> InvokeResult:
        return StepCallChain(scenario, step_info, args, self._around_step).exec()

    def add_after_step_hook(self, hook: AfterStepHook) -> None:
        self._after_step.insert(0, hook)

    def exec_after_step_hooks(self, scenario: Scenario | None) -> None:
        self._exec_hooks(self._after_step, scenario)

    def add_after_hook(self, hook: AfterHook) -> None:
        self._after.insert(0, hook)

    def exec_after_hooks(self, scenario: Scenario | None) -> None:
        self._exec_hooks(self._after, scenario)

    def add_before_all_hook(self, hook: BeforeAllHook) -> None:
        self._before_all.append(hook)

    def exec_before_all_hooks(self) -> None:
        self._exec_hooks(self._before_all, None)

    def add_after_all_hook(self, hook: AfterAllHook) -> None:
        self._after_all.insert(0, hook)

    def exec_after_all_hooks(self) -> None:
        self._exec_hooks(self._after_all, None)


class StepCallChain:
    """Runs the around-step hooks in order, with the step itself innermost."""

    def __init__(
        self,
        scenario: Scenario | None,
        step_info: StepInfo | None,
        step_args: InvokeArgs,
        around_hooks: Iterable[AroundStepHook],
    ) -> None:
        self.scenario = scenario
        self.step_info = step_info
        self.step_args = step_args
        self._hooks = iter(list(around_hooks))
        self.result = InvokeResult()

    def exec(self) -> InvokeResult:
        self.exec_next()
        return self.result

    def exec_next(self) -> None:
        hook = next(self._hooks, None)
        if hook is None:
            self._exec_step()
        else:
            hook.invoke_hook(self.scenario, CallableStepChain(self))

    def _exec_step(self) -> None:
        if self.step_info is not None:
            self.result = self.step_info.invoke_step(self.step_args)


class CallableStepChain(CallableStep):
    """Lets an around-step hook continue its chain."""

    def __init__(self, chain: StepCallChain) -> None:
        self.chain = chain

    def call(self) -> None:
        self.chain.exec_next()