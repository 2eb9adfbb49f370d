import pytest

from cukewire.steps import (
    GenericStep,
    InvokeArgs,
    InvokeResult,
    InvokeResultType,
    MatchResult,
    SingleStepMatch,
    StepInfo,
    StepManager,
)

A_MATCHER = "a matcher"
ANOTHER_MATCHER = "another matcher"
A_THIRD_MATCHER = "a third matcher"
NO_MATCH = "no match"
PENDING_STEP_DESCRIPTION = "A description"


class EmptyStep(GenericStep):
    def body(self):
        pass


class PendingStep(GenericStep):
    def body(self):
        self.pending()


class PendingStepWithDescription(GenericStep):
    def body(self):
        self.pending(PENDING_STEP_DESCRIPTION)


class RaisingStep(GenericStep):
    def body(self):
        raise ValueError("boom")


class CheckAllParametersWithMacro(GenericStep):
    def body(self):
        assert self.regex_param(int) == 42
        assert self.regex_param(float) == 4.2
        assert self.regex_param(str) == "fortytwo"
        assert self.regex_param(str) == "forty two"


class CheckAllParametersWithoutMacro(GenericStep):
    def body(self):
        args = self.args
        assert args.get_invoke_arg(0, int) == 42
        assert args.get_invoke_arg(0, float) == 42.0
        assert args.get_invoke_arg(1, int) == 4
        assert args.get_invoke_arg(1, float) == 4.2
        assert args.get_invoke_arg(2, str) == "fortytwo"
        assert args.get_invoke_arg(3, str) == "forty two"


def build_invoke_args():
    args = InvokeArgs()
    for value in ("42", "4.2", "fortytwo", "forty two"):
        args.add_arg(value)
    return args


@pytest.fixture
def manager():
    return StepManager()


def add_definition(manager, matcher):
    return manager.add_step(StepInfo(matcher, "", EmptyStep))


def unique_match_id_or_zero(manager, text):
    result = manager.step_matches(text).result_set
    return result[0].step_info.id if len(result) == 1 else 0


def extracted_params(manager, text):
    result = manager.step_matches(text).result_set
    assert len(result) == 1
    return {sub.position: sub.value for sub in result[0].submatches}


def test_holds_non_conflicting_steps(manager):
    assert len(manager) == 0
    for matcher in (A_MATCHER, ANOTHER_MATCHER, A_THIRD_MATCHER):
        add_definition(manager, matcher)
    assert len(manager) == 3


def test_holds_conflicting_steps(manager):
    assert len(manager) == 0
    for _ in range(3):
        add_definition(manager, A_MATCHER)
    assert len(manager) == 3


def test_matches_steps_with_non_regex_matchers(manager):
    assert not manager.step_matches(NO_MATCH)
    a_id = add_definition(manager, A_MATCHER)
    assert unique_match_id_or_zero(manager, A_MATCHER) == a_id
    another_id = add_definition(manager, ANOTHER_MATCHER)
    assert unique_match_id_or_zero(manager, ANOTHER_MATCHER) == another_id
    assert unique_match_id_or_zero(manager, A_MATCHER) == a_id


def test_matches_steps_with_regex_matchers(manager):
    add_definition(manager, "match the number (\\d+)")
    assert len(manager.step_matches("match the number 42")) == 1
    assert len(manager.step_matches("match the number (\\d+)")) != 1
    assert len(manager.step_matches("match the number one")) == 0


def test_extracts_params_from_regex_matchers(manager):
    add_definition(manager, "match no params")
    assert extracted_params(manager, "match no params") == {}
    add_definition(manager, "match the (\\w+) param")
    assert extracted_params(manager, "match the first param") == {10: "first"}
    add_definition(manager, "match a (.+)$")
    assert extracted_params(manager, "match a  string  with  spaces  ") == {
        8: " string  with  spaces  "
    }
    add_definition(manager, "match params (\\w+), (\\w+) and (\\w+)")
    assert extracted_params(manager, "match params A, B and C") == {13: "A", 16: "B", 22: "C"}


def test_handles_multiple_matches(manager):
    add_definition(manager, A_MATCHER)
    add_definition(manager, ANOTHER_MATCHER)
    add_definition(manager, A_MATCHER)
    assert len(manager.step_matches(A_MATCHER)) == 2


def test_matches_steps_with_non_ascii_matchers(manager):
    step_id = add_definition(manager, "خيار")
    assert unique_match_id_or_zero(manager, "خيار") == step_id
    assert not manager.step_matches("cetriolo")
    assert not manager.step_matches("огурец")
    assert not manager.step_matches("黄瓜")


def test_matches_correctly(manager):
    step_id = add_definition(manager, "static matcher")
    result = manager.step_matches("static matcher")
    assert result.result_set[0].step_info.id == step_id


def test_get_step_and_clear(manager):
    info = StepInfo("some step", "file.py:3", EmptyStep)
    manager.add_step(info)
    assert manager.get_step(info.id) is info
    assert manager.get_step(-1) is None
    manager.clear()
    assert len(manager) == 0
    assert manager.get_step(info.id) is None


def test_step_ids_are_unique_and_increasing():
    first = StepInfo("x")
    second = StepInfo("x")
    assert second.id > first.id


def test_single_step_match_truthiness():
    assert not SingleStepMatch()
    assert StepInfo("abc").matches("xabcx").step_info is not None
    assert not StepInfo("abc").matches("xyz")


def test_match_result_collects_matches():
    result = MatchResult()
    assert not result
    match = StepInfo("abc").matches("abc")
    result.add_match(match)
    assert result
    assert list(result) == [match]


def test_handles_pending_steps():
    result = PendingStep().invoke(InvokeArgs())
    assert result.is_pending()
    assert result.description == ""

    result = PendingStepWithDescription().invoke(InvokeArgs())
    assert result.is_pending()
    assert result.description == PENDING_STEP_DESCRIPTION


def test_exception_in_body_becomes_failure():
    result = RaisingStep().invoke(InvokeArgs())
    assert result.type is InvokeResultType.FAILURE
    assert result.description == "boom"


def test_empty_step_succeeds():
    assert EmptyStep().invoke(InvokeArgs()).is_success()


def test_default_invoke_result_is_failure():
    result = InvokeResult()
    assert not result.is_success()
    assert not result.is_pending()
    assert result.type is InvokeResultType.FAILURE


def test_invoke_result_factories():
    assert InvokeResult.success().is_success()
    assert InvokeResult.failure("Failed").description == "Failed"
    assert InvokeResult.failure().description == ""
    assert InvokeResult.pending("later").is_pending()


@pytest.mark.parametrize(
    "index, kind, expected",
    [
        (0, int, 42),
        (0, float, 42.0),
        (0, str, "42"),
        (1, int, 4),
        (1, float, 4.2),
        (1, str, "4.2"),
        (2, str, "fortytwo"),
        (3, str, "forty two"),
    ],
)
def test_get_invoke_arg_converts(index, kind, expected):
    assert build_invoke_args().get_invoke_arg(index, kind) == expected


@pytest.mark.parametrize("index", [2, 3])
@pytest.mark.parametrize("kind", [int, float])
def test_get_invoke_arg_rejects_non_numbers(index, kind):
    with pytest.raises(ValueError):
        build_invoke_args().get_invoke_arg(index, kind)


@pytest.mark.parametrize("step_class", [CheckAllParametersWithMacro, CheckAllParametersWithoutMacro])
def test_invoke_handles_parameters(manager, step_class):
    step_id = manager.add_step(StepInfo("check", "", step_class))
    result = manager.get_step(step_id).invoke_step(build_invoke_args())
    assert result.is_success(), result.description


def test_failed_assertion_in_body_is_reported():
    args = InvokeArgs(["1", "4.2", "fortytwo", "forty two"])
    result = CheckAllParametersWithMacro().invoke(args)
    assert result.type is InvokeResultType.FAILURE


def test_step_info_without_class_fails():
    assert not StepInfo("no body").invoke_step(InvokeArgs()).is_success()


def test_invoke_args_holds_table():
    args = InvokeArgs()
    args.table.add_column("C1")
    args.table.add_row(["R1"])
    assert args.table.hashes() == [{"C1": "R1"}]