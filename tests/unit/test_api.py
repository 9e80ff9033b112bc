"""Unit tests for the public spy/patch/assert API."""

import pytest

import callpatch
import sample_targets
from callpatch import (
    MissingCallError,
    Patcher,
    UnexpectedCallError,
    UnresolvableTargetError,
    _,
    assert_called,
    called,
    patch,
    refute_called,
    restore,
    spy,
)
from callpatch.pattern import CallPattern

ORIGINAL_UPCASE = sample_targets.upcase


def test_patch_returns_constant_unchanged() -> None:
    expected = {"id": 123}
    assert patch(sample_targets, "add", expected) is expected
    assert sample_targets.add(1, 2) is expected


def test_patch_returns_function_unchanged() -> None:
    def fake(text):
        return text * 2

    assert patch(sample_targets, "upcase", fake) is fake
    assert sample_targets.upcase("ab") == "abab"


def test_patched_value_is_recorded_and_queryable() -> None:
    patch(sample_targets, "upcase", "replaced")

    assert sample_targets.upcase("anything") == "replaced"
    assert called(sample_targets, "upcase", "anything")
    assert not called(sample_targets, "upcase", "other")


def test_spy_keeps_behavior() -> None:
    spy(sample_targets)

    assert sample_targets.upcase("hello") == "HELLO"
    assert called(sample_targets, "upcase", "hello")
    assert called(sample_targets, "upcase", _)
    assert not called(sample_targets, "upcase", "goodbye")


def test_spy_returns_none() -> None:
    assert spy(sample_targets) is None


def test_spy_twice_keeps_history_and_patches() -> None:
    patch(sample_targets, "add", 0)
    sample_targets.upcase("a")

    spy(sample_targets)

    assert called(sample_targets, "upcase", "a")
    assert sample_targets.add(1, 2) == 0


def test_repeated_patches_keep_other_functions() -> None:
    patch(sample_targets, "add", 0)
    patch(sample_targets, "upcase", "up")

    assert sample_targets.add(1, 2) == 0
    assert sample_targets.upcase("a") == "up"


def test_patch_by_dotted_path() -> None:
    patch("sample_targets", "add", 0)
    assert sample_targets.add(1, 2) == 0
    assert called("sample_targets", "add", 1, 2)


def test_spy_unresolvable_target() -> None:
    with pytest.raises(UnresolvableTargetError):
        spy("callpatch_no_such_module")


def test_restore_module_level() -> None:
    patch(sample_targets, "upcase", "replaced")
    restore(sample_targets)
    assert sample_targets.upcase is ORIGINAL_UPCASE
    restore(sample_targets)


def test_history_of_untouched_target_is_empty() -> None:
    assert callpatch.history(sample_targets) == ()


def test_history_lists_calls() -> None:
    spy(sample_targets)
    sample_targets.add(1, 2)
    sample_targets.add(3, 4)

    calls = callpatch.history(sample_targets)
    assert [call.args for call in calls] == [(1, 2), (3, 4)]
    assert [call.result for call in calls] == [3, 7]


def test_keyword_arguments_in_queries() -> None:
    spy(sample_targets)
    sample_targets.greet("Ann", greeting="Hi")

    assert called(sample_targets, "greet", "Ann", greeting="Hi")
    assert called(sample_targets, "greet", _, greeting=_)
    assert not called(sample_targets, "greet", "Ann", "Hi")


def test_keyword_only_functions() -> None:
    patch(sample_targets, "address", "patched")

    assert sample_targets.address(host="example") == "patched"
    assert sample_targets.address(host="example", port=8080) == "patched"
    assert called(sample_targets, "address", host="example", port=_)


def test_assert_called_passes_for_matching_call() -> None:
    spy(sample_targets)
    sample_targets.add(1, 2)

    assert_called(sample_targets, "add", 1, 2)
    assert_called(sample_targets, "add", _, 2)


def test_assert_called_reports_missing_call() -> None:
    spy(sample_targets)
    sample_targets.add(1, 2)
    sample_targets.upcase("a")

    with pytest.raises(MissingCallError) as excinfo:
        assert_called(sample_targets, "add", 3, _)

    assert str(excinfo.value) == (
        "\n"
        "\n"
        "Expected but did not receive the following call:\n"
        "\n"
        "   sample_targets.add(3,_)\n"
        "\n"
        "Calls which were received:\n"
        "\n"
        "1. sample_targets.add(1,2) -> 3\n"
        "2. sample_targets.upcase('a') -> 'A'"
    )
    assert excinfo.value.target is sample_targets
    assert excinfo.value.pattern == CallPattern.of("add", 3, _)
    assert excinfo.value.history.splitlines()[0] == "1. sample_targets.add(1,2) -> 3"


def test_missing_call_is_an_assertion_error() -> None:
    with pytest.raises(AssertionError):
        assert_called(sample_targets, "add", 1, 2)


def test_refute_called_passes_without_matching_call() -> None:
    spy(sample_targets)
    sample_targets.add(1, 2)

    refute_called(sample_targets, "add", 2, 1)
    refute_called(sample_targets, "add", _)
    refute_called(sample_targets, "upcase", _)


def test_refute_called_reports_unexpected_call() -> None:
    patch(sample_targets, "upcase", "replaced")
    sample_targets.upcase("hello")

    with pytest.raises(UnexpectedCallError) as excinfo:
        refute_called(sample_targets, "upcase", _)

    message = str(excinfo.value)
    assert "Unexpected call received:" in message
    assert "   sample_targets.upcase(_)" in message
    assert "1. sample_targets.upcase('hello') -> 'replaced'" in message


def test_patcher_is_independent_of_default() -> None:
    with Patcher() as session:
        session.patch(sample_targets, "add", 0)
        assert sample_targets.add(1, 2) == 0
        assert session.called(sample_targets, "add", 1, 2)
        assert not called(sample_targets, "add", 1, 2)
    assert sample_targets.add(1, 2) == 3


def test_patcher_fixture(patcher) -> None:
    assert isinstance(patcher, Patcher)
    assert patcher is not callpatch.default_patcher()

    patcher.spy(sample_targets)
    sample_targets.upcase("x")

    patcher.assert_called(sample_targets, "upcase", "x")
    patcher.refute_called(sample_targets, "upcase", "y")
    assert len(patcher.history(sample_targets)) == 1


def test_patcher_restore_and_unload() -> None:
    session = Patcher()
    session.patch(sample_targets, "upcase", "replaced")
    session.restore(sample_targets)
    assert sample_targets.upcase is ORIGINAL_UPCASE

    session.spy(sample_targets)
    session.unload()
    assert sample_targets.upcase is ORIGINAL_UPCASE


def test_called_survives_failing_comparisons() -> None:
    class Broken:
        def __eq__(self, other):
            raise RuntimeError("comparison failed")

        __hash__ = object.__hash__

    spy(sample_targets)
    sample_targets.upcase("a")

    assert not called(sample_targets, "upcase", Broken())
    refute_called(sample_targets, "upcase", Broken())
