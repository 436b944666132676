"""Tests for KeyedFieldMatcher (arrayasserts._field_matchers)."""

from __future__ import annotations

import pytest
from hamcrest import all_of, assert_that, equal_to, greater_than, is_not
from hamcrest.core.string_description import StringDescription

from arrayasserts import (
    FailureReason,
    InvalidArgumentError,
    KeyedFieldMatcher,
    has_key_with,
)
from arrayasserts.testing import KeyedObject, RecordingMatcher


def mismatch_of(matcher: KeyedFieldMatcher, item: object) -> str:
    description = StringDescription()
    assert matcher.matches(item, description) is False
    return str(description)


class TestEvaluate:
    def test_present_and_matching(self) -> None:
        assert KeyedFieldMatcher("x", equal_to(5)).matches({"x": 5}) is True

    def test_missing_key(self) -> None:
        outcome = KeyedFieldMatcher("x", equal_to(5)).evaluate({})
        assert outcome.passed is False
        assert outcome.reason is FailureReason.KEY_MISSING

    def test_value_mismatch(self) -> None:
        outcome = KeyedFieldMatcher("x", equal_to(5)).evaluate({"x": 6})
        assert outcome.reason is FailureReason.VALUE_MISMATCH
        assert outcome.context["mismatch"] == "was <6>"

    def test_bare_value_is_compared_for_equality(self) -> None:
        m = KeyedFieldMatcher("x", 5)
        assert m.matches({"x": 5}) is True
        assert m.matches({"x": "5"}) is False

    @pytest.mark.parametrize("item", [None, 5, "x", b"x"], ids=repr)
    def test_not_a_container(self, item: object) -> None:
        outcome = KeyedFieldMatcher("x", 5).evaluate(item)
        assert outcome.reason is FailureReason.NOT_CONTAINER

    def test_iterables_are_not_mappings(self) -> None:
        gen = (v for v in [1])
        assert KeyedFieldMatcher(0, 1).evaluate({1}).reason is FailureReason.NOT_MAPPING
        assert KeyedFieldMatcher(0, 1).evaluate(gen).reason is FailureReason.NOT_MAPPING
        assert next(gen) == 1

    def test_integer_key_addresses_list_position(self) -> None:
        assert KeyedFieldMatcher(1, "b").matches(["a", "b"]) is True
        outcome = KeyedFieldMatcher(2, "b").evaluate(["a", "b"])
        assert outcome.reason is FailureReason.KEY_MISSING

    def test_key_accessible_object(self) -> None:
        obj = KeyedObject({"x": 5})
        assert KeyedFieldMatcher("x", 5).matches(obj) is True
        outcome = KeyedFieldMatcher("y", 5).evaluate(obj)
        assert outcome.reason is FailureReason.KEY_MISSING

    def test_none_value_is_present(self) -> None:
        assert KeyedFieldMatcher("x", None).matches({"x": None}) is True

    @pytest.mark.parametrize("item", [{}, 5, [1]], ids=["missing", "scalar", "list"])
    def test_nested_matcher_not_invoked_when_key_absent(self, item: object) -> None:
        recording = RecordingMatcher()
        assert KeyedFieldMatcher("x", recording).matches(item) is False
        assert recording.evaluated == []

    def test_nested_matcher_invoked_once(self) -> None:
        recording = RecordingMatcher(verdict=False)
        m = KeyedFieldMatcher("x", recording)
        assert m.matches({"x": 1}, StringDescription()) is False
        assert recording.evaluated == [1]

    def test_nested_exception_propagates(self) -> None:
        m = KeyedFieldMatcher("x", RecordingMatcher(verdict=lambda v: 1 / v == 0))
        with pytest.raises(ZeroDivisionError):
            m.matches({"x": 0})


class TestConstruction:
    @pytest.mark.parametrize("key", [1.5, None, True, ("a",), b"a"], ids=repr)
    def test_invalid_key(self, key: object) -> None:
        expected = "argument 'key' must be a string or an integer"
        with pytest.raises(InvalidArgumentError, match=expected):
            KeyedFieldMatcher(key, 1)  # type: ignore[arg-type]

    def test_error_carries_argument(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            KeyedFieldMatcher(1.5, 1)  # type: ignore[arg-type]
        assert exc_info.value.argument == "key"
        assert exc_info.value.actual == 1.5

    def test_frozen(self) -> None:
        m = KeyedFieldMatcher("x", 1)
        with pytest.raises(AttributeError):
            m.key = "y"  # type: ignore[misc]


class TestDescription:
    def test_describe_to(self) -> None:
        assert str(KeyedFieldMatcher("x", 5)) == "has the key 'x' whose value <5>"

    def test_describe_nested(self) -> None:
        m = has_key_with("a", has_key_with(0, greater_than(1)))
        assert str(m) == (
            "has the key 'a' whose value "
            "has the key 0 whose value a value greater than <1>"
        )

    def test_mismatch_missing_key(self) -> None:
        assert mismatch_of(KeyedFieldMatcher("x", 5), {}) == "{} has no key 'x'"

    def test_mismatch_value(self) -> None:
        assert mismatch_of(KeyedFieldMatcher("x", 5), {"x": 6}) == (
            "value at key 'x' was <6>"
        )

    def test_mismatch_not_container(self) -> None:
        assert mismatch_of(KeyedFieldMatcher("x", 5), 5) == "5 is not a container"

    def test_mismatch_not_mapping(self) -> None:
        assert mismatch_of(KeyedFieldMatcher("x", 5), {1}) == (
            "{1} is not an associative array"
        )

    def test_describe_mismatch(self) -> None:
        description = StringDescription()
        KeyedFieldMatcher("x", 5).describe_mismatch({}, description)
        assert str(description) == "{} has no key 'x'"


class TestCount:
    def test_leaf(self) -> None:
        assert KeyedFieldMatcher("x", 5).count() == 2

    def test_nested(self) -> None:
        assert KeyedFieldMatcher("x", KeyedFieldMatcher("y", 1)).count() == 3

    def test_countable_leaf(self) -> None:
        assert KeyedFieldMatcher("x", RecordingMatcher(assertions=4)).count() == 5


class TestHamcrestIntegration:
    def test_assert_that(self) -> None:
        assert_that(
            {"x": 5, "y": 2}, all_of(has_key_with("x", 5), has_key_with("y", 2))
        )

    def test_negation(self) -> None:
        assert_that({"x": 5}, is_not(has_key_with("x", 6)))

    def test_assert_that_failure_message(self) -> None:
        with pytest.raises(AssertionError, match="but: value at key 'x' was <6>"):
            assert_that({"x": 6}, has_key_with("x", 5))
