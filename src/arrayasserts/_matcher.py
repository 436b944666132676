"""StructureMatcher: shared base of the four structural matchers.

Evaluation semantics common to every structural matcher:
- A failed match is a MatchOutcome value, never an exception
- One call to matches() evaluates the item exactly once; the mismatch
  description is rendered from the recorded outcome, so a forward-only
  source is never consumed twice by the same assertion
- Nested matchers run in declaration/traversal order; the first failure
  short-circuits the rest
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from hamcrest.core.base_matcher import BaseMatcher
from hamcrest.core.string_description import StringDescription

from arrayasserts._types import Countable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hamcrest.core.description import Description
    from hamcrest.core.matcher import Matcher


class MatcherError(Exception):
    """Errors from matcher construction."""


class InvalidArgumentError(MatcherError):
    """A matcher was constructed with an argument it cannot use."""

    def __init__(self, argument: str, expected: str, actual: Any) -> None:
        self.argument = argument
        self.expected = expected
        self.actual = actual
        super().__init__(f"argument {argument!r} must be {expected}, got {actual!r}")


class FailureReason(enum.Enum):
    """Why a structural match failed."""

    NOT_CONTAINER = "not_container"
    NOT_MAPPING = "not_mapping"
    KEY_MISSING = "key_missing"
    INDEX_MISSING = "index_missing"
    VALUE_MISMATCH = "value_mismatch"
    ADDITIONAL_KEY = "additional_key"
    KEYS_NOT_SEQUENTIAL = "keys_not_sequential"
    TOO_FEW_ITEMS = "too_few_items"
    TOO_MANY_ITEMS = "too_many_items"


@dataclass(frozen=True, slots=True)
class MatchOutcome:
    """Result of one evaluation: verdict, reason, and rendering context."""

    passed: bool
    reason: FailureReason | None = None
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def ok(cls) -> MatchOutcome:
        return _OK

    @classmethod
    def fail(cls, reason: FailureReason, **context: Any) -> MatchOutcome:
        return cls(passed=False, reason=reason, context=MappingProxyType(context))


_OK = MatchOutcome(passed=True)


class StructureMatcher[T](BaseMatcher[T]):
    """Base class for the structural matchers.

    Subclasses are frozen dataclasses implementing evaluate(), describe_to(),
    describe_outcome() and count().
    """

    def evaluate(self, item: Any) -> MatchOutcome:
        raise NotImplementedError("evaluate")

    def describe_outcome(
        self, item: Any, outcome: MatchOutcome, mismatch_description: Description
    ) -> None:
        raise NotImplementedError("describe_outcome")

    def count(self) -> int:
        """Number of assertions one evaluation performs, nested ones included."""
        raise NotImplementedError("count")

    def matches(
        self, item: Any, mismatch_description: Description | None = None
    ) -> bool:
        outcome = self.evaluate(item)
        if not outcome.passed and mismatch_description is not None:
            self.describe_outcome(item, outcome, mismatch_description)
        return outcome.passed

    def _matches(self, item: Any) -> bool:
        return self.evaluate(item).passed

    def describe_mismatch(self, item: Any, mismatch_description: Description) -> None:
        # Re-evaluates. Prefer matches(item, description) for forward-only input.
        self.describe_outcome(item, self.evaluate(item), mismatch_description)


def assertion_count(matcher: Matcher[Any]) -> int:
    """Assertions performed by matcher; plain hamcrest matchers count as one."""
    if isinstance(matcher, Countable):
        return matcher.count()
    return 1


def check_nested(matcher: Matcher[Any], value: Any) -> str | None:
    """Run matcher once on value.

    Returns None on success, or the matcher's mismatch description.
    """
    description = StringDescription()
    if matcher.matches(value, description):
        return None
    return str(description)
