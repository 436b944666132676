"""Single-entry matchers: one key of a mapping, one position of a sequence.

Each matcher is a frozen dataclass; a bare expected value is wrapped in an
equality matcher at construction time. The nested matcher is never
consulted when the entry does not exist.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hamcrest.core.helpers.wrap_matcher import wrap_matcher

from arrayasserts._container import (
    ForwardOnlySequence,
    NotContainer,
    RandomAccessMapping,
    classify,
    is_traversable,
)
from arrayasserts._diagnostics import export
from arrayasserts._matcher import (
    FailureReason,
    InvalidArgumentError,
    MatchOutcome,
    StructureMatcher,
    assertion_count,
    check_nested,
)
from arrayasserts._types import is_index, is_key

if TYPE_CHECKING:
    from hamcrest.core.description import Description
    from hamcrest.core.matcher import Matcher

    from arrayasserts._types import Key

_MISSING = object()


@dataclass(frozen=True, slots=True, eq=False)
class KeyedFieldMatcher(StructureMatcher[Any]):
    """Matches a mapping that has key, with a value accepted by matcher.

    >>> from arrayasserts import KeyedFieldMatcher
    >>> KeyedFieldMatcher("x", 5).matches({"x": 5})
    True
    """

    key: Key
    matcher: Matcher[Any]

    def __post_init__(self) -> None:
        if not is_key(self.key):
            raise InvalidArgumentError("key", "a string or an integer", self.key)
        object.__setattr__(self, "matcher", wrap_matcher(self.matcher))

    def evaluate(self, item: Any) -> MatchOutcome:
        match classify(item):
            case NotContainer():
                return MatchOutcome.fail(FailureReason.NOT_CONTAINER)
            case RandomAccessMapping() as view:
                if not view.key_exists(self.key):
                    return MatchOutcome.fail(FailureReason.KEY_MISSING)
                mismatch = check_nested(self.matcher, view.value_at(self.key))
                if mismatch is not None:
                    return MatchOutcome.fail(
                        FailureReason.VALUE_MISMATCH, mismatch=mismatch
                    )
                return MatchOutcome.ok()
            case _:
                return MatchOutcome.fail(FailureReason.NOT_MAPPING)

    def describe_to(self, description: Description) -> None:
        description.append_text(f"has the key {export(self.key)} whose value ")
        description.append_description_of(self.matcher)

    def describe_outcome(
        self, item: Any, outcome: MatchOutcome, mismatch_description: Description
    ) -> None:
        match outcome.reason:
            case FailureReason.NOT_CONTAINER:
                text = f"{export(item)} is not a container"
            case FailureReason.NOT_MAPPING:
                text = f"{export(item)} is not an associative array"
            case FailureReason.KEY_MISSING:
                text = f"{export(item)} has no key {export(self.key)}"
            case _:
                text = f"value at key {export(self.key)} {outcome.context['mismatch']}"
        mismatch_description.append_text(text)

    def count(self) -> int:
        return 1 + assertion_count(self.matcher)


@dataclass(frozen=True, slots=True, eq=False)
class IndexedItemMatcher(StructureMatcher[Any]):
    """Matches an array or iterable whose element at ordinal position index
    is accepted by matcher.

    Mappings and rewindable sources are walked from their first element and
    left exactly where the caller had them. Forward-only sources are walked
    from their current position and stay advanced past the inspected
    element; a position the source has already passed, or whose offset the
    source cannot tell, does not exist.
    """

    index: int
    matcher: Matcher[Any]

    def __post_init__(self) -> None:
        if not is_index(self.index):
            raise InvalidArgumentError("index", "a non-negative integer", self.index)
        object.__setattr__(self, "matcher", wrap_matcher(self.matcher))

    def evaluate(self, item: Any) -> MatchOutcome:
        view = classify(item)
        if not is_traversable(view):
            return MatchOutcome.fail(FailureReason.NOT_CONTAINER)

        skip = self.index
        if isinstance(view, ForwardOnlySequence):
            if view.offset is None or self.index < view.offset:
                return MatchOutcome.fail(FailureReason.INDEX_MISSING)
            skip -= view.offset

        with view.traverse() as entries:  # type: ignore[union-attr]
            entry = next(itertools.islice(entries, skip, None), _MISSING)
        if entry is _MISSING:
            return MatchOutcome.fail(FailureReason.INDEX_MISSING)

        _, value = entry
        mismatch = check_nested(self.matcher, value)
        if mismatch is not None:
            return MatchOutcome.fail(FailureReason.VALUE_MISMATCH, mismatch=mismatch)
        return MatchOutcome.ok()

    def describe_to(self, description: Description) -> None:
        description.append_text(
            f"is an array that has a value at index {self.index} which "
        )
        description.append_description_of(self.matcher)

    def describe_outcome(
        self, item: Any, outcome: MatchOutcome, mismatch_description: Description
    ) -> None:
        match outcome.reason:
            case FailureReason.NOT_CONTAINER:
                text = f"{export(item)} is not an array or iterable"
            case FailureReason.INDEX_MISSING:
                text = f"{export(item)} has no value at index {self.index}"
            case _:
                text = f"value at index {self.index} {outcome.context['mismatch']}"
        mismatch_description.append_text(text)

    def count(self) -> int:
        return 1 + assertion_count(self.matcher)
