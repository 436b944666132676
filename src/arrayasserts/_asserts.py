"""Factories and one-call assertions.

The factories read like hamcrest's own (``has_entries``, ``has_item``) and
compose with any hamcrest matcher::

    matcher = associative_array({"id": greater_than(0), "tags": sequential_array(1)})
    assert_that(payload, matcher)

assert_structure() is the single-pass alternative to hamcrest's
assert_that(): the item is evaluated once and the mismatch is rendered from
that evaluation, which matters for generators and other forward-only input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from hamcrest.core.helpers.wrap_matcher import wrap_matcher
from hamcrest.core.string_description import StringDescription

from arrayasserts._field_matchers import IndexedItemMatcher, KeyedFieldMatcher
from arrayasserts._structure_matchers import (
    MappingStructureMatcher,
    SequenceStructureMatcher,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hamcrest.core.matcher import Matcher

    from arrayasserts._types import Key


def associative_array(
    fields: Mapping[Key, Any],
    *,
    allow_missing: bool = False,
    allow_additional: bool = True,
) -> MappingStructureMatcher:
    """Matches a mapping whose declared fields match.

    See MappingStructureMatcher.
    """
    return MappingStructureMatcher(
        fields, allow_missing=allow_missing, allow_additional=allow_additional
    )


def has_key_with(key: Key, matcher: Any) -> KeyedFieldMatcher:
    """Matches a mapping that has key with a value matching matcher."""
    return KeyedFieldMatcher(key, matcher)


def has_item_at(index: int, matcher: Any) -> IndexedItemMatcher:
    """Matches an array or iterable whose element at position index matches."""
    return IndexedItemMatcher(index, matcher)


def sequential_array(
    min_items: int = 0,
    max_items: int | None = None,
    items: Any | None = None,
    *,
    ignore_keys: bool = False,
) -> SequenceStructureMatcher:
    """Matches a sequential array with bounded length and matching items."""
    return SequenceStructureMatcher(
        min_items=min_items,
        max_items=max_items,
        items=items,
        ignore_keys=ignore_keys,
    )


def assert_structure(
    actual: Any, matcher: Matcher[Any] | Any, reason: str = ""
) -> None:
    """Assert that actual satisfies matcher, evaluating it exactly once.

    Raises AssertionError with hamcrest's "Expected: ... but: ..." layout.
    A bare value is compared for equality.
    """
    matcher = wrap_matcher(matcher)
    mismatch = StringDescription()
    if matcher.matches(actual, mismatch):
        return

    description = StringDescription()
    description.append_text(reason).append_text("\nExpected: ")
    description.append_description_of(matcher)
    description.append_text("\n     but: ").append_text(str(mismatch)).append_text("\n")
    raise AssertionError(str(description))


def assert_associative_array(
    actual: Any,
    fields: Mapping[Key, Any],
    *,
    allow_missing: bool = False,
    allow_additional: bool = True,
    reason: str = "",
) -> None:
    assert_structure(
        actual,
        associative_array(
            fields, allow_missing=allow_missing, allow_additional=allow_additional
        ),
        reason,
    )


def assert_has_key_with(
    actual: Any, key: Key, matcher: Any, reason: str = ""
) -> None:
    assert_structure(actual, has_key_with(key, matcher), reason)


def assert_has_item_at(
    actual: Any, index: int, matcher: Any, reason: str = ""
) -> None:
    assert_structure(actual, has_item_at(index, matcher), reason)


def assert_sequential_array(
    actual: Any,
    min_items: int = 0,
    max_items: int | None = None,
    items: Any | None = None,
    *,
    ignore_keys: bool = False,
    reason: str = "",
) -> None:
    assert_structure(
        actual,
        sequential_array(min_items, max_items, items, ignore_keys=ignore_keys),
        reason,
    )
