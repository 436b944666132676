"""Whole-structure matchers: associative arrays and sequential arrays."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from hamcrest.core.helpers.wrap_matcher import wrap_matcher
from hamcrest.core.string_description import tostring

from arrayasserts._container import RandomAccessMapping, classify, is_traversable
from arrayasserts._diagnostics import export, render_table, shortened_export
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

_TABLE_HEADERS = ("Key", "Value", "Matcher")


@dataclass(frozen=True, slots=True, eq=False)
class MappingStructureMatcher(StructureMatcher[Any]):
    """Matches an associative array against declared fields.

    Fields are checked in declaration order and the first failing field
    decides the outcome. Missing declared keys fail unless allow_missing;
    undeclared keys fail unless allow_additional. Undeclared keys can only
    be detected on containers that enumerate their keys.
    """

    fields: Mapping[Key, Matcher[Any]]
    allow_missing: bool = False
    allow_additional: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.fields, Mapping):
            raise InvalidArgumentError(
                "fields", "a mapping of keys to matchers", self.fields
            )
        wrapped: dict[Key, Matcher[Any]] = {}
        for key, expected in self.fields.items():
            if not is_key(key):
                raise InvalidArgumentError(
                    "fields", "keyed by strings or integers", key
                )
            wrapped[key] = wrap_matcher(expected)
        object.__setattr__(self, "fields", MappingProxyType(wrapped))

    def evaluate(self, item: Any) -> MatchOutcome:
        view = classify(item)
        if not isinstance(view, RandomAccessMapping):
            return MatchOutcome.fail(FailureReason.NOT_MAPPING)

        for key, matcher in self.fields.items():
            if not view.key_exists(key):
                if self.allow_missing:
                    continue
                return self._fail(view, FailureReason.KEY_MISSING, key=key)
            mismatch = check_nested(matcher, view.value_at(key))
            if mismatch is not None:
                return self._fail(
                    view, FailureReason.VALUE_MISMATCH, key=key, mismatch=mismatch
                )

        if not self.allow_additional and view.enumerable:
            for key in view.keys():
                if key not in self.fields:
                    return self._fail(view, FailureReason.ADDITIONAL_KEY, key=key)

        return MatchOutcome.ok()

    def _fail(
        self, view: RandomAccessMapping, reason: FailureReason, **context: Any
    ) -> MatchOutcome:
        rows = [
            (
                export(key),
                shortened_export(view.value_at(key)) if view.key_exists(key) else "",
                tostring(matcher),
            )
            for key, matcher in self.fields.items()
        ]
        if view.enumerable:
            rows.extend(
                (export(key), shortened_export(view.value_at(key)), "")
                for key in view.keys()
                if key not in self.fields
            )
        return MatchOutcome.fail(reason, rows=tuple(rows), **context)

    def describe_to(self, description: Description) -> None:
        if not self.fields:
            description.append_text(
                "is an associative array"
                if self.allow_additional
                else "is an empty array"
            )
            return

        conjunction = "and/or" if self.allow_missing else "and"
        if self.allow_additional:
            first = "is an associative array that has the key"
            following = f", {conjunction} has the key"
        else:
            first = "is an associative array that has just the key"
            following = f", {conjunction} the key"

        for i, (key, matcher) in enumerate(self.fields.items()):
            description.append_text(first if i == 0 else following)
            description.append_text(f" {export(key)} whose value ")
            description.append_description_of(matcher)

        if self.allow_additional:
            description.append_text(f", {conjunction} any other item")

    def describe_outcome(
        self, item: Any, outcome: MatchOutcome, mismatch_description: Description
    ) -> None:
        key = outcome.context.get("key")
        match outcome.reason:
            case FailureReason.NOT_MAPPING:
                mismatch_description.append_text(
                    f"{export(item)} is not an associative array"
                )
                return
            case FailureReason.KEY_MISSING:
                headline = f"key {export(key)} is missing"
            case FailureReason.ADDITIONAL_KEY:
                headline = f"has the additional key {export(key)}"
            case _:
                headline = f"value at key {export(key)} {outcome.context['mismatch']}"

        mismatch_description.append_text(headline + "\n")
        mismatch_description.append_text(
            render_table(_TABLE_HEADERS, outcome.context["rows"])
        )
        mismatch_description.append_text(
            f"[{'x' if self.allow_missing else ' '}] Allow missing; "
            f"[{'x' if self.allow_additional else ' '}] Allow additional"
        )

    def count(self) -> int:
        return 1 + sum(assertion_count(m) for m in self.fields.values())


@dataclass(frozen=True, slots=True, eq=False)
class SequenceStructureMatcher(StructureMatcher[Any]):
    """Matches a sequential array: bounded length, keys 0, 1, 2, ... in
    order (unless ignore_keys), and every item accepted by items.

    One traversal decides the outcome. Mappings and rewindable sources are
    left where the caller had them; forward-only sources are consumed up to
    the deciding element, or entirely when the match succeeds. Traversal
    stops at element max_items + 1, so unbounded generators are safe
    whenever max_items is set.
    """

    min_items: int = 0
    max_items: int | None = None
    items: Matcher[Any] | None = None
    ignore_keys: bool = False

    def __post_init__(self) -> None:
        if not is_index(self.min_items):
            raise InvalidArgumentError(
                "min_items", "a non-negative integer", self.min_items
            )
        if self.max_items is not None and not (
            is_index(self.max_items) and self.max_items >= self.min_items
        ):
            raise InvalidArgumentError(
                "max_items",
                f"None or an integer >= min_items ({self.min_items})",
                self.max_items,
            )
        if self.items is not None:
            object.__setattr__(self, "items", wrap_matcher(self.items))

    def evaluate(self, item: Any) -> MatchOutcome:
        view = classify(item)
        if not is_traversable(view):
            return MatchOutcome.fail(FailureReason.NOT_CONTAINER)

        seen = 0
        with view.traverse() as entries:  # type: ignore[union-attr]
            for position, (key, value) in enumerate(entries):
                if not self.ignore_keys and not (is_index(key) and key == position):
                    return MatchOutcome.fail(
                        FailureReason.KEYS_NOT_SEQUENTIAL, position=position, key=key
                    )
                if self.max_items is not None and position >= self.max_items:
                    return MatchOutcome.fail(FailureReason.TOO_MANY_ITEMS)
                if self.items is not None:
                    mismatch = check_nested(self.items, value)
                    if mismatch is not None:
                        return MatchOutcome.fail(
                            FailureReason.VALUE_MISMATCH,
                            position=position,
                            key=key,
                            mismatch=mismatch,
                        )
                seen = position + 1

        if seen < self.min_items:
            return MatchOutcome.fail(FailureReason.TOO_FEW_ITEMS, seen=seen)
        return MatchOutcome.ok()

    def describe_to(self, description: Description) -> None:
        text = "is an array" if self.ignore_keys else "is a sequential array"
        if self.max_items is not None and self.max_items == self.min_items:
            text += f" with exactly {self.min_items} items"
        else:
            bounds = []
            if self.min_items > 0:
                bounds.append(f"at least {self.min_items} items")
            if self.max_items is not None:
                bounds.append(f"at most {self.max_items} items")
            if bounds:
                text += " with " + " and ".join(bounds)
        description.append_text(text)
        if self.items is not None:
            description.append_text(" whose items match ")
            description.append_description_of(self.items)

    def describe_outcome(
        self, item: Any, outcome: MatchOutcome, mismatch_description: Description
    ) -> None:
        context = outcome.context
        match outcome.reason:
            case FailureReason.NOT_CONTAINER:
                text = f"{export(item)} is not an array or iterable"
            case FailureReason.KEYS_NOT_SEQUENTIAL if context["key"] is None:
                text = f"{export(item)} was already partially consumed"
            case FailureReason.KEYS_NOT_SEQUENTIAL:
                text = (
                    f"{export(item)} has the key {export(context['key'])} "
                    f"at position {context['position']}"
                )
            case FailureReason.TOO_MANY_ITEMS:
                text = f"{export(item)} has more than {self.max_items} items"
            case FailureReason.TOO_FEW_ITEMS:
                text = f"{export(item)} has {context['seen']} items"
            case _:
                if context["key"] is None:
                    label = context["position"]
                else:
                    label = export(context["key"])
                text = f"value at key {label} {context['mismatch']}"
        mismatch_description.append_text(text)

    def count(self) -> int:
        return 1 + (assertion_count(self.items) if self.items is not None else 0)
