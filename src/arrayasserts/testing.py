"""Test utilities for arrayasserts.

Provides container fixtures with observable cursors and a recording
matcher. These exist to make the cursor contract easy to check in tests;
real code passes its own containers.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from hamcrest.core.base_matcher import BaseMatcher

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from hamcrest.core.description import Description

    from arrayasserts._types import Key


class SeekableIterator(Iterator[Any]):
    """List-backed iterator with a file-like tell()/seek() cursor.

    >>> from arrayasserts import has_item_at
    >>> it = SeekableIterator([1, 2, 3, 4])
    >>> next(it)
    1
    >>> has_item_at(3, 4).matches(it)
    True
    >>> it.tell()
    1
    """

    def __init__(self, items: Iterable[Any]) -> None:
        self._items = list(items)
        self._position = 0

    def __next__(self) -> Any:
        if self._position >= len(self._items):
            raise StopIteration
        item = self._items[self._position]
        self._position += 1
        return item

    def tell(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        self._position = position
        return position


class KeyedObject:
    """Key-accessible object: __getitem__ and __contains__, nothing else.

    With enumerable=True it also exposes keys(), so undeclared keys can
    be detected.
    """

    def __init__(self, data: Mapping[Key, Any], *, enumerable: bool = False) -> None:
        self._data = dict(data)
        if enumerable:
            self.keys = self._data.keys

    def __getitem__(self, key: Key) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data


@dataclass(eq=False)
class RecordingMatcher(BaseMatcher[Any]):
    """Matcher that records every item it is asked to match.

    verdict decides the outcome (a constant or a predicate); description
    and assertions control describe_to() and count().
    """

    verdict: bool | Callable[[Any], bool] = True
    description: str = "is recorded"
    assertions: int = 1
    evaluated: list[Any] = field(default_factory=list)

    def _matches(self, item: Any) -> bool:
        self.evaluated.append(item)
        if callable(self.verdict):
            return self.verdict(item)
        return self.verdict

    def describe_to(self, description: Description) -> None:
        description.append_text(self.description)

    def describe_mismatch(self, item: Any, mismatch_description: Description) -> None:
        mismatch_description.append_text("was not recorded: ")
        mismatch_description.append_description_of(item)

    def count(self) -> int:
        return self.assertions

