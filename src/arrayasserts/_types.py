"""Core protocols and type aliases for arrayasserts.

- Key is the identifier type accepted by mapping lookups
- Countable is the optional assertion-count port of a nested matcher
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# Keys of associative containers. bool is an int subclass but never a key.
type Key = str | int


@runtime_checkable
class Countable(Protocol):
    """A matcher that reports how many assertions one evaluation performs.

    Plain hamcrest matchers do not implement this and count as one.
    """

    def count(self) -> int: ...


def is_key(value: Any) -> bool:
    """Whether value is usable as a container key."""
    return isinstance(value, str | int) and not isinstance(value, bool)


def is_index(value: Any) -> bool:
    """Whether value is a non-negative ordinal position."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
