"""Container classification: one view per inspected value.

classify() sorts an arbitrary value into exactly one variant of the
ContainerView union. Matchers pattern-match on the variant instead of
type-testing the inspected value inline.

Cursor contract:
- RandomAccessMapping and RewindableSequence traversals leave the caller's
  cursor where it was, on every exit path
- ForwardOnlySequence traversals consume the source from its current
  position; the cursor stays wherever consumption stopped
"""

from __future__ import annotations

import inspect
import itertools
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence, Sized
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from arrayasserts._types import is_index

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from arrayasserts._types import Key

logger = logging.getLogger(__name__)

# Iterable, but inspected as a single value.
_SCALARS = (str, bytes, bytearray, memoryview, type)

# Iterators whose pickle state is an integer position in a sequence.
_CLONEABLE_ITERATORS = frozenset(
    type(iter(empty)) for empty in ([], (), "", "\u00e9", b"", bytearray())
)

# (key, value) pairs in traversal order. Keys are None when a forward-only
# source cannot tell how far it has already been consumed.
type Entries = Iterator[tuple[Key | None, Any]]

type Visitor = Callable[[int, Key | None, Any], bool | None]

# How a RewindableSequence gets back to its first element:
#   reiterate: the source is not an iterator; iter() starts afresh
#   seek:      tell()/seek() on the source itself, restored afterwards
#   clone:     a rewound copy rebuilt from the source's integer pickle state
type RewindStrategy = Literal["reiterate", "seek", "clone"]


@dataclass(frozen=True, slots=True)
class RandomAccessMapping:
    """Repeatable key-based access.

    Covers native containers (any Mapping, any Sequence other than strings)
    and key-accessible objects defining __getitem__ and __contains__.
    Sequences are keyed by position. Only enumerable mappings can list
    their keys; a key-accessible object is enumerable if it has keys().
    """

    source: Any
    enumerable: bool = True

    def key_exists(self, key: Key) -> bool:
        if isinstance(self.source, Sequence):
            return is_index(key) and key < len(self.source)
        try:
            return key in self.source
        except TypeError:
            # unhashable or foreign key type for this container
            return False

    def value_at(self, key: Key) -> Any:
        return self.source[key]

    def keys(self) -> Iterator[Key]:
        if isinstance(self.source, Sequence):
            return iter(range(len(self.source)))
        if not self.enumerable:
            msg = f"{type(self.source).__name__} does not enumerate its keys"
            raise TypeError(msg)
        return iter(self.source.keys())

    @contextmanager
    def traverse(self) -> Generator[Entries]:
        yield ((key, self.source[key]) for key in self.keys())


@dataclass(frozen=True, slots=True)
class RewindableSequence:
    """Ordered source that can be walked from the start without losing
    the caller's position."""

    source: Iterable[Any]
    strategy: RewindStrategy = "reiterate"

    @contextmanager
    def traverse(self) -> Generator[Entries]:
        match self.strategy:
            case "reiterate":
                yield enumerate(self.source)
            case "clone":
                yield enumerate(_rewound_copy(self.source))
            case "seek":
                position = self.source.tell()  # type: ignore[attr-defined]
                self.source.seek(0)  # type: ignore[attr-defined]
                logger.debug(
                    "rewound %s from position %r", type(self.source).__name__, position
                )
                try:
                    yield enumerate(self.source)
                finally:
                    self.source.seek(position)  # type: ignore[attr-defined]
                    logger.debug(
                        "restored %s to position %r",
                        type(self.source).__name__,
                        position,
                    )


@dataclass(frozen=True, slots=True)
class ForwardOnlySequence:
    """Single-pass iterator.

    offset is the number of elements consumed before evaluation began, or
    None when the source cannot tell. Traversal starts at the current
    cursor and never goes back.
    """

    source: Iterator[Any]
    offset: int | None = 0

    @contextmanager
    def traverse(self) -> Generator[Entries]:
        if self.offset is None:
            yield zip(itertools.repeat(None), self.source)
        else:
            yield enumerate(self.source, start=self.offset)


@dataclass(frozen=True, slots=True)
class NotContainer:
    """Scalars, None, strings and anything that is neither keyed nor iterable."""

    source: Any


type ContainerView = (
    RandomAccessMapping | RewindableSequence | ForwardOnlySequence | NotContainer
)

type TraversableView = RandomAccessMapping | RewindableSequence | ForwardOnlySequence


def classify(value: Any) -> ContainerView:
    """Classify value into exactly one ContainerView variant.

    Rules, first match wins:
    1. native Mapping or Sequence (strings excluded)  -> RandomAccessMapping
    2. key-accessible object                          -> RandomAccessMapping
    3. iterable that restarts without side effects    -> RewindableSequence
    4. any other iterable                             -> ForwardOnlySequence
    5. everything else                                -> NotContainer
    """
    view = _classify(value)
    logger.debug("classified %s as %s", type(value).__name__, type(view).__name__)
    return view


def _classify(value: Any) -> ContainerView:
    if isinstance(value, _SCALARS):
        return NotContainer(value)
    if isinstance(value, Mapping | Sequence):
        return RandomAccessMapping(value)
    if _is_key_accessible(value):
        enumerable = callable(getattr(value, "keys", None))
        return RandomAccessMapping(value, enumerable=enumerable)
    if isinstance(value, Iterator):
        if _has_seek_cursor(value):
            return RewindableSequence(value, "seek")
        if _has_state_cursor(value):
            return RewindableSequence(value, "clone")
        return ForwardOnlySequence(value, _consumed_offset(value))
    if isinstance(value, Iterable):
        return RewindableSequence(value, "reiterate")
    return NotContainer(value)


def is_traversable(view: ContainerView) -> bool:
    """Whether the view can be walked entry by entry."""
    match view:
        case RandomAccessMapping(enumerable=enumerable):
            return enumerable
        case RewindableSequence() | ForwardOnlySequence():
            return True
    return False


def for_each_indexed(view: TraversableView, visitor: Visitor) -> bool:
    """Call visitor(position, key, value) for each entry in order.

    Stops as soon as the visitor returns a truthy value. Returns whether
    the traversal was stopped early.
    """
    with view.traverse() as entries:
        for position, (key, value) in enumerate(entries):
            if visitor(position, key, value):
                return True
    return False


def length(view: TraversableView) -> int:
    """Number of entries. Consumes the remainder of a forward-only source."""
    if not isinstance(view, ForwardOnlySequence) and isinstance(view.source, Sized):
        return len(view.source)
    with view.traverse() as entries:
        return sum(1 for _ in entries)


# ── Capability checks ────────────────────────────────────────────────────────


def _is_key_accessible(value: Any) -> bool:
    return callable(getattr(value, "__getitem__", None)) and callable(
        getattr(value, "__contains__", None)
    )


def _has_seek_cursor(value: Any) -> bool:
    """File-like cursor: tell() must answer now, and seek() must be allowed."""
    tell = getattr(value, "tell", None)
    seek = getattr(value, "seek", None)
    if not (callable(tell) and callable(seek)):
        return False
    seekable = getattr(value, "seekable", None)
    try:
        if callable(seekable) and not seekable():
            return False
        tell()
    except (OSError, ValueError):
        # closed stream, or tell() disabled mid-iteration (text files)
        return False
    return True


def _has_state_cursor(value: Any) -> bool:
    """Builtin sequence iterators pickle as (iter, (sequence,), position)."""
    if type(value) not in _CLONEABLE_ITERATORS:
        return False
    try:
        reduced = value.__reduce__()
    except (TypeError, ValueError):
        return False
    return (
        isinstance(reduced, tuple)
        and len(reduced) >= 3
        and reduced[0] is iter
        and is_index(reduced[2])
    )


def _rewound_copy(iterator: Any) -> Iterator[Any]:
    factory, args, *_ = iterator.__reduce__()
    clone = factory(*args)
    clone.__setstate__(0)
    return clone


def _consumed_offset(iterator: Iterator[Any]) -> int | None:
    """Elements consumed so far, when the iterator can tell.

    Generators expose whether they have started. Other iterators are
    taken to start at their current position.
    """
    if inspect.isgenerator(iterator):
        if inspect.getgeneratorstate(iterator) == inspect.GEN_CREATED:
            return 0
        return None
    return 0
