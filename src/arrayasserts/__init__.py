"""arrayasserts: structural assertions for arrays, mappings and iterables.

All public types are exported from this module for flat imports:

    from arrayasserts import associative_array, sequential_array, assert_structure
"""

import logging

__version__ = "0.1.0"

# Entry points
from arrayasserts._asserts import (
    assert_associative_array,
    assert_has_item_at,
    assert_has_key_with,
    assert_sequential_array,
    assert_structure,
    associative_array,
    has_item_at,
    has_key_with,
    sequential_array,
)

# Container views
from arrayasserts._container import (
    ContainerView,
    ForwardOnlySequence,
    NotContainer,
    RandomAccessMapping,
    RewindableSequence,
    classify,
    for_each_indexed,
    is_traversable,
    length,
)
from arrayasserts._diagnostics import export, render_table, shortened_export

# Structural matchers
from arrayasserts._field_matchers import IndexedItemMatcher, KeyedFieldMatcher
from arrayasserts._matcher import (
    FailureReason,
    InvalidArgumentError,
    MatcherError,
    MatchOutcome,
    StructureMatcher,
    assertion_count,
)
from arrayasserts._structure_matchers import (
    MappingStructureMatcher,
    SequenceStructureMatcher,
)
from arrayasserts._types import Countable, Key

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Protocols
    "Countable",
    "Key",
    # Container views
    "ContainerView",
    "RandomAccessMapping",
    "RewindableSequence",
    "ForwardOnlySequence",
    "NotContainer",
    "classify",
    "is_traversable",
    "for_each_indexed",
    "length",
    # Matchers
    "StructureMatcher",
    "KeyedFieldMatcher",
    "IndexedItemMatcher",
    "MappingStructureMatcher",
    "SequenceStructureMatcher",
    "MatchOutcome",
    "FailureReason",
    "MatcherError",
    "InvalidArgumentError",
    "assertion_count",
    # Entry points
    "associative_array",
    "has_key_with",
    "has_item_at",
    "sequential_array",
    "assert_structure",
    "assert_associative_array",
    "assert_has_key_with",
    "assert_has_item_at",
    "assert_sequential_array",
    # Diagnostics
    "export",
    "shortened_export",
    "render_table",
]
