"""Value export and table rendering for failure diagnostics.

Nothing here takes part in pass/fail decisions.
"""

from __future__ import annotations

import reprlib
from typing import TYPE_CHECKING, Any

from tabulate import tabulate

if TYPE_CHECKING:
    from collections.abc import Sequence

_EXPORT = reprlib.Repr(
    maxlevel=4,
    maxdict=20,
    maxlist=20,
    maxtuple=20,
    maxset=20,
    maxstring=120,
    maxother=120,
)
_SHORT_EXPORT = reprlib.Repr(
    maxlevel=1, maxdict=3, maxlist=3, maxtuple=3, maxset=3, maxstring=40, maxother=40
)


def export(value: Any) -> str:
    """Readable, size-bounded representation of value."""
    return _EXPORT.repr(value)


def shortened_export(value: Any) -> str:
    """Compact representation of value for table cells."""
    return _SHORT_EXPORT.repr(value)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows as a bordered plain-text table, one line per row.

    Cells are rendered as given; numeric-looking text is not realigned.

    >>> print(render_table(["Key", "Value"], [["'a'", "1"]]), end="")
    +-------+---------+
    | Key   | Value   |
    |-------+---------|
    | 'a'   | 1       |
    +-------+---------+
    """
    table = tabulate(rows, headers=headers, tablefmt="psql", disable_numparse=True)
    return table + "\n"
