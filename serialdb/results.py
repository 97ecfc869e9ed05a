"""
serialdb/results.py

Result objects produced by Client.query()/Client.execute().

- Row: one materialized result-set row (column name -> value)
- Result: the rows of a statement plus its affected-row count

Both are frozen value objects. They are built once on the worker thread and
can be freely shared between threads and kept after the client is closed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

# Column values as SQLite hands them back, plus bool for bound parameters.
Value = Union[None, str, int, float, bool, bytes]


@dataclass(frozen=True)
class Row:
    """
    A single result row.

    Attributes:
        columns: Read-only mapping of column name to value, in result-set
                 column order. If a statement yields the same column name twice,
                 the last one wins.

    Typed accessors never coerce: they return None when the column is absent
    or holds a value of another type.
    """
    columns: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __hash__(self) -> int:
        # mappingproxy is unhashable. Equality ignores column order, so hash
        # the items as a set.
        return hash(frozenset(self.columns.items()))

    def get(self, name: str) -> Value:
        """Return the raw value of a column, or None if it is absent."""
        return self.columns.get(name)

    def get_text(self, name: str) -> str | None:
        value = self.columns.get(name)
        return value if isinstance(value, str) else None

    def get_number(self, name: str) -> int | float | None:
        """
        Return an INTEGER/REAL column value.

        bool is a subclass of int in Python but is not treated as a number here.
        """
        value = self.columns.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def get_boolean(self, name: str) -> bool | None:
        """
        Return a bool column value.

        SQLite stores booleans as 0/1 integers, so values read back from the
        engine are numbers and this returns None for them.
        """
        value = self.columns.get(name)
        return value if isinstance(value, bool) else None

    def get_bytes(self, name: str) -> bytes | None:
        value = self.columns.get(name)
        return value if isinstance(value, bytes) else None

    def column_names(self) -> set[str]:
        """Return the set of column names in this row."""
        return set(self.columns)

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def as_dict(self) -> dict[str, Value]:
        """Return a plain (mutable) copy of the row."""
        return dict(self.columns)


@dataclass(frozen=True)
class Result:
    """
    Outcome of one statement.

    Attributes:
        rows: Materialized rows in result-set order. Always empty for execute().
        affected_rows: For query() the number of rows read; for execute() the
                       number of rows the engine reports as modified (0 for DDL).
    """
    rows: tuple[Row, ...] = ()
    affected_rows: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", tuple(self.rows))

    def is_empty(self) -> bool:
        return not self.rows

    def row_count(self) -> int:
        return len(self.rows)

    def first(self) -> Row | None:
        """Return the first row, or None if there are no rows."""
        if not self.rows:
            return None
        return self.rows[0]
