# matching_core/cores/base.py
"""
Base Core Module - Abstract coverage strategy for the Hungarian driver.

A core owns the covered / uncovered bookkeeping for rows and columns and the
scans over the cost matrix that depend on it. The driver never looks at the
storage directly; it only goes through the methods below, so any core can be
swapped in without changing the result.

Cached index lists and counts are rebuilt lazily. Whenever a row or column
changes state the affected caches are invalidated, with one exception:
uncovering a column appends it to an already cached uncovered-column list.
That append order is the order every core visits columns in, which is what
keeps the cores' tie-breaking identical.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")

# (vmin, row, col, index into urows); row/col/index are None when no zero was found
ZeroHit = Tuple[float, Optional[int], Optional[int], Optional[int]]


class LazyValue(Generic[T]):
    """A cached value that is recomputed on demand after invalidate()."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: Optional[T] = None

    def invalidate(self) -> None:
        self._value = None

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        if self._value is None:
            self._value = compute()
        return self._value

    def peek(self) -> Optional[T]:
        return self._value


class CoverageCore(ABC):
    """
    Abstract base class for coverage strategies.

    Subclasses provide the storage hooks (how covered rows / columns are
    recorded) and the matrix scans, and define name and description class
    attributes for the registry.

    Attributes:
        name: Short identifier used by create_core()
        description: Human-readable summary
    """
    name: str = "base"
    description: str = "Base coverage core"

    def __init__(self) -> None:
        self.ncols = 0
        self.nrows = 0
        self._needed = 0
        self._col_rank: List[int] = []

        self._uncov_cols: LazyValue[List[int]] = LazyValue()
        self._cov_cols: LazyValue[List[int]] = LazyValue()
        self._cov_col_count: LazyValue[int] = LazyValue()
        self._uncov_rows: LazyValue[List[int]] = LazyValue()
        self._cov_rows: LazyValue[List[int]] = LazyValue()

    # ------------------------------------------------------------------
    # Storage hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _reset_storage(self, is_first: bool) -> None:
        """Allocate (is_first) or reset storage so that nothing is covered."""

    @abstractmethod
    def is_row_covered(self, row: int) -> bool:
        ...

    @abstractmethod
    def is_column_covered(self, col: int) -> bool:
        ...

    @abstractmethod
    def _mark_row_covered(self, row: int) -> bool:
        """Cover a row; return True if its state changed."""

    @abstractmethod
    def _mark_column(self, col: int, covered: bool) -> bool:
        """Set a column's state; return True if it changed."""

    @abstractmethod
    def _collect_rows(self, covered: bool) -> List[int]:
        """Ascending list of covered (or uncovered) rows."""

    @abstractmethod
    def _collect_columns(self, covered: bool) -> List[int]:
        """Ascending list of covered (or uncovered) columns."""

    @abstractmethod
    def _count_covered_columns(self) -> int:
        ...

    # ------------------------------------------------------------------
    # Matrix scans
    # ------------------------------------------------------------------
    @abstractmethod
    def subtract_smallest_row_costs(self, costs: np.ndarray) -> None:
        """Subtract each row's minimum from every cell in the row."""

    @abstractmethod
    def find_zero_in_row(self, costs: np.ndarray, col_star: Sequence[int], row: int) -> Optional[int]:
        """
        Find the first zero in a row whose column holds no star.

        Args:
            costs: Cost matrix
            col_star: Row of each column's star, or nrows if it has none
            row: Row to search

        Returns:
            Column of the zero, or None
        """

    @abstractmethod
    def find_zero(self, costs: np.ndarray, urows: Sequence[int], start: int, vmin: float) -> ZeroHit:
        """
        Look for an uncovered zero, resuming at urows[start].

        Rows that became covered since urows was taken are skipped. Columns
        are visited in uncovered-column-list order.

        Args:
            costs: Cost matrix
            urows: Rows that were uncovered when the pass began
            start: Index into urows to resume from
            vmin: Smallest uncovered value seen so far in this pass

        Returns:
            (vmin, row, col, index) for the first zero, where vmin does not
            include the zero's own row; otherwise (vmin, None, None, None)
            with vmin the smallest value seen.
        """

    @abstractmethod
    def correct_min(
        self,
        costs: np.ndarray,
        col: int,
        urows: Sequence[int],
        stop: int,
        vmin: float,
        zeroes: List[Tuple[int, int]],
    ) -> float:
        """
        Account for a just-uncovered column in rows the pass already scanned.

        Zeros found in urows[:stop] at col are appended to zeroes; any other
        value may lower vmin.

        Returns:
            The corrected minimum
        """

    @abstractmethod
    def update_covered(self, costs: np.ndarray, vmin: float) -> None:
        """Add vmin to every covered row x covered column cell."""

    @abstractmethod
    def update_uncovered(self, costs: np.ndarray, vmin: float, zeroes: List[Tuple[int, int]]) -> None:
        """Subtract vmin from every uncovered row x uncovered column cell, recording new zeros."""

    # ------------------------------------------------------------------
    # Coverage state
    # ------------------------------------------------------------------
    def clear_coverage(self, ncols: int, nrows: int, is_first: bool = False) -> None:
        """
        Initialize or reset the coverage state.

        Args:
            ncols: Number of columns in the cost matrix
            nrows: Number of rows in the cost matrix
            is_first: True when a solve is just starting (storage is sized),
                False for a cheap "uncover everything" reset
        """
        if is_first:
            self.ncols, self.nrows = ncols, nrows
            self._needed = min(ncols, nrows)
            self._col_rank = list(range(ncols))
        self._reset_storage(is_first)
        self._columns_changed()
        self._rows_changed()

    def count_coverage(self, row_star: Sequence[int]) -> bool:
        """
        Cover every column holding a starred zero.

        Args:
            row_star: Column of each row's star, or ncols if it has none

        Returns:
            True if enough columns are covered for a complete assignment
        """
        ncols = self.ncols
        for col in row_star:
            if col < ncols and self._mark_column(col, covered=True):
                self._columns_changed()
        return self.covered_column_count() >= self._needed

    def cover_row(self, row: int) -> bool:
        if self._mark_row_covered(row):
            self._rows_changed()
            return True
        return False

    def uncover_column(self, col: int) -> None:
        if not self._mark_column(col, covered=False):
            return
        self._cov_cols.invalidate()
        self._cov_col_count.invalidate()

        # Keep a live uncovered list rather than rebuild it; the column goes last.
        cols = self._uncov_cols.peek()
        if cols is not None:
            self._col_rank[col] = len(cols)
            cols.append(col)

    def uncovered_columns(self) -> List[int]:
        return self._uncov_cols.get_or_compute(self._rank_uncovered_columns)

    def covered_columns(self) -> List[int]:
        return self._cov_cols.get_or_compute(lambda: self._collect_columns(covered=True))

    def uncovered_rows(self) -> List[int]:
        return self._uncov_rows.get_or_compute(lambda: self._collect_rows(covered=False))

    def covered_rows(self) -> List[int]:
        return self._cov_rows.get_or_compute(lambda: self._collect_rows(covered=True))

    def covered_column_count(self) -> int:
        return self._cov_col_count.get_or_compute(self._count_covered_columns)

    def _rank_uncovered_columns(self) -> List[int]:
        cols = self._collect_columns(covered=False)
        rank = self._col_rank
        for pos, col in enumerate(cols):
            rank[col] = pos
        return cols

    def _columns_changed(self) -> None:
        self._uncov_cols.invalidate()
        self._cov_cols.invalidate()
        self._cov_col_count.invalidate()

    def _rows_changed(self) -> None:
        self._uncov_rows.invalidate()
        self._cov_rows.invalidate()
