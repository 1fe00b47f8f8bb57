# matching_core/cores/dense.py
"""
Dense Core - Coverage for full cost matrices.

Every cell is valid (gaps hold large values that simply never win). Covered
rows and columns live in Python ints used as bit vectors, bit set meaning
uncovered; index lists are derived from the bits only when asked for. Scans
work a row at a time with numpy.
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .base import CoverageCore, ZeroHit
from .factory import register_core


def _bit_indices(bits: int) -> List[int]:
    """Positions of the set bits, lowest first."""
    out = []
    while bits:
        low = bits & -bits
        out.append(low.bit_length() - 1)
        bits ^= low
    return out


@register_core
class DenseCore(CoverageCore):
    """
    Bit-vector core for dense matrices.

    Column and row state is a pair of ints, so covering every starred column
    at once is a single mask operation and the "all covered" test is a
    comparison against zero.
    """
    name = "dense"
    description = "Dense - bit-vector coverage, numpy row scans"

    def __init__(self) -> None:
        super().__init__()
        self._col_mask = 0
        self._row_mask = 0
        self._free_cols = 0
        self._free_rows = 0

    def _reset_storage(self, is_first: bool) -> None:
        if is_first:
            self._col_mask = (1 << self.ncols) - 1
            self._row_mask = (1 << self.nrows) - 1
        self._free_cols = self._col_mask
        self._free_rows = self._row_mask

    def is_row_covered(self, row: int) -> bool:
        return not (self._free_rows >> row) & 1

    def is_column_covered(self, col: int) -> bool:
        return not (self._free_cols >> col) & 1

    def _mark_row_covered(self, row: int) -> bool:
        old = self._free_rows
        self._free_rows = old & ~(1 << row)
        return self._free_rows != old

    def _mark_column(self, col: int, covered: bool) -> bool:
        old, bit = self._free_cols, 1 << col
        self._free_cols = (old & ~bit) if covered else (old | bit)
        return self._free_cols != old

    def _collect_rows(self, covered: bool) -> List[int]:
        bits = self._free_rows
        return _bit_indices(self._row_mask & ~bits if covered else bits)

    def _collect_columns(self, covered: bool) -> List[int]:
        bits = self._free_cols
        return _bit_indices(self._col_mask & ~bits if covered else bits)

    def _count_covered_columns(self) -> int:
        return self.ncols - self._free_cols.bit_count()

    def count_coverage(self, row_star: Sequence[int]) -> bool:
        ncols, starred = self.ncols, 0
        for col in row_star:
            if col < ncols:
                starred |= 1 << col

        free = self._free_cols & ~starred
        if free != self._free_cols:
            self._free_cols = free
            self._columns_changed()

        if free == 0:
            return True
        return self.covered_column_count() >= self._needed

    def subtract_smallest_row_costs(self, costs: np.ndarray) -> None:
        costs -= costs.min(axis=1, keepdims=True)

    def find_zero_in_row(self, costs: np.ndarray, col_star: Sequence[int], row: int) -> Optional[int]:
        nrows = self.nrows
        for col in np.flatnonzero(costs[row] == 0):
            if col_star[col] == nrows:
                return int(col)
        return None

    def find_zero(self, costs: np.ndarray, urows: Sequence[int], start: int, vmin: float) -> ZeroHit:
        ucols = np.asarray(self.uncovered_columns(), dtype=np.intp)
        if ucols.size == 0:
            return vmin, None, None, None

        for i in range(start, len(urows)):
            row = urows[i]
            if self.is_row_covered(row):
                continue

            vals = costs[row, ucols]
            hits = np.flatnonzero(vals == 0)
            if hits.size:
                return vmin, row, int(ucols[hits[0]]), i

            rmin = float(vals.min())
            if rmin < vmin:
                vmin = rmin

        return vmin, None, None, None

    def correct_min(
        self,
        costs: np.ndarray,
        col: int,
        urows: Sequence[int],
        stop: int,
        vmin: float,
        zeroes: List[Tuple[int, int]],
    ) -> float:
        rows = [row for row in urows[:stop] if not self.is_row_covered(row)]
        if not rows:
            return vmin

        vals = costs[rows, col]
        for i in np.flatnonzero(vals == 0):
            zeroes.append((rows[i], col))

        positive = vals[vals > 0]
        if positive.size:
            vmin = min(vmin, float(positive.min()))
        return vmin

    def update_covered(self, costs: np.ndarray, vmin: float) -> None:
        crows, ccols = self.covered_rows(), self.covered_columns()
        if crows and ccols:
            costs[np.ix_(crows, ccols)] += vmin

    def update_uncovered(self, costs: np.ndarray, vmin: float, zeroes: List[Tuple[int, int]]) -> None:
        urows, ucols = self.uncovered_rows(), self.uncovered_columns()
        if not urows or not ucols:
            return

        cells = np.ix_(urows, ucols)
        block = costs[cells] - vmin
        costs[cells] = block

        for i, j in np.argwhere(block == 0):
            zeroes.append((urows[i], ucols[j]))
