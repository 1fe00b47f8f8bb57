# matching_core/cores/diagonal.py
"""
Diagonal Core - Coverage for square, banded matrices.

Only the cells on the main diagonal and one column either side of it are
valid; at the corners the band is clipped, so the first and last rows have
two cells and every other row has three. Nothing outside the band is read or
written, which turns each row scan and update into O(1) work.

Within a row, uncovered band columns are visited in the same order as the
dense core visits its uncovered-column list, so on banded input both cores
reach the same assignment.
"""
from __future__ import annotations
from bisect import bisect_left
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..constants import BAND_RADIUS
from ..errors import MalformedCostsError
from .base import ZeroHit
from .dense import DenseCore
from .factory import register_core


@register_core
class DiagonalCore(DenseCore):
    name = "diagonal"
    description = "Diagonal - square banded matrices, main diagonal +/- 1"

    def clear_coverage(self, ncols: int, nrows: int, is_first: bool = False) -> None:
        if is_first and ncols != nrows:
            raise MalformedCostsError(
                f"Diagonal core needs a square matrix, got {nrows} x {ncols}"
            )
        super().clear_coverage(ncols, nrows, is_first)

    def band(self, row: int) -> range:
        """Valid columns of a row, clipped at the matrix edges."""
        return range(max(0, row - BAND_RADIUS), min(self.ncols, row + BAND_RADIUS + 1))

    def _uncovered_band(self, row: int) -> List[int]:
        rank = self._col_rank
        cols = [col for col in self.band(row) if not self.is_column_covered(col)]
        cols.sort(key=rank.__getitem__)
        return cols

    def subtract_smallest_row_costs(self, costs: np.ndarray) -> None:
        for row in range(self.nrows):
            band = self.band(row)
            cells = costs[row, band.start:band.stop]
            cells -= cells.min()

    def find_zero_in_row(self, costs: np.ndarray, col_star: Sequence[int], row: int) -> Optional[int]:
        for col in self.band(row):
            if costs[row, col] == 0 and col_star[col] == self.nrows:
                return col
        return None

    def find_zero(self, costs: np.ndarray, urows: Sequence[int], start: int, vmin: float) -> ZeroHit:
        # Refreshes the column ranks if the uncovered list was invalidated.
        if not self.uncovered_columns():
            return vmin, None, None, None

        for i in range(start, len(urows)):
            row = urows[i]
            if self.is_row_covered(row):
                continue

            vmin_cur = vmin
            for col in self._uncovered_band(row):
                cost = costs[row, col]
                if cost < vmin:
                    if cost == 0:
                        return vmin_cur, row, col, i
                    vmin = float(cost)

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
        # urows is ascending, so the rows touching this column can be looked up.
        for row in self.band(col):
            pos = bisect_left(urows, row)
            if pos >= stop or pos >= len(urows) or urows[pos] != row or self.is_row_covered(row):
                continue

            cost = costs[row, col]
            if cost == 0:
                zeroes.append((row, col))
            elif cost < vmin:
                vmin = float(cost)
        return vmin

    def update_covered(self, costs: np.ndarray, vmin: float) -> None:
        for row in self.covered_rows():
            for col in self.band(row):
                if self.is_column_covered(col):
                    costs[row, col] += vmin

    def update_uncovered(self, costs: np.ndarray, vmin: float, zeroes: List[Tuple[int, int]]) -> None:
        self.uncovered_columns()

        for row in self.uncovered_rows():
            for col in self._uncovered_band(row):
                cost = costs[row, col] - vmin
                costs[row, col] = cost
                if cost == 0:
                    zeroes.append((row, col))
