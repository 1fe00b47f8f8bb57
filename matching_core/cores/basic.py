# matching_core/cores/basic.py
"""
Basic Core - Plain-list coverage with no bit tricks or vectorized scans.

Reference implementation of the core contract: boolean lists for state and
straightforward loops for every scan.
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .base import CoverageCore, ZeroHit
from .factory import register_core


@register_core
class BasicCore(CoverageCore):
    name = "basic"
    description = "Basic - boolean lists, element-by-element scans"

    def __init__(self) -> None:
        super().__init__()
        self._row_covered: List[bool] = []
        self._col_covered: List[bool] = []

    def _reset_storage(self, is_first: bool) -> None:
        if is_first:
            self._row_covered = [False] * self.nrows
            self._col_covered = [False] * self.ncols
        else:
            for i in range(self.nrows):
                self._row_covered[i] = False
            for i in range(self.ncols):
                self._col_covered[i] = False

    def is_row_covered(self, row: int) -> bool:
        return self._row_covered[row]

    def is_column_covered(self, col: int) -> bool:
        return self._col_covered[col]

    def _mark_row_covered(self, row: int) -> bool:
        if self._row_covered[row]:
            return False
        self._row_covered[row] = True
        return True

    def _mark_column(self, col: int, covered: bool) -> bool:
        if self._col_covered[col] == covered:
            return False
        self._col_covered[col] = covered
        return True

    def _collect_rows(self, covered: bool) -> List[int]:
        return [i for i, flag in enumerate(self._row_covered) if flag == covered]

    def _collect_columns(self, covered: bool) -> List[int]:
        return [i for i, flag in enumerate(self._col_covered) if flag == covered]

    def _count_covered_columns(self) -> int:
        return sum(1 for flag in self._col_covered if flag)

    def subtract_smallest_row_costs(self, costs: np.ndarray) -> None:
        for row in range(self.nrows):
            rmin = costs[row, 0]
            for col in range(1, self.ncols):
                if costs[row, col] < rmin:
                    rmin = costs[row, col]
            for col in range(self.ncols):
                costs[row, col] -= rmin

    def find_zero_in_row(self, costs: np.ndarray, col_star: Sequence[int], row: int) -> Optional[int]:
        for col in range(self.ncols):
            if costs[row, col] == 0 and col_star[col] == self.nrows:
                return col
        return None

    def find_zero(self, costs: np.ndarray, urows: Sequence[int], start: int, vmin: float) -> ZeroHit:
        ucols = self.uncovered_columns()

        for i in range(start, len(urows)):
            row = urows[i]
            if self._row_covered[row]:
                continue

            vmin_cur = vmin
            for col in ucols:
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
        for i in range(stop):
            row = urows[i]
            if self._row_covered[row]:
                continue

            cost = costs[row, col]
            if cost == 0:
                zeroes.append((row, col))
            elif cost < vmin:
                vmin = float(cost)
        return vmin

    def update_covered(self, costs: np.ndarray, vmin: float) -> None:
        ccols = self.covered_columns()
        for row in self.covered_rows():
            for col in ccols:
                costs[row, col] += vmin

    def update_uncovered(self, costs: np.ndarray, vmin: float, zeroes: List[Tuple[int, int]]) -> None:
        ucols = self.uncovered_columns()
        for row in self.uncovered_rows():
            for col in ucols:
                cost = costs[row, col] - vmin
                costs[row, col] = cost
                if cost == 0:
                    zeroes.append((row, col))
