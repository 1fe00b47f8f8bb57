"""
Hungarian / Kuhn-Munkres solver for rectangular cost matrices.

- Minimizes total cost.
- Costs are a flat, row-major sequence plus a column count; the caller's
  sequence is copied and never modified.
- When there are more rows than columns the transpose is solved and the
  result mapped back, so both shapes share one code path.
- run() returns 1-based columns, out[row] = col, with 0 for a row that
  could not be given a column. hungarian() is the 0-based, 2-D convenience
  form with -1 for unassigned rows.

Row/column coverage bookkeeping and the zero searches are delegated to a
coverage core (see matching_core.cores), chosen when the Solver is built.
"""
from __future__ import annotations
import logging
import math
from bisect import bisect_left
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from matching_core.cores import CoverageCore, DiagonalCore, create_core
from matching_core.errors import AssignmentError, MalformedCostsError
from matching_core.models import SolveResult, SolverConfig

logger = logging.getLogger(__name__)

YieldFunc = Callable[[], None]


def _normalize(costs: Sequence[float] | np.ndarray, ncols: int) -> Tuple[int, np.ndarray]:
    if isinstance(ncols, bool) or not isinstance(ncols, (int, np.integer)) or ncols < 1:
        raise MalformedCostsError(f"ncols must be a positive integer, got {ncols!r}")

    arr = np.asarray(costs)
    if arr.dtype.kind not in "iuf":
        raise MalformedCostsError(f"Costs must be numbers, got dtype {arr.dtype}")

    n = arr.size
    if n == 0 or n % ncols:
        raise MalformedCostsError(f"Cost count {n} is not a positive multiple of ncols={ncols}")
    if not np.isfinite(arr).all():
        raise MalformedCostsError("Costs must be finite")

    # astype copies, so the scratch buffer never aliases the caller's data
    return n // ncols, arr.astype(np.float64).reshape(-1, ncols)


class Solver:
    """
    Hungarian driver owning its scratch state.

    A Solver may be reused for any number of calls, but not from two threads
    at once; use one Solver per thread (or the module-level run()).

    Attributes:
        core: Coverage core used for every solve
        iterations: Outer-loop iterations taken by the last solve
    """

    def __init__(self, core: CoverageCore | str | None = None):
        if core is None or isinstance(core, str):
            core = create_core(core)
        self.core = core
        self.iterations = 0

        self._costs = np.empty((0, 0))
        self._row_star: List[int] = []
        self._col_star: List[int] = []
        self._primes: Dict[int, int] = {}
        self._zeroes: List[Tuple[int, int]] = []

    @classmethod
    def from_config(cls, config: SolverConfig) -> "Solver":
        return cls(config.core)

    def run(
        self,
        costs: Sequence[float] | np.ndarray,
        ncols: int,
        into: Optional[List[int]] = None,
        yfunc: Optional[YieldFunc] = None,
    ) -> List[int]:
        """
        Solve the assignment problem for a flat cost matrix.

        Args:
            costs: Row-major costs, len(costs) a positive multiple of ncols
            ncols: Number of columns
            into: Optional list to fill (and return) instead of a new one
            yfunc: Optional callback run between algorithm steps

        Returns:
            out[row] = assigned column (1-based), or 0 if the row got none

        Raises:
            MalformedCostsError: If the costs can't form a matrix
        """
        nrows, matrix = _normalize(costs, ncols)
        transposed = ncols < nrows
        if transposed:
            matrix = np.ascontiguousarray(matrix.T)

        logger.debug(
            f"Solving {nrows}x{ncols} with {self.core.name} core"
            + (" (transposed)" if transposed else "")
        )
        self._costs = matrix
        self._solve(*matrix.shape, yfunc)
        logger.debug(f"Solved in {self.iterations} iterations")

        result = self._extract(nrows, ncols, transposed)
        out = into if into is not None else []
        out[:] = result
        return out

    def solve(self, cost_matrix, yfunc: Optional[YieldFunc] = None) -> SolveResult:
        """Solve a 2-D cost matrix and report the assignment with its total cost."""
        matrix = np.asarray(cost_matrix)
        if matrix.ndim != 2:
            raise MalformedCostsError(f"Expected a 2-D cost matrix, got {matrix.ndim} dimensions")

        assignment = self.run(matrix.ravel(), matrix.shape[1], yfunc=yfunc)
        total = sum(float(matrix[row, col - 1]) for row, col in enumerate(assignment) if col)
        return SolveResult(
            assignment=assignment,
            total_cost=total,
            core=self.core.name,
            iterations=self.iterations,
        )

    # ------------------------------------------------------------------
    # Algorithm
    # ------------------------------------------------------------------
    def _solve(self, nrows: int, ncols: int, yfunc: Optional[YieldFunc]) -> None:
        core = self.core
        self._row_star = [ncols] * nrows
        self._col_star = [nrows] * ncols
        self._primes.clear()
        self._zeroes.clear()
        self.iterations = 0

        # Kick off with reduced rows and as many starred zeroes as come for free.
        core.clear_coverage(ncols, nrows, is_first=True)
        core.subtract_smallest_row_costs(self._costs)
        self._star_some_zeroes(nrows)

        check_solution = True

        while True:
            if yfunc is not None:
                yfunc()
            self.iterations += 1

            # Do the starred zeroes describe a complete set of unique assignments?
            if check_solution:
                if core.count_coverage(self._row_star):
                    return
                check_solution = False

            hit, vmin = self._prime_zeroes(ncols)
            self._zeroes.clear()

            # A primed zero with no star in its row: grow the assignment, then recheck.
            if hit is not None:
                self._build_path(hit[0], hit[1], nrows)
                core.clear_coverage(ncols, nrows)
                self._primes.clear()
                check_solution = True

            # No uncovered zeroes remain; shift costs without touching stars or primes.
            else:
                self._update_costs(vmin, yfunc)

    def _star_some_zeroes(self, nrows: int) -> None:
        core, costs = self.core, self._costs
        row_star, col_star = self._row_star, self._col_star

        for row in range(nrows):
            col = core.find_zero_in_row(costs, col_star, row)
            if col is not None:
                row_star[row], col_star[col] = col, row

    def _prime_zeroes(self, ncols: int) -> Tuple[Optional[Tuple[int, int]], float]:
        """
        Prime uncovered zeroes until one lands in a row without a star.

        Returns:
            ((row, col), vmin) for that zero, or (None, vmin) once no
            uncovered zero is left, vmin then being the smallest uncovered cost
        """
        core, costs = self.core, self._costs
        row_star, primes, zeroes = self._row_star, self._primes, self._zeroes

        urows = core.uncovered_rows()
        cursor, vmin, stale = 0, math.inf, False

        while True:
            if zeroes:
                row, col = zeroes.pop()
                if core.is_row_covered(row):
                    continue
                buffered = True
            else:
                vmin, row, col, index = core.find_zero(costs, urows, cursor, vmin)
                if row is None:
                    break
                cursor, buffered = index + 1, False

            primes[row] = col
            scol = row_star[row]
            if scol == ncols:
                return (row, col), vmin

            # Covering a row already folded into vmin leaves vmin too small.
            if buffered and bisect_left(urows, row) < cursor:
                stale = True

            core.cover_row(row)
            core.uncover_column(scol)
            vmin = core.correct_min(costs, scol, urows, cursor, vmin, zeroes)

        if stale:
            vmin = core.find_zero(costs, core.uncovered_rows(), 0, math.inf)[0]
        return None, vmin

    def _build_path(self, row: int, col: int, nrows: int) -> None:
        # Alternate primed and starred zeroes: star each primed zero, moving the
        # displaced star's row onto its own primed zero, until a column had no star.
        row_star, col_star, primes = self._row_star, self._col_star, self._primes

        while True:
            srow = col_star[col]
            row_star[row], col_star[col] = col, row
            if srow == nrows:
                return
            row, col = srow, primes[srow]

    def _update_costs(self, vmin: float, yfunc: Optional[YieldFunc]) -> None:
        if math.isinf(vmin):
            raise AssignmentError("No uncovered cost left to adjust the matrix with")

        self.core.update_covered(self._costs, vmin)
        if yfunc is not None:
            yfunc()
        self.core.update_uncovered(self._costs, vmin, self._zeroes)

    def _extract(self, nrows: int, ncols: int, transposed: bool) -> List[int]:
        if not transposed:
            return [col + 1 if col < ncols else 0 for col in self._row_star]

        # Rows of the transposed solve are the caller's columns.
        out = [0] * nrows
        for col, row in enumerate(self._row_star):
            if row < nrows:
                out[row] = col + 1
        return out


def run(
    costs: Sequence[float] | np.ndarray,
    ncols: int,
    *,
    into: Optional[List[int]] = None,
    yfunc: Optional[YieldFunc] = None,
    core: CoverageCore | str | None = None,
) -> List[int]:
    """Solve with a fresh Solver; see Solver.run."""
    return Solver(core).run(costs, ncols, into=into, yfunc=yfunc)


def hungarian(cost_matrix: List[List[float]] | np.ndarray) -> List[int]:
    """Return assign[row] = 0-based column for a 2-D matrix, -1 where unassigned."""
    cost = np.array(cost_matrix, dtype=float)
    if cost.size == 0:
        return []
    if cost.ndim != 2:
        raise MalformedCostsError(f"Expected a 2-D cost matrix, got {cost.ndim} dimensions")

    return [col - 1 for col in run(cost.ravel(), cost.shape[1])]


def run_tridiagonal(
    band: Sequence[float] | np.ndarray,
    *,
    into: Optional[List[int]] = None,
    yfunc: Optional[YieldFunc] = None,
) -> List[int]:
    """
    Solve a square problem whose only valid cells are the main diagonal +/- 1.

    The band is given compactly, row by row: (diag, right) for the first row,
    (left, diag, right) for interior rows and (left, diag) for the last, so an
    n x n problem takes 3n - 2 values (1 when n is 1).

    Returns:
        out[row] = assigned column (1-based)
    """
    vals = np.asarray(band)
    if vals.dtype.kind not in "iuf":
        raise MalformedCostsError(f"Band costs must be numbers, got dtype {vals.dtype}")

    size = vals.size
    if size == 0 or (size + 2) % 3:
        raise MalformedCostsError(f"Band length {size} is not 3n - 2 for any n >= 1")
    if not np.isfinite(vals).all():
        raise MalformedCostsError("Band costs must be finite")

    n = (size + 2) // 3
    filler = 2.0 * float(np.abs(vals).max()) + 1.0
    matrix = np.full((n, n), filler)

    pos = 0
    for row in range(n):
        lo, hi = max(0, row - 1), min(n, row + 2)
        matrix[row, lo:hi] = vals[pos:pos + hi - lo]
        pos += hi - lo

    return Solver(DiagonalCore()).run(matrix.ravel(), n, into=into, yfunc=yfunc)
