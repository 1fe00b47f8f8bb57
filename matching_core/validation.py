# FILE: matching_core/validation.py
from __future__ import annotations
from itertools import permutations
from typing import List, Sequence, Tuple

import numpy as np


def is_permutation(assignment: Sequence[int], ncols: int) -> bool:
    """True if the 1-based assignment uses distinct columns in 1..ncols (0 = unassigned)."""
    used = [col for col in assignment if col != 0]
    return all(1 <= col <= ncols for col in used) and len(set(used)) == len(used)

def assignment_cost(matrix, assignment: Sequence[int]) -> float:
    cost = np.asarray(matrix, dtype=float)
    return float(sum(cost[row, col - 1] for row, col in enumerate(assignment) if col))

def brute_force_assignment(matrix) -> Tuple[float, List[int]]:
    """
    Exhaustive minimum for small matrices, as (cost, 1-based assignment).

    Tries every way of giving the smaller side distinct partners, so keep
    max(nrows, ncols) small.
    """
    cost = np.asarray(matrix, dtype=float)
    nrows, ncols = cost.shape
    best: Tuple[float, List[int]] = (float("inf"), [])

    if nrows <= ncols:
        for cols in permutations(range(ncols), nrows):
            total = float(sum(cost[r, c] for r, c in enumerate(cols)))
            if total < best[0]:
                best = (total, [c + 1 for c in cols])
    else:
        for rows in permutations(range(nrows), ncols):
            total = float(sum(cost[r, c] for c, r in enumerate(rows)))
            if total < best[0]:
                out = [0] * nrows
                for c, r in enumerate(rows):
                    out[r] = c + 1
                best = (total, out)
    return best

def run_self_test():
    """
    Run a basic suite of self-tests.
    """
    results = {"tests": []}
    from matching_core.hungarian import hungarian, run, run_tridiagonal
    from matching_core.assignment import run_labels

    matrix = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    out = run([v for row in matrix for v in row], 3)
    results["tests"].append(("Known 3x3 assignment", out == [2, 1, 3]))
    results["tests"].append(("Known 3x3 cost", assignment_cost(matrix, out) == 5))

    assignment = hungarian([[1, 2], [2, 1]])
    results["tests"].append(("Hungarian full matching", set(assignment) == {0, 1}))

    wide = [[3, 1, 2], [1, 3, 2]]
    out = run([v for row in wide for v in row], 3)
    results["tests"].append(("Rectangular is optimal", assignment_cost(wide, out) == brute_force_assignment(wide)[0]))

    for name in ("basic", "diagonal"):
        out = run([v for row in matrix for v in row], 3, core=name)
        results["tests"].append((f"{name} core agrees", assignment_cost(matrix, out) == 5))

    # 3x3 band: rows (d, r), (l, d, r), (l, d)
    out = run_tridiagonal([5, 1, 1, 5, 1, 1, 5])
    results["tests"].append(("Tridiagonal is a permutation", is_permutation(out, 3) and 0 not in out))

    pairs = run_labels({"a": {"x": 1, "y": 3}, "b": {"x": 2, "y": 9}})
    results["tests"].append(("Labeled round trip", pairs == {"a": "y", "b": "x"}))
    return results
