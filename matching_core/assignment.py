# FILE: matching_core/assignment.py
from __future__ import annotations
from typing import Dict, Hashable, List, Mapping, Optional, Tuple
import logging
import math
import numpy as np

from matching_core.constants import ZERO_COST_SENTINEL
from matching_core.errors import MalformedCostsError, MissingEndpointsError
from matching_core.hungarian import Solver
from matching_core.labels import LabelGroup
from matching_core.models import SolverConfig

logger = logging.getLogger(__name__)

Candidates = Mapping[Hashable, Mapping[Hashable, float]]


def _check_cost(src: Hashable, dst: Hashable, cost) -> float:
    if isinstance(cost, bool) or not isinstance(cost, (int, float, np.integer, np.floating)):
        raise MalformedCostsError(f"Cost for {src!r} -> {dst!r} is not a number: {cost!r}")
    value = float(cost)
    if not math.isfinite(value) or value < 0:
        raise MalformedCostsError(f"Cost for {src!r} -> {dst!r} must be finite and >= 0, got {cost!r}")
    return value


def _build_cost_matrix(
    candidates: Candidates,
    rows: LabelGroup,
    cols: LabelGroup,
    sentinel_factor: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the cost matrix for a labeled graph:
    - one row per from-label, one column per distinct to-label, both in
      first-seen order
    - pairs with no edge get a sentinel cost above every real one (a
      multiple of the largest cost, or 1 when all costs are 0)

    Returns:
        (cost, has_edge) where has_edge marks the cells that came from an edge
    """
    edges: List[Tuple[int, int, float]] = []
    for src, targets in candidates.items():
        i = rows.index_of(src)
        for dst, cost in targets.items():
            edges.append((i, cols.index_of(dst), _check_cost(src, dst, cost)))

    if not len(cols):
        raise MissingEndpointsError("Candidate graph has no to-labels")

    max_cost = max(c for _, _, c in edges)
    sentinel = sentinel_factor * max_cost if max_cost > 0 else ZERO_COST_SENTINEL

    cost = np.full((len(rows), len(cols)), sentinel, dtype=float)
    has_edge = np.zeros(cost.shape, dtype=bool)
    for i, j, c in edges:
        cost[i, j] = c
        has_edge[i, j] = True
    return cost, has_edge


def run_labels(
    candidates: Candidates,
    *,
    solver: Optional[Solver] = None,
    config: Optional[SolverConfig] = None,
) -> Dict[Hashable, Hashable]:
    """
    Assign from-labels to to-labels at minimum total cost.

    Args:
        candidates: {from_label: {to_label: cost}}, costs non-negative
        solver: Solver to reuse; built from config when omitted
        config: Core choice and sentinel factor (defaults if omitted)

    Returns:
        {from_label: to_label} for every pair joined by a real edge

    Raises:
        MissingEndpointsError: If there is nothing to assign
        MalformedCostsError: If a cost is negative or not a number
    """
    if not candidates:
        raise MissingEndpointsError("Candidate graph is empty")

    config = config or SolverConfig()
    solver = solver or Solver.from_config(config)

    with LabelGroup() as rows, LabelGroup() as cols:
        cost, has_edge = _build_cost_matrix(candidates, rows, cols, config.sentinel_factor)
        nrows, ncols = cost.shape
        logger.debug(f"Labeled solve: {nrows} from-labels x {ncols} to-labels")

        out = solver.run(cost.ravel(), ncols)

        result: Dict[Hashable, Hashable] = {}
        dropped = 0
        for i, col in enumerate(out):
            if not col:
                continue
            j = col - 1
            if has_edge[i, j]:
                result[rows.label_at(i)] = cols.label_at(j)
            else:
                dropped += 1

    if dropped:
        logger.warning(f"Dropped {dropped} pair(s) with no candidate edge")
    if not result:
        raise MissingEndpointsError("No from-label could be matched along a candidate edge")
    return result
