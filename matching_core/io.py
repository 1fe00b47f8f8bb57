# matching_core/io.py
from __future__ import annotations
import io
from typing import Dict, Hashable, Mapping

import pandas as pd
import yaml

from matching_core.constants import CANDIDATE_COLUMNS
from matching_core.errors import MalformedCostsError
from matching_core.models import SolverConfig

Candidates = Dict[Hashable, Dict[Hashable, float]]


def load_solver_config(path: str) -> SolverConfig:
    with open(path, "r", encoding="utf-8") as f:
        obj = yaml.safe_load(f) or {}
    if not isinstance(obj, dict):
        raise ValueError(f"Solver config {path} must be a mapping.")
    return SolverConfig(**obj)

def save_solver_config(path: str, config: SolverConfig):
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(), f, sort_keys=False)

def candidates_from_frame(
    df: pd.DataFrame,
    from_col: str = "from",
    to_col: str = "to",
    cost_col: str = "cost",
) -> Candidates:
    """Turn one-edge-per-row data into {from: {to: cost}}; a repeated edge keeps its last cost."""
    missing = [c for c in (from_col, to_col, cost_col) if c not in df.columns]
    if missing:
        raise MalformedCostsError(f"Missing required columns: {missing}")

    costs = pd.to_numeric(df[cost_col], errors="coerce")
    if costs.isna().any():
        bad = df.loc[costs.isna(), cost_col].tolist()
        raise MalformedCostsError(f"Non-numeric costs: {bad}")

    out: Candidates = {}
    for src, dst, cost in zip(df[from_col], df[to_col], costs):
        out.setdefault(src, {})[dst] = float(cost)
    return out

def load_candidates_csv(
    file_like,
    from_col: str = "from",
    to_col: str = "to",
    cost_col: str = "cost",
) -> Candidates:
    df = pd.read_csv(file_like, dtype={from_col: str, to_col: str})
    df.columns = [str(c).strip() for c in df.columns]
    return candidates_from_frame(df, from_col, to_col, cost_col)

def assignment_to_frame(
    assignment: Mapping[Hashable, Hashable],
    candidates: Mapping[Hashable, Mapping[Hashable, float]],
) -> pd.DataFrame:
    rows = [
        {"from": src, "to": dst, "cost": float(candidates[src][dst])}
        for src, dst in assignment.items()
    ]
    return pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)

def save_assignment_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
