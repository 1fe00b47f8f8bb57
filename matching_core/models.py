# matching_core/models.py
from __future__ import annotations
from typing import List
from pydantic import BaseModel, validator

from matching_core.constants import AUTO_CORE, DEFAULT_SENTINEL_FACTOR


class SolverConfig(BaseModel):
    core: str = AUTO_CORE
    sentinel_factor: float = DEFAULT_SENTINEL_FACTOR

    @validator("core")
    def _known_core(cls, v):
        from matching_core.cores import get_core_names
        if v != AUTO_CORE and v not in get_core_names():
            raise ValueError(f"core must be '{AUTO_CORE}' or one of {get_core_names()}")
        return v

    @validator("sentinel_factor")
    def _factor_above_one(cls, v):
        if v <= 1:
            raise ValueError("sentinel_factor must be > 1 so missing pairs cost more than any edge")
        return v


class SolveResult(BaseModel):
    assignment: List[int]
    total_cost: float
    core: str
    iterations: int = 0
