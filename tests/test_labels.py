# FILE: tests/test_labels.py
import logging

import pytest

import matching_core.assignment as assignment_mod
from matching_core.assignment import run_labels
from matching_core.errors import MalformedCostsError, MissingEndpointsError
from matching_core.hungarian import Solver, run
from matching_core.labels import LabelGroup
from matching_core.models import SolverConfig

SCENARIO = {
    "ann": {"x": 4, "y": 1, "z": 3},
    "bob": {"x": 2, "y": 0, "z": 5},
    "cy": {"x": 3, "y": 2, "z": 2},
}


def test_label_group_indices():
    group = LabelGroup()
    assert group.index_of("a") == 0
    assert group.index_of("b") == 1
    assert group.index_of("a") == 0
    assert group.label_at(1) == "b"
    assert group.labels == ["a", "b"]
    assert len(group) == 2
    assert "a" in group and "c" not in group
    assert list(group) == ["a", "b"]

def test_label_group_clear_and_context():
    with LabelGroup() as group:
        group.index_of(("tuple", 1))
        group.index_of(7)
        assert len(group) == 2
    assert len(group) == 0
    assert group.index_of("fresh") == 0

def test_run_labels_matches_run():
    pairs = run_labels(SCENARIO)
    out = run([4, 1, 3, 2, 0, 5, 3, 2, 2], 3)
    to_labels = ["x", "y", "z"]
    assert pairs == {src: to_labels[col - 1] for src, col in zip(SCENARIO, out)}
    assert pairs == {"ann": "y", "bob": "x", "cy": "z"}

def test_run_labels_rectangular():
    pairs = run_labels({"a": {"x": 5, "y": 1, "z": 4}, "b": {"x": 1, "y": 2, "z": 6}})
    assert pairs == {"a": "y", "b": "x"}

    pairs = run_labels({"a": {"x": 3}, "b": {"x": 1}, "c": {"x": 2}})
    assert pairs == {"b": "x"}

def test_run_labels_drops_sentinel_pairs(caplog):
    with caplog.at_level(logging.WARNING, logger="matching_core.assignment"):
        pairs = run_labels({"a": {"x": 1, "y": 2}, "b": {}})
    assert pairs == {"a": "x"}
    assert "Dropped 1 pair" in caplog.text

def test_run_labels_uses_given_solver_and_config():
    solver = Solver("basic")
    pairs = run_labels(SCENARIO, solver=solver, config=SolverConfig(sentinel_factor=1.5))
    assert pairs == {"ann": "y", "bob": "x", "cy": "z"}
    assert solver.iterations >= 1

@pytest.mark.parametrize("factor", [1.01, 1.5, 2, 10])
def test_run_labels_prefers_real_edges_over_sentinels(factor):
    # A complete matching along real edges exists; no pair may be dropped
    candidates = {"b": {"x": 0, "y": 1}, "a": {"x": 0}}
    pairs = run_labels(candidates, config=SolverConfig(sentinel_factor=factor))
    assert pairs == {"b": "y", "a": "x"}

@pytest.mark.parametrize("factor", [1, 0.5, 0])
def test_sentinel_factor_must_exceed_one(factor):
    with pytest.raises(ValueError, match="sentinel_factor"):
        SolverConfig(sentinel_factor=factor)

def test_run_labels_all_zero_costs():
    pairs = run_labels({"a": {"x": 0}, "b": {"y": 0}})
    assert pairs == {"a": "x", "b": "y"}

@pytest.mark.parametrize("candidates", [{}, {"a": {}}, {"a": {}, "b": {}}])
def test_run_labels_missing_endpoints(candidates):
    with pytest.raises(MissingEndpointsError):
        run_labels(candidates)

@pytest.mark.parametrize("cost", [-1, "3", None, float("nan"), True])
def test_run_labels_bad_cost(cost):
    with pytest.raises(MalformedCostsError):
        run_labels({"a": {"x": 1}, "b": {"x": cost}})

def test_label_groups_released_on_error(monkeypatch):
    made = []

    class SpyGroup(LabelGroup):
        def __init__(self):
            super().__init__()
            self.cleared = 0
            made.append(self)

        def clear(self):
            self.cleared += 1
            super().clear()

    monkeypatch.setattr(assignment_mod, "LabelGroup", SpyGroup)
    with pytest.raises(MalformedCostsError):
        run_labels({"a": {"x": 1}, "b": {"y": -2}})

    assert len(made) == 2
    assert all(g.cleared == 1 and len(g) == 0 for g in made)
