# FILE: tests/test_hungarian.py
import numpy as np
import pytest

from matching_core.errors import MalformedCostsError
from matching_core.hungarian import Solver, hungarian, run
from matching_core.validation import assignment_cost, brute_force_assignment, is_permutation

SCENARIO = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]


def _flat(matrix):
    return [v for row in matrix for v in row]

def test_hungarian_simple():
    assignment = hungarian(SCENARIO)
    # Check full matching
    assert set(assignment) == set(range(len(SCENARIO)))
    cost = sum(SCENARIO[i][assignment[i]] for i in range(len(SCENARIO)))
    assert cost == 5

def test_run_known_scenario():
    out = run(_flat(SCENARIO), 3)
    assert out == [2, 1, 3]
    assert assignment_cost(SCENARIO, out) == 5

def test_square_is_bijection_and_optimal():
    rng = np.random.default_rng(7)
    for n in range(1, 7):
        for _ in range(6):
            matrix = rng.integers(0, 20, size=(n, n))
            out = run(matrix.ravel(), n)
            assert sorted(out) == list(range(1, n + 1))
            assert assignment_cost(matrix, out) == brute_force_assignment(matrix)[0]

@pytest.mark.parametrize("shape", [(2, 4), (4, 2), (3, 5), (5, 3), (1, 4), (4, 1)])
def test_rectangular_is_optimal(shape):
    rng = np.random.default_rng(11)
    nrows, ncols = shape
    for _ in range(5):
        matrix = rng.integers(0, 9, size=shape)
        out = run(matrix.ravel(), ncols)
        assert len(out) == nrows
        assert is_permutation(out, ncols)
        assert sum(1 for col in out if col) == min(nrows, ncols)
        assert assignment_cost(matrix, out) == brute_force_assignment(matrix)[0]

def test_rectangular_symmetry():
    rng = np.random.default_rng(3)
    matrix = rng.integers(0, 50, size=(3, 6))
    wide = run(matrix.ravel(), 6)
    tall = run(matrix.T.ravel(), 3)
    assert assignment_cost(matrix, wide) == assignment_cost(matrix.T, tall)

def test_float_costs_are_optimal():
    rng = np.random.default_rng(5)
    for n in range(2, 6):
        matrix = rng.random((n, n))
        out = run(matrix.ravel(), n)
        assert assignment_cost(matrix, out) == pytest.approx(brute_force_assignment(matrix)[0])

def test_deterministic():
    rng = np.random.default_rng(21)
    matrix = rng.integers(0, 3, size=(6, 6)).ravel()
    assert run(matrix, 6) == run(matrix, 6)
    solver = Solver()
    assert solver.run(matrix, 6) == solver.run(matrix, 6)

def test_more_rows_than_columns_leaves_zeroes():
    out = run([1, 0, 5], 1)
    assert out == [0, 1, 0]
    assert hungarian([[1], [0], [5]]) == [-1, 0, -1]

def test_hungarian_empty():
    assert hungarian([]) == []

def test_caller_input_not_mutated():
    costs = _flat(SCENARIO)
    before = list(costs)
    run(costs, 3)
    assert costs == before

    arr = np.array(SCENARIO, dtype=float)
    copy = arr.copy()
    run(arr.ravel(), 3)
    assert np.array_equal(arr, copy)

def test_into_is_filled_and_returned():
    into = [9, 9, 9, 9, 9]
    out = run(_flat(SCENARIO), 3, into=into)
    assert out is into
    assert into == [2, 1, 3]

def _count_adjustments(monkeypatch):
    adjustments = []
    update_costs = Solver._update_costs

    def counting(self, vmin, yfunc):
        adjustments.append(vmin)
        return update_costs(self, vmin, yfunc)

    monkeypatch.setattr(Solver, "_update_costs", counting)
    return adjustments

def test_yfunc_called_each_iteration(monkeypatch):
    adjustments = _count_adjustments(monkeypatch)
    calls = []
    solver = Solver()
    solver.run([0, 1, 1, 1, 0, 1, 1, 1, 0], 3, yfunc=lambda: calls.append(1))
    # Already solved after row reduction: one pass, no adjustment
    assert len(calls) == 1
    assert solver.iterations == 1
    assert adjustments == []

    calls.clear()
    solver.run(_flat(SCENARIO), 3, yfunc=lambda: calls.append(1))
    assert solver.iterations > 1
    assert adjustments
    # Once per outer iteration, plus once between the two halves of each adjustment
    assert len(calls) == solver.iterations + len(adjustments)

@pytest.mark.parametrize("core", ["dense", "basic"])
def test_yfunc_count_on_random_matrices(monkeypatch, core):
    adjustments = _count_adjustments(monkeypatch)
    rng = np.random.default_rng(29)
    solver = Solver(core)
    for n in range(2, 7):
        matrix = rng.integers(0, 10, size=(n, n + 1))
        calls = []
        adjustments.clear()
        solver.run(matrix.ravel(), n + 1, yfunc=lambda: calls.append(1))
        assert len(calls) == solver.iterations + len(adjustments)

def test_yfunc_runs_between_adjustment_halves(monkeypatch):
    events = []
    core = Solver().core
    update_covered, update_uncovered = core.update_covered, core.update_uncovered

    def covered(costs, vmin):
        events.append("covered")
        update_covered(costs, vmin)

    def uncovered(costs, vmin, zeroes):
        events.append("uncovered")
        update_uncovered(costs, vmin, zeroes)

    monkeypatch.setattr(core, "update_covered", covered)
    monkeypatch.setattr(core, "update_uncovered", uncovered)
    Solver(core).run(_flat(SCENARIO), 3, yfunc=lambda: events.append("yield"))

    assert "covered" in events
    for i, event in enumerate(events):
        if event == "covered":
            assert events[i + 1:i + 3] == ["yield", "uncovered"]

@pytest.mark.parametrize("costs, ncols", [
    ([1, 2, 3], 0),
    ([1, 2, 3], -1),
    ([1, 2, 3], True),
    ([1, 2, 3], 2.0),
    ([1, 2, 3], 2),
    ([], 1),
    ([1, float("nan")], 2),
    ([1, float("inf")], 2),
    (["a", "b"], 2),
])
def test_malformed_costs(costs, ncols):
    with pytest.raises(MalformedCostsError):
        run(costs, ncols)

def test_malformed_is_value_error():
    with pytest.raises(ValueError):
        run([1, 2, 3], 2)

def test_solve_reports_total():
    result = Solver().solve(SCENARIO)
    assert result.assignment == [2, 1, 3]
    assert result.total_cost == 5
    assert result.core == "dense"
    assert result.iterations >= 1

def test_solve_rejects_flat_input():
    with pytest.raises(MalformedCostsError):
        Solver().solve([1, 2, 3])
