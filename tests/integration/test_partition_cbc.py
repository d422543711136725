"""End-to-end solves with the CBC solver bundled with PuLP."""

import pulp
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from multiway import (
    Objective,
    PartitionParams,
    UnsupportedCapabilityError,
    partition,
    random_assignment,
    solve_partition,
)
from multiway.config import ModelParams
from multiway.optimization import group_sums
from tests.utils.stubs import ScriptedSolver


def _assert_valid(assignment, sizes, k):
    assert len(assignment) == len(sizes)
    assert all(1 <= g <= k for g in assignment)
    sums = group_sums(sizes, assignment, k)
    assert sum(sums) == pytest.approx(sum(sizes))
    # Group sums are non-decreasing in the group index
    assert all(a <= b + 1e-6 for a, b in zip(sums, sums[1:]))
    return sums


@pytest.mark.parametrize("objective", list(Objective))
def test_example_has_perfect_split(example_sizes, cbc_solver, objective):
    assignment = partition(example_sizes, 3, objective, solver=cbc_solver)

    sums = _assert_valid(assignment, example_sizes, 3)
    assert sums == pytest.approx([3.0, 3.0, 3.0])


def test_default_objective_is_min_range(example_sizes, cbc_solver):
    solution = solve_partition(example_sizes, 3, solver=cbc_solver)

    assert solution.objective == "min-range"
    assert solution.group_range == pytest.approx(0.0)
    assert solution.solver_status == "Optimal"


def test_selected_solver_reports_adapter_name(example_sizes, monkeypatch):
    monkeypatch.setenv("MULTIWAY_SOLVER", "cbc")

    solution = solve_partition(example_sizes, 3)

    assert solution.solver_name == "CBC"
    assert solution.group_range == pytest.approx(0.0)


def test_single_group_gets_everything(cbc_solver):
    assert partition([5, -2, 7], 1, solver=cbc_solver) == [1, 1, 1]


def test_more_groups_than_items(cbc_solver):
    sizes = [4, 9]
    assignment = partition(sizes, 3, Objective.MIN_LARGEST, solver=cbc_solver)

    sums = _assert_valid(assignment, sizes, 3)
    assert sums == pytest.approx([0.0, 4.0, 9.0])


def test_negative_sizes(cbc_solver):
    sizes = [-3, 5, 2, -1, 4]
    assignment = partition(sizes, 2, solver=cbc_solver)

    sums = _assert_valid(assignment, sizes, 2)
    # Total 7 cannot split evenly over integers: best range is 1
    assert sums[1] - sums[0] == pytest.approx(1.0)


@pytest.mark.parametrize(
    "objective, statistic",
    [
        (Objective.MIN_LARGEST, lambda sums: -max(sums)),
        (Objective.MAX_SMALLEST, lambda sums: min(sums)),
        (Objective.MIN_RANGE, lambda sums: -(max(sums) - min(sums))),
    ],
)
def test_optimum_dominates_random_assignments(species_counts, cbc_solver, objective, statistic):
    k = 4
    optimum = group_sums(
        species_counts, partition(species_counts, k, objective, solver=cbc_solver), k
    )

    for seed in range(20):
        baseline = group_sums(species_counts, random_assignment(len(species_counts), k, seed), k)
        assert statistic(optimum) >= statistic(baseline) - 1e-6


def test_label_entropy_mixes_labels(cbc_solver):
    sizes = [1, 1, 1, 1]
    # Items 0 and 1 carry label A, items 2 and 3 label B
    labels = [[1, 0], [1, 0], [0, 1], [0, 1]]
    params = PartitionParams(model=ModelParams(entropy_cuts=8))

    assignment = partition(
        sizes, 2, labels=labels, alpha=0.5, params=params, solver=cbc_solver
    )

    assert assignment[0] != assignment[1]
    assert assignment[2] != assignment[3]


def test_labels_with_zero_alpha_match_plain_solve(example_sizes, cbc_solver):
    labels = [[1], [0], [1], [0], [1], [0]]

    solution = solve_partition(example_sizes, 3, labels=labels, solver=cbc_solver)

    assert solution.group_range == pytest.approx(0.0)


def test_unsupported_capability_raised_before_solving(example_sizes):
    solver = ScriptedSolver()
    labels = [[1], [0], [1], [0], [1], [0]]

    with pytest.raises(UnsupportedCapabilityError):
        partition(example_sizes, 3, labels=labels, alpha=0.1, solver=solver)
    assert solver.calls == 0


@settings(
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
@given(
    sizes=st.lists(st.integers(-20, 50), min_size=1, max_size=7),
    k=st.integers(1, 4),
)
def test_solutions_are_valid_partitions(sizes, k):
    assignment = partition(sizes, k, solver=pulp.PULP_CBC_CMD(msg=0))

    _assert_valid(assignment, sizes, k)
