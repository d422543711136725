"""
core.py

Builds and solves the **multiway number partitioning** MILP.

Given sizes S (length N) and a number of groups k, the model assigns every item
to exactly one group so that the group sums are as equal as possible.

Formulation
-----------
Variables:  x_ij binary, 1 if item *i* belongs to group *j*

subject to
* Exactly-one - every item sits in exactly one group:  Σ_j x_ij = 1
* Ordering - group sums are non-decreasing:  s_j <= s_{j+1},
  with s_j = Σ_i S_i · x_ij. This removes the k! relabelings of every
  solution and makes group 1 the smallest and group k the largest.

Label balancing (optional)
~~~~~~~~~~~~~~~~~~~~~~~~~~
With an N x L matrix of non-negative label weights, ``p_jl`` is the share of
label *l*'s total weight that lands in group *j*. An entropy variable t_jl is
bounded by ``t_jl <= -p_jl · ln(p_jl)``, the hypograph that the exponential
cone ``(t, p, 1)`` describes. PuLP solvers have no conic constraints, so the
hypograph is replaced by ``entropy_cuts`` tangent lines of the concave
function, ``t <= a - (1 + ln a) · p`` for a spread over (0, 1].

Solver interface
----------------
Any ``pulp.LpSolver`` can be passed in; otherwise
:func:`multiway.utils.solver.select_solver` chooses Gurobi/HiGHS/CBC.

Typical usage
-------------
>>> from multiway.optimization import partition
>>> partition([1, 1, 1, 3, 2, 1], 3)  # doctest: +SKIP
[1, 1, 1, 2, 3, 3]
"""

import math
import numbers
import time
import warnings
from collections.abc import Sequence
from typing import Any

import numpy as np
import pulp

from multiway.config.params import PartitionParams
from multiway.core_types import PartitionModel, PartitionSolution
from multiway.exceptions import (
    DecodingError,
    ModelConstructionError,
    OptimizationError,
    OptimizationWarning,
)
from multiway.utils.logging import MultiwayLogger
from multiway.utils.solver import select_solver

from .objectives import Objective, apply_objective

logger = MultiwayLogger.get_logger(__name__)


def _validate_sizes(sizes: Sequence[float]) -> list[float]:
    try:
        values = [float(s) for s in sizes]
    except (TypeError, ValueError) as exc:
        raise ModelConstructionError(f"sizes must be a sequence of numbers: {exc}") from exc

    if not values:
        raise ModelConstructionError("sizes must not be empty")
    bad = [i for i, s in enumerate(values) if not math.isfinite(s)]
    if bad:
        raise ModelConstructionError(f"sizes must be finite; invalid entries at {bad}")
    return values


def _validate_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise ModelConstructionError(f"k must be an integer, got {k!r}")
    if k < 1:
        raise ModelConstructionError(f"k must be at least 1, got {k}")
    return int(k)


def _validate_labels(labels: Any, n_items: int) -> np.ndarray | None:
    if labels is None:
        return None
    try:
        matrix = np.asarray(labels, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ModelConstructionError(f"labels must be a numeric matrix: {exc}") from exc

    if matrix.ndim != 2:
        raise ModelConstructionError(
            f"labels must be a 2-D matrix (items x labels), got {matrix.ndim} dimension(s)"
        )
    if matrix.shape[0] != n_items:
        raise ModelConstructionError(
            f"labels has {matrix.shape[0]} rows but there are {n_items} sizes"
        )
    if not np.all(np.isfinite(matrix)):
        raise ModelConstructionError("labels must only contain finite values")
    if np.any(matrix < 0):
        raise ModelConstructionError("labels must be non-negative weights")
    return matrix


def _entropy_tangent_points(entropy_cuts: int) -> np.ndarray:
    return np.linspace(1.0 / entropy_cuts, 1.0, entropy_cuts)


def build_model(
    sizes: Sequence[float],
    k: int,
    labels: Any = None,
    *,
    entropy_cuts: int = 0,
) -> PartitionModel:
    """Create the partition model for ``sizes`` split into ``k`` groups.

    Args:
        sizes: Item sizes, any finite reals.
        k: Number of groups (>= 1). ``k > len(sizes)`` is allowed; the
            surplus groups stay empty.
        labels: Optional N x L matrix of non-negative label weights enabling
            the label-balancing shares and entropy terms.
        entropy_cuts: Number of tangent cuts approximating each entropy cone.
            0 builds the label shares only.

    Returns:
        A fresh :class:`PartitionModel` whose problem has no objective yet.

    Raises:
        ModelConstructionError: On empty or non-finite sizes, ``k < 1``, or a
            label matrix of the wrong shape.
    """
    values = _validate_sizes(sizes)
    k = _validate_k(k)
    label_matrix = _validate_labels(labels, len(values))
    if entropy_cuts < 0:
        raise ModelConstructionError(f"entropy_cuts must be non-negative, got {entropy_cuts}")

    n_items = len(values)
    items = range(n_items)
    groups = range(k)

    problem = pulp.LpProblem("Multiway_Partition", pulp.LpMinimize)

    # Decision variables
    x = [
        [pulp.LpVariable(f"x_{i}_{j}", cat="Binary") for j in groups] for i in items
    ]

    # 1. Exactly-one assignment
    for i in items:
        problem += pulp.lpSum(x[i]) == 1, f"Assign_Once_{i}"

    # The sum of group j is the dot product of column j of x with the sizes
    subset_sums = [pulp.lpSum(values[i] * x[i][j] for i in items) for j in groups]

    # 2. Ordering of group sums (symmetry breaking)
    for j in range(k - 1):
        problem += subset_sums[j] <= subset_sums[j + 1], f"Order_Sums_{j}"

    model = PartitionModel(
        problem=problem,
        sizes=values,
        k=k,
        assignment=x,
        subset_sums=subset_sums,
        labels_given=label_matrix is not None,
        entropy_cuts=entropy_cuts,
    )

    if label_matrix is not None:
        _add_label_balancing(model, label_matrix, entropy_cuts)

    logger.debug(
        f"Built partition model: {n_items} items, {k} groups, "
        f"{len(problem.variables())} variables, {len(problem.constraints)} constraints"
    )
    return model


def _add_label_balancing(
    model: PartitionModel, label_matrix: np.ndarray, entropy_cuts: int
) -> None:
    """Add label shares and, when ``entropy_cuts > 0``, entropy variables."""
    problem = model.problem
    x = model.assignment
    weights = label_matrix.sum(axis=0)
    points = _entropy_tangent_points(entropy_cuts) if entropy_cuts else None

    for label, total in enumerate(weights):
        if total <= 0:
            logger.debug(f"Label column {label} has zero total weight; skipping it")
            continue
        for j in range(model.k):
            share = pulp.lpSum(
                float(label_matrix[i, label] / total) * x[i][j]
                for i in range(model.n_items)
                if label_matrix[i, label] != 0
            )
            model.label_shares[j, label] = share
            if points is None:
                continue

            # Tangent of -p*ln(p) at a, valid everywhere since the function is concave
            t = pulp.LpVariable(f"t_{j}_{label}")
            for m, a in enumerate(points):
                a = float(a)
                problem += (
                    t <= a - (1.0 + math.log(a)) * share,
                    f"Entropy_Cut_{j}_{label}_{m}",
                )
            model.entropy[j, label] = t

    if model.entropy:
        model.total_entropy = pulp.lpSum(model.entropy.values())


def check_status(problem: pulp.LpProblem, strict: bool = True) -> tuple[str, str]:
    """Verify the solver proved optimality and found a feasible point.

    Returns the ``(status, solution_status)`` names. Raises
    :class:`OptimizationError` when ``strict`` and the result is not proven
    optimal; otherwise warns with :class:`OptimizationWarning`.
    """
    status = pulp.LpStatus.get(problem.status, str(problem.status))
    solution_status = pulp.LpSolution.get(problem.sol_status, str(problem.sol_status))

    if (
        problem.status == pulp.LpStatusOptimal
        and problem.sol_status == pulp.LpSolutionOptimal
    ):
        return status, solution_status

    if strict:
        raise OptimizationError(status, solution_status)

    warnings.warn(
        f"Solver did not prove optimality (status: {status}, solution: "
        f"{solution_status}); decoding whatever values it returned",
        OptimizationWarning,
        stacklevel=3,
    )
    return status, solution_status


def decode_assignment(model: PartitionModel, threshold: float = 0.5) -> list[int]:
    """Convert the solved one-hot matrix into 1-based group indices.

    Raises:
        DecodingError: If a row has no values (no primal solution) or does not
            have exactly one entry above ``threshold``.
    """
    result = []
    for i, row in enumerate(model.assignment):
        values = [var.varValue for var in row]
        if any(v is None for v in values):
            raise DecodingError(
                i,
                values,
                f"Item {i} has no solution values; the solver returned no primal point",
            )
        chosen = [j for j, v in enumerate(values) if v > threshold]
        if len(chosen) != 1:
            raise DecodingError(
                i,
                values,
                f"Item {i} has {len(chosen)} groups above {threshold}: {values}",
            )
        result.append(chosen[0] + 1)
    return result


def group_sums(sizes: Sequence[float], assignment: Sequence[int], k: int) -> list[float]:
    """Sum of the sizes in each group, indexed 1..k."""
    sums = [0.0] * k
    for size, group in zip(sizes, assignment):
        sums[group - 1] += float(size)
    return sums


def solve_partition(
    sizes: Sequence[float],
    k: int,
    objective: Objective | str | None = None,
    *,
    solver: pulp.LpSolver | None = None,
    strict: bool | None = None,
    labels: Any = None,
    alpha: float | None = None,
    params: PartitionParams | None = None,
) -> PartitionSolution:
    """Build, solve and decode one partition problem.

    Explicit keyword arguments win over ``params``; with neither, the
    objective is min-range, ``alpha`` is 0 and ``strict`` is True.

    Note:
        With ``strict=False`` a non-optimal status only warns. If the solver
        returned no feasible point at all, decoding then fails with
        :class:`DecodingError` instead of returning meaningless indices.
    """
    params = params or PartitionParams()
    objective = Objective.parse(objective if objective is not None else params.model.objective)
    alpha = params.model.alpha if alpha is None else alpha
    strict = params.runtime.strict if strict is None else strict

    model = build_model(sizes, k, labels, entropy_cuts=params.model.entropy_cuts)
    apply_objective(model, objective, alpha)

    if solver is None:
        adapter, solver = select_solver(params.runtime)
        solver_name = adapter.name
    else:
        solver_name = solver.name
    logger.info(f"Using solver: {solver_name}")
    start_time = time.time()
    model.problem.solve(solver)
    solver_time = time.time() - start_time
    logger.debug(f"Optimization completed in {solver_time:.2f} seconds")

    status, solution_status = check_status(model.problem, strict)
    assignment = decode_assignment(model, params.model.decode_threshold)

    return PartitionSolution(
        assignment=assignment,
        group_sums=group_sums(model.sizes, assignment, model.k),
        objective=objective.value,
        alpha=alpha,
        solver_status=status,
        solution_status=solution_status,
        solver_name=solver_name,
        solver_runtime_sec=solver_time,
    )


def partition(
    sizes: Sequence[float],
    k: int,
    objective: Objective | str | None = None,
    *,
    solver: pulp.LpSolver | None = None,
    strict: bool | None = None,
    labels: Any = None,
    alpha: float | None = None,
    params: PartitionParams | None = None,
) -> list[int]:
    """Partition ``sizes`` into ``k`` groups with near-equal sums.

    Args:
        sizes: Values to partition.
        k: Number of groups.
        objective: :class:`Objective` or its name; defaults to min-range.
        solver: Optional explicit PuLP solver instance.
        strict: Raise on non-optimal solver status (default) or only warn.
        labels: Optional N x L label-weight matrix for label balancing.
        alpha: Weight of the label-balancing term.
        params: Defaults for everything above plus solver selection.

    Returns:
        ``v`` with ``v[i] == j`` when ``sizes[i]`` is in group ``j`` (1-based).
        Group sums are non-decreasing in ``j``.

    Example:
        >>> partition([1, 1, 1, 3, 2, 1], 3, "min-range")  # doctest: +SKIP
        [1, 1, 1, 2, 3, 3]

        Every group sums to 3; which equal-sum group gets which index
        depends on the solver.
    """
    return solve_partition(
        sizes,
        k,
        objective,
        solver=solver,
        strict=strict,
        labels=labels,
        alpha=alpha,
        params=params,
    ).assignment
