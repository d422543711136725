"""Compare objective strategies against each other and random baselines."""

from collections.abc import Sequence

import numpy as np
import pandas as pd
import pulp

from multiway.config.params import PartitionParams
from multiway.optimization import Objective, group_sums, solve_partition
from multiway.utils.logging import MultiwayLogger, ProgressTracker

logger = MultiwayLogger.get_logger(__name__)


def random_assignment(n_items: int, k: int, seed: int | None = None) -> list[int]:
    """Uniformly random 1-based group index for each item (exactly one each)."""
    rng = np.random.default_rng(seed)
    return [int(g) for g in rng.integers(1, k + 1, size=n_items)]


def summarize(sums: Sequence[float]) -> dict[str, float]:
    """Smallest, largest and range of a list of group sums."""
    return {
        "smallest": float(min(sums)),
        "largest": float(max(sums)),
        "range": float(max(sums) - min(sums)),
    }


def compare_objectives(
    sizes: Sequence[float],
    k: int,
    *,
    solver: pulp.LpSolver | None = None,
    params: PartitionParams | None = None,
    random_baselines: int = 2,
    seed: int = 431,
    show_progress: bool = False,
) -> pd.DataFrame:
    """Solve with every objective and tabulate the group sums.

    Random assignments are added as baselines so the optimal groupings can be
    judged at a glance.

    Returns:
        DataFrame indexed by ``Group`` (1..k) with one column per algorithm
        (``min-largest``, ``max-smallest``, ``min-range``, ``random-1``, ...).
        Each cell holds the sum of that group.
    """
    if random_baselines < 0:
        raise ValueError("random_baselines must be non-negative")

    steps = [objective.value for objective in Objective] + [
        f"random-{r}" for r in range(1, random_baselines + 1)
    ]
    progress = ProgressTracker(steps) if show_progress else None

    columns: dict[str, list[float]] = {}
    for objective in Objective:
        solution = solve_partition(sizes, k, objective, solver=solver, params=params)
        columns[objective.value] = solution.group_sums
        logger.debug(f"{objective.value}: group sums {solution.group_sums}")
        if progress:
            progress.advance(
                f"{objective.value}: range {solution.group_range:g}"
            )

    rng = np.random.default_rng(seed)
    for r in range(1, random_baselines + 1):
        assignment = random_assignment(len(sizes), k, int(rng.integers(0, 2**31 - 1)))
        columns[f"random-{r}"] = group_sums(sizes, assignment, k)
        if progress:
            progress.advance(f"random-{r}")

    if progress:
        progress.close()

    table = pd.DataFrame(columns, index=pd.RangeIndex(1, k + 1, name="Group"))
    return table
