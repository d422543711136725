from dataclasses import dataclass, field

import pandas as pd
import pulp


@dataclass
class PartitionModel:
    """Model handle threaded through build -> objective -> solve -> decode.

    Each ``partition`` call owns exactly one handle; nothing on it is shared
    between calls.
    """

    problem: pulp.LpProblem
    sizes: list[float]
    k: int
    # assignment[i][j] is 1 if item i belongs to group j (0-based here)
    assignment: list[list[pulp.LpVariable]]
    subset_sums: list[pulp.LpAffineExpression]
    label_shares: dict[tuple[int, int], pulp.LpAffineExpression] = field(
        default_factory=dict
    )
    entropy: dict[tuple[int, int], pulp.LpVariable] = field(default_factory=dict)
    total_entropy: pulp.LpAffineExpression = field(
        default_factory=pulp.LpAffineExpression
    )
    # Whether a label matrix was passed, even one whose columns all weigh 0
    labels_given: bool = False
    entropy_cuts: int = 0

    @property
    def n_items(self) -> int:
        return len(self.sizes)

    @property
    def has_labels(self) -> bool:
        return bool(self.label_shares)

    @property
    def has_entropy(self) -> bool:
        return bool(self.entropy)

    @property
    def smallest_sum(self) -> pulp.LpAffineExpression:
        """Sum of group 1; the smallest by the ordering constraints."""
        return self.subset_sums[0]

    @property
    def largest_sum(self) -> pulp.LpAffineExpression:
        """Sum of group k; the largest by the ordering constraints."""
        return self.subset_sums[-1]


@dataclass
class PartitionSolution:
    """Decoded result of one solve, plus solver metadata."""

    assignment: list[int]
    group_sums: list[float]
    objective: str
    alpha: float = 0.0
    solver_status: str = "Not Solved"
    solution_status: str = "No Solution Found"
    solver_name: str = ""
    solver_runtime_sec: float = 0.0

    @property
    def k(self) -> int:
        return len(self.group_sums)

    @property
    def group_range(self) -> float:
        """Largest minus smallest group sum."""
        return max(self.group_sums) - min(self.group_sums)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per group with its index, sum and item count."""
        counts = [self.assignment.count(j) for j in range(1, self.k + 1)]
        return pd.DataFrame(
            {
                "Group": list(range(1, self.k + 1)),
                "Group_Sum": self.group_sums,
                "Items": counts,
            }
        )
