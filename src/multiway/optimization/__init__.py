"""
MILP core for multiway number partitioning.
"""

from .core import (
    build_model,
    check_status,
    decode_assignment,
    group_sums,
    partition,
    solve_partition,
)
from .objectives import Objective, apply_objective

__all__ = [
    "Objective",
    "apply_objective",
    "build_model",
    "check_status",
    "decode_assignment",
    "group_sums",
    "partition",
    "solve_partition",
]
