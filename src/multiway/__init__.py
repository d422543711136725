"""multiway: multiway number partitioning as a mixed-integer program."""

__version__ = "0.1.0"

# Main API
from .api import partition_frame
from .evaluation import compare_objectives, random_assignment

# Core types
from .config import PartitionParams, load_partition_params
from .core_types import PartitionModel, PartitionSolution
from .exceptions import (
    DecodingError,
    ModelConstructionError,
    OptimizationError,
    OptimizationWarning,
    PartitionError,
    UnsupportedCapabilityError,
)
from .interfaces import SolverAdapter
from .optimization import (
    Objective,
    apply_objective,
    build_model,
    decode_assignment,
    group_sums,
    partition,
    solve_partition,
)

# Extension system
from .registry import register_solver_adapter

__all__ = [
    # Version
    "__version__",
    # Main API
    "partition",
    "solve_partition",
    "partition_frame",
    "compare_objectives",
    # Stage functions (for advanced users)
    "build_model",
    "apply_objective",
    "decode_assignment",
    "group_sums",
    "random_assignment",
    # Types
    "Objective",
    "PartitionModel",
    "PartitionSolution",
    "PartitionParams",
    "load_partition_params",
    # Errors
    "PartitionError",
    "ModelConstructionError",
    "UnsupportedCapabilityError",
    "OptimizationError",
    "OptimizationWarning",
    "DecodingError",
    # Extensions
    "register_solver_adapter",
    "SolverAdapter",
]
