"""Error taxonomy for partition modelling, solving and decoding."""

from typing import Any


class PartitionError(Exception):
    """Base class for all multiway errors."""


class ModelConstructionError(PartitionError, ValueError):
    """Invalid inputs detected while building the model (before any solve)."""


class UnsupportedCapabilityError(PartitionError):
    """The requested model needs a feature the solver interface cannot express."""


class OptimizationError(PartitionError, RuntimeError):
    """The solver finished without a proven optimal, feasible solution."""

    def __init__(self, status: str, solution_status: str, message: str | None = None):
        self.status = status
        self.solution_status = solution_status
        super().__init__(
            message
            or f"Optimization failed with status: {status} (solution: {solution_status})"
        )


class OptimizationWarning(UserWarning):
    """Emitted instead of :class:`OptimizationError` when ``strict=False``."""


class DecodingError(PartitionError, RuntimeError):
    """A solved assignment row is not a clean one-hot vector."""

    def __init__(self, row: int, values: list[Any], message: str | None = None):
        self.row = row
        self.values = values
        super().__init__(
            message or f"Row {row} is not one-hot after solving: {values}"
        )
