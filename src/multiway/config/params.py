from __future__ import annotations

"""Parameter container dataclasses for multiway.

Model settings (objective, balancing weight, cone approximation, decoding
tolerance) live in an immutable dataclass that can be loaded from YAML. A
small mutable ``RuntimeParams`` bucket carries solver selection and output
toggles that callers usually flip programmatically.
"""

import math
from dataclasses import dataclass, field

__all__ = [
    "ModelParams",
    "RuntimeParams",
    "PartitionParams",
]

_OBJECTIVE_NAMES = ("min-largest", "max-smallest", "min-range")


# ---------------------------------------------------------------------------
# Model parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ModelParams:
    """Settings that change the optimisation model itself."""

    objective: str = "min-range"
    alpha: float = 0.0
    # Tangent cuts used to approximate the entropy cone; 0 disables it
    entropy_cuts: int = 0
    decode_threshold: float = 0.5

    def __post_init__(self):  # type: ignore[override]
        normalized = str(self.objective).strip().lower().replace("_", "-")
        if normalized not in _OBJECTIVE_NAMES:
            raise ValueError(
                f"ModelParams.objective must be one of {list(_OBJECTIVE_NAMES)}, "
                f"got '{self.objective}'."
            )
        object.__setattr__(self, "objective", normalized)

        if not math.isfinite(self.alpha) or self.alpha < 0:
            raise ValueError("ModelParams.alpha must be a finite, non-negative number.")

        if self.entropy_cuts < 0:
            raise ValueError("ModelParams.entropy_cuts must be non-negative.")

        if not 0.0 < self.decode_threshold < 1.0:
            raise ValueError("ModelParams.decode_threshold must lie strictly in (0, 1).")


# ---------------------------------------------------------------------------
# Runtime parameters - toggles that are usually set from code or the CLI
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    solver: str = "auto"
    verbose: bool = False
    gap_rel: float | None = None
    time_limit: float | None = None
    strict: bool = True

    def __post_init__(self):
        # Names are checked against the adapter registry when the solver is picked
        self.solver = str(self.solver).strip().lower()
        if not self.solver:
            raise ValueError("RuntimeParams.solver must be a non-empty name.")
        if self.gap_rel is not None and self.gap_rel < 0:
            raise ValueError("RuntimeParams.gap_rel must be non-negative.")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError("RuntimeParams.time_limit must be non-negative.")


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class PartitionParams:
    """Aggregate parameter object passed to the solve pipeline."""

    model: ModelParams = field(default_factory=ModelParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    # Convenience accessors so calling code can use `params.X`
    def __getattr__(self, item):
        if item in ("model", "runtime"):
            raise AttributeError(item)
        for section in (self.model, self.runtime):
            if hasattr(section, item):
                return getattr(section, item)
        raise AttributeError(item)
