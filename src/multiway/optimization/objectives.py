"""
Objective strategies for the multiway partition model.

All three strategies read the ordered ``subset_sum`` expressions of a built
:class:`~multiway.core_types.PartitionModel`. Because the model constrains
``subset_sum[1] <= ... <= subset_sum[k]``, the first expression is the smallest
group and the last one the largest, so every objective stays linear:

* ``min-largest``  - minimise ``subset_sum[k]``
* ``max-smallest`` - maximise ``subset_sum[1]``
* ``min-range``    - minimise ``subset_sum[k] - subset_sum[1]`` (default)

When label balancing is active, ``alpha * total_entropy`` is added so that a
larger entropy (labels spread evenly over the groups) is always rewarded.
"""

import math
from enum import Enum

import pulp

from multiway.core_types import PartitionModel
from multiway.exceptions import ModelConstructionError, UnsupportedCapabilityError
from multiway.utils.logging import MultiwayLogger

logger = MultiwayLogger.get_logger(__name__)


class Objective(Enum):
    """Closed set of objective strategies."""

    MIN_LARGEST = "min-largest"
    MAX_SMALLEST = "max-smallest"
    MIN_RANGE = "min-range"

    @classmethod
    def parse(cls, value: "Objective | str") -> "Objective":
        """Accept a member, its value (``"min-range"``) or its name (``"MIN_RANGE"``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(
            f"Unknown objective '{value}'. Choose one of: "
            + ", ".join(member.value for member in cls)
        )

    def apply(self, model: PartitionModel, alpha: float = 0.0) -> None:
        apply_objective(model, self, alpha)


def apply_objective(
    model: PartitionModel,
    objective: Objective | str = Objective.MIN_RANGE,
    alpha: float = 0.0,
) -> None:
    """Set the objective of ``model.problem``.

    Args:
        model: Handle returned by :func:`multiway.optimization.build_model`.
        objective: Strategy to apply.
        alpha: Weight of the label-balancing entropy term. Must be finite and
            non-negative; 0 disables the term.

    Raises:
        ModelConstructionError: If ``alpha`` is negative or not finite.
        UnsupportedCapabilityError: If ``alpha > 0`` and labels were given to
            a model built with ``entropy_cuts=0`` (the exponential cone could
            not be expressed for the solver). This holds even when every label
            column has zero weight.
    """
    objective = Objective.parse(objective)
    if not math.isfinite(alpha) or alpha < 0:
        raise ModelConstructionError(
            f"Balancing weight alpha must be finite and non-negative, got {alpha}"
        )

    if alpha > 0 and model.labels_given and model.entropy_cuts == 0:
        raise UnsupportedCapabilityError(
            "Label balancing needs an exponential-cone constraint, which PuLP "
            "solvers cannot express. Set entropy_cuts > 0 to use the polyhedral "
            "approximation, or use alpha=0."
        )
    if alpha > 0 and model.labels_given and not model.has_entropy:
        logger.warning(
            "alpha=%s has no effect: every label column has zero total weight", alpha
        )
    elif alpha > 0 and not model.labels_given:
        logger.debug("alpha=%s ignored: no label weights were supplied", alpha)

    entropy_term = (
        alpha * model.total_entropy
        if alpha > 0 and model.has_entropy
        else pulp.LpAffineExpression()
    )

    if objective is Objective.MIN_LARGEST:
        sense = pulp.LpMinimize
        expression = model.largest_sum - entropy_term
    elif objective is Objective.MAX_SMALLEST:
        sense = pulp.LpMaximize
        expression = model.smallest_sum + entropy_term
    elif objective is Objective.MIN_RANGE:
        sense = pulp.LpMinimize
        expression = model.largest_sum - model.smallest_sum - entropy_term
    else:  # pragma: no cover - exhaustive over Objective
        raise AssertionError(f"Unhandled objective {objective!r}")

    model.problem.sense = sense
    model.problem.setObjective(expression)
    logger.debug(
        "Objective %s applied (alpha=%s, sense=%s)",
        objective.value,
        alpha,
        pulp.LpSenses[sense],
    )
