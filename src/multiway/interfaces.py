"""Protocol for pluggable solver back ends."""

from typing import Protocol

import pulp

from multiway.config.params import RuntimeParams


class SolverAdapter(Protocol):
    """Builds the PuLP solver a partition model is handed to.

    Adapters receive the runtime section of the configuration only: the
    model itself never depends on which solver runs it.
    """

    def get_pulp_solver(self, params: RuntimeParams) -> pulp.LpSolver:
        """Return a solver honouring ``verbose``, ``gap_rel`` and ``time_limit``."""
        ...

    @property
    def name(self) -> str:
        """Display name used in log messages."""
        ...

    @property
    def available(self) -> bool:
        """Whether ``pick_solver`` may choose this adapter in ``auto`` mode."""
        ...
