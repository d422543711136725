"""Solver adapters and solver selection for multiway.

Three adapters are built in: ``gurobi`` (needs ``gurobipy`` and a licence),
``highs`` (needs a ``highs`` executable) and ``cbc`` (bundled with PuLP).
Further adapters can be added with
:func:`multiway.registry.register_solver_adapter`.
"""

import importlib.util
import os
from typing import Any

import pulp

from multiway.config.params import RuntimeParams
from multiway.interfaces import SolverAdapter
from multiway.registry import get_solver_adapter, register_solver_adapter
from multiway.utils.logging import MultiwayLogger

logger = MultiwayLogger.get_logger(__name__)

SOLVER_ENV_VAR = "MULTIWAY_SOLVER"

# Tried in this order by 'auto' before falling back to CBC
_AUTO_PREFERENCE = ("gurobi", "highs")


def _common_kwargs(params: RuntimeParams) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"msg": 1 if params.verbose else 0}
    # Without gapRel the solver must close the gap completely
    if params.gap_rel is not None:
        kwargs["gapRel"] = params.gap_rel
    return kwargs


def _time_limit(params: RuntimeParams) -> float | None:
    """Seconds to pass on, or None when there is no limit (0 means none)."""
    if params.time_limit is None or params.time_limit <= 0:
        return None
    return params.time_limit


@register_solver_adapter("gurobi")
class GurobiAdapter:
    """Gurobi through its command-line interface."""

    def get_pulp_solver(self, params: RuntimeParams) -> pulp.LpSolver:
        kwargs = _common_kwargs(params)
        time_limit = _time_limit(params)
        if time_limit is not None:
            # GUROBI_CMD takes native parameters as (name, value) pairs
            kwargs["options"] = [("TimeLimit", time_limit)]
        return pulp.GUROBI_CMD(**kwargs)

    @property
    def name(self) -> str:
        return "Gurobi"

    @property
    def available(self) -> bool:
        return importlib.util.find_spec("gurobipy") is not None


@register_solver_adapter("highs")
class HighsAdapter:
    """HiGHS through its command-line interface."""

    def get_pulp_solver(self, params: RuntimeParams) -> pulp.LpSolver:
        kwargs = _common_kwargs(params)
        time_limit = _time_limit(params)
        if time_limit is not None:
            kwargs["timeLimit"] = time_limit
        return pulp.HiGHS_CMD(**kwargs)

    @property
    def name(self) -> str:
        return "HiGHS"

    @property
    def available(self) -> bool:
        return bool(pulp.HiGHS_CMD(msg=0).available())


@register_solver_adapter("cbc")
class CbcAdapter:
    """CBC binary shipped inside the PuLP wheel."""

    def get_pulp_solver(self, params: RuntimeParams) -> pulp.LpSolver:
        kwargs = _common_kwargs(params)
        time_limit = _time_limit(params)
        if time_limit is not None:
            kwargs["timeLimit"] = time_limit
        return pulp.PULP_CBC_CMD(**kwargs)

    @property
    def name(self) -> str:
        return "CBC"

    @property
    def available(self) -> bool:
        return True


def select_solver(
    params: RuntimeParams | None = None,
) -> tuple[SolverAdapter, pulp.LpSolver]:
    """
    Return the chosen adapter together with the PuLP solver it built.

    Priority:
    1. MULTIWAY_SOLVER env-var: 'auto' or any registered adapter name (overrides params.solver)
    2. params.solver: 'auto' or any registered adapter name
    3. If 'auto': Gurobi, then HiGHS, whichever is available and starts; else CBC.

    Raises:
        ValueError: If the chosen name is neither 'auto' nor registered.
    """
    params = params or RuntimeParams()
    choice = (os.getenv(SOLVER_ENV_VAR) or params.solver).strip().lower()

    if choice != "auto":
        adapter = get_solver_adapter(choice)
        return adapter, adapter.get_pulp_solver(params)

    for name in _AUTO_PREFERENCE:
        adapter = get_solver_adapter(name)
        if not adapter.available:
            continue
        try:
            return adapter, adapter.get_pulp_solver(params)
        except (pulp.PulpError, OSError) as exc:
            logger.debug(f"{adapter.name} could not be started ({exc}); trying next")

    adapter = get_solver_adapter("cbc")
    return adapter, adapter.get_pulp_solver(params)


def pick_solver(params: RuntimeParams | None = None) -> pulp.LpSolver:
    """Return a PuLP solver instance based on RuntimeParams (see :func:`select_solver`)."""
    return select_solver(params)[1]
