"""Named solver adapters, selectable through ``RuntimeParams.solver``."""

from multiway.utils.logging import MultiwayLogger

from .interfaces import SolverAdapter

logger = MultiwayLogger.get_logger(__name__)

SOLVER_ADAPTER_REGISTRY: dict[str, type[SolverAdapter]] = {}

__all__ = [
    "register_solver_adapter",
    "get_solver_adapter",
    # Exposed for advanced users who need direct access
    "SOLVER_ADAPTER_REGISTRY",
]


def register_solver_adapter(name: str):
    """Decorator registering a solver adapter under a lowercase ``name``.

    Example:
        >>> @register_solver_adapter("relaxed-cbc")
        ... class RelaxedCbc:
        ...     def get_pulp_solver(self, params):
        ...         return pulp.PULP_CBC_CMD(msg=0, gapRel=0.05)
    """
    key = name.strip().lower()

    def decorator(cls: type[SolverAdapter]):
        if key in SOLVER_ADAPTER_REGISTRY:
            raise ValueError(f"Solver adapter '{key}' is already registered")
        SOLVER_ADAPTER_REGISTRY[key] = cls
        logger.debug(f"Registered solver adapter '{key}' -> {cls.__name__}")
        return cls

    return decorator


def get_solver_adapter(name: str) -> SolverAdapter:
    """Instantiate the adapter registered as ``name``."""
    key = name.strip().lower()
    try:
        adapter_cls = SOLVER_ADAPTER_REGISTRY[key]
    except KeyError:
        raise ValueError(
            f"Unknown solver '{key}'. Registered: {sorted(SOLVER_ADAPTER_REGISTRY)}"
        ) from None
    return adapter_cls()
