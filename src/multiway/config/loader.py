from __future__ import annotations

"""Load multiway YAML configuration files into :class:`PartitionParams`.

The file is flat; every key is optional::

    objective: min-range      # min-largest | max-smallest | min-range
    alpha: 0.0                # weight of the label-balancing entropy term
    entropy_cuts: 0           # tangent cuts approximating the entropy cone
    decode_threshold: 0.5
    solver: auto              # auto | cbc | gurobi | highs
    time_limit: null          # seconds, 0 or null means no limit
    gap_rel: null
    strict: true
    verbose: false
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from multiway.utils.logging import MultiwayLogger

from .params import ModelParams, PartitionParams, RuntimeParams

logger = MultiwayLogger.get_logger(__name__)

_MODEL_KEYS = ("objective", "alpha", "entropy_cuts", "decode_threshold")
_RUNTIME_KEYS = ("solver", "verbose", "gap_rel", "time_limit", "strict")


def load_yaml(path: str | Path) -> PartitionParams:
    """Load a YAML configuration file into `PartitionParams`."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(
            f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"YAML configuration {cfg_path} must be a mapping, got {type(data).__name__}."
        )

    model_kwargs = {key: data.pop(key) for key in _MODEL_KEYS if key in data}
    runtime_kwargs = {key: data.pop(key) for key in _RUNTIME_KEYS if key in data}

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    if data:
        unknown_keys = ", ".join(sorted(str(key) for key in data))
        raise ValueError(
            f"Unknown top-level configuration keys in YAML: {unknown_keys}"
        )

    model = ModelParams(**model_kwargs)
    runtime = RuntimeParams(**runtime_kwargs)

    logger.debug("Loaded configuration - model: %s runtime: %s", model, runtime)

    return PartitionParams(model=model, runtime=runtime)
