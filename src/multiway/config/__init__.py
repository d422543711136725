"""Configuration module for multiway parameters."""

from .params import (
    ModelParams,
    RuntimeParams,
    PartitionParams,
)
from .loader import load_yaml as load_partition_params

__all__ = [
    "ModelParams",
    "RuntimeParams",
    "PartitionParams",
    "load_partition_params",
]
