"""Dustpan data models."""

from dustpan.models.dir_stats import DirStats
from dustpan.models.operation_result import OperationResult

__all__ = [
    "DirStats",
    "OperationResult",
]
