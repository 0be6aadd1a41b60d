"""Operation result dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from dustpan.models.dir_stats import DirStats

if TYPE_CHECKING:
    from dustpan.core.operations import Operation


@dataclass(slots=True)
class OperationResult:
    """Result of running one cleanup operation."""

    operation: Operation
    stats: DirStats = field(default_factory=DirStats)
    error: str | None = None
    dry_run: bool = False
    roots: tuple[Path, ...] = ()

    @property
    def ok(self) -> bool:
        """Whether the operation finished without a fatal error."""
        return self.error is None
