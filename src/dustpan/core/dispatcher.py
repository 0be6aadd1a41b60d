"""Runs a batch of selected cleanup operations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from dustpan.core.errors import CleanupError
from dustpan.core.operations import Operation
from dustpan.core.platform import PlatformEnv
from dustpan.models.operation_result import OperationResult

log = logging.getLogger(__name__)

ProgressCallback = Callable[[Operation, str], None]  # (operation, status)
ResultCallback = Callable[[OperationResult], None]


def resolve_selections(selections: Iterable[int]) -> list[Operation]:
    """Turn selection indices into operations, deduplicated and in index order.

    Raises:
        ValueError: On an index that names no operation.
    """
    return [Operation.from_selection(index) for index in sorted(set(selections))]


class Dispatcher:
    """Runs selected operations one after another and collects results."""

    def __init__(self, env: PlatformEnv) -> None:
        self.env = env

    def run(
        self,
        selections: Iterable[int],
        *,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> list[OperationResult]:
        """Run the operations behind the given selection indices.

        A failing operation is reported in its result and does not stop the
        rest of the batch.

        Args:
            selections: Operation indices (0 temp files, 1 app cache,
                2 browser cache).
            dry_run: Measure instead of deleting.
            on_progress: Optional callback for status changes.
            on_result: Optional callback fired after each operation.

        Returns:
            One result per distinct selected operation.
        """
        operations = resolve_selections(selections)

        results: list[OperationResult] = []
        for operation in operations:
            result = self.run_one(operation, dry_run=dry_run, on_progress=on_progress)
            results.append(result)
            if on_result:
                on_result(result)
        return results

    def run_one(
        self,
        operation: Operation,
        *,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> OperationResult:
        """Run a single operation, converting failures into a result."""
        if on_progress:
            on_progress(operation, "cleaning")

        roots: tuple[Path, ...] = ()
        try:
            roots = operation.resolve_roots(self.env)
            stats = operation.execute(self.env, dry_run=dry_run, roots=roots)
        except (CleanupError, OSError) as exc:
            log.warning("Operation '%s' failed: %s", operation.key, exc)
            if on_progress:
                on_progress(operation, "error")
            return OperationResult(operation=operation, error=str(exc), dry_run=dry_run, roots=roots)

        log.info(
            "Operation '%s' finished: %d files, %d bytes",
            operation.key,
            stats.file_count,
            stats.total_size,
        )
        if on_progress:
            on_progress(operation, "done")
        return OperationResult(operation=operation, stats=stats, dry_run=dry_run, roots=roots)
