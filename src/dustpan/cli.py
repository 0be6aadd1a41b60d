"""CLI interface for Dustpan."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click

from dustpan.core.dispatcher import Dispatcher
from dustpan.core.errors import CleanupError
from dustpan.core.operations import Operation
from dustpan.core.platform import PlatformEnv
from dustpan.models.operation_result import OperationResult
from dustpan.settings import Settings
from dustpan.utils import bytes_to_human, plural


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


class OperationParamType(click.ParamType):
    """Accepts an operation index (0-2) or key (temp, cache, browser)."""

    name = "operation"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Operation:
        if isinstance(value, Operation):
            return value
        try:
            if str(value).isdigit():
                return Operation.from_selection(int(value))
            return Operation.from_key(str(value))
        except ValueError:
            choices = ", ".join(f"{op.index}/{op.key}" for op in Operation)
            self.fail(f"{value!r} is not a cleanup operation (choose from {choices})", param, ctx)


OPERATION = OperationParamType()


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Dustpan: clear temporary files, application caches and browser caches."""
    _setup_logging(verbose)


# ── list ─────────────────────────────────────────────────────────────────

@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(as_json: bool) -> None:
    """List cleanup operations and the directories they empty."""
    env = PlatformEnv.current()

    data = []
    for operation in Operation:
        entry: dict[str, Any] = {"index": operation.index, "key": operation.key, "label": operation.label}
        try:
            entry["roots"] = [str(r) for r in operation.resolve_roots(env)]
        except CleanupError as exc:
            entry["roots"] = []
            entry["error"] = str(exc)
        data.append(entry)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    for entry in data:
        click.echo(f"  {click.style(str(entry['index']), fg='cyan', bold=True)} "
                   f"{entry['key']:8s} {entry['label']}")
        if "error" in entry:
            click.echo(f"      {click.style(entry['error'], fg='red')}")
        for root in entry["roots"]:
            click.echo(f"      {root}")


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("operations", nargs=-1, type=OPERATION)
@click.option("--all", "select_all", is_flag=True, help="Run every operation")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be removed without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def clean(operations: tuple[Operation, ...], select_all: bool, yes: bool, dry_run: bool, as_json: bool) -> None:
    """Run cleanup operations, given by index or name.

    With no operations, an interactive menu asks which ones to run.
    """
    if select_all:
        selected = list(Operation)
    elif operations:
        selected = list(operations)
    else:
        selected = _interactive_select()

    if not selected:
        if as_json:
            click.echo(json.dumps({"status": "nothing_selected", "results": []}))
        else:
            click.echo("Nothing selected.")
        return

    if not (yes or dry_run or as_json):
        click.echo("\nSelected:")
        for operation in selected:
            click.echo(f"  • {operation.label}")
        if not click.confirm("\nProceed with cleanup?", default=False):
            click.echo("Aborted.")
            return

    if not as_json:
        heading = "Measuring" if dry_run else "Cleaning"
        click.echo(f"\n{click.style('🧹', bold=True)} {heading}...\n")

    dispatcher = Dispatcher(PlatformEnv.current())
    results = dispatcher.run(
        [op.index for op in selected],
        dry_run=dry_run,
        on_result=None if as_json else _echo_result,
    )

    if as_json:
        status = "dry_run" if dry_run else "cleaned"
        click.echo(json.dumps({"status": status, "results": [_result_to_dict(r) for r in results]}, indent=2))
    else:
        total = sum(r.stats.total_size for r in results)
        verb = "Would free" if dry_run else "Total freed"
        click.echo(f"\n{verb}: {click.style(bytes_to_human(total), fg='green', bold=True)}\n")
        if dry_run:
            click.echo("(dry run — no files were deleted)")

    if any(not r.ok for r in results):
        sys.exit(1)


def _echo_result(result: OperationResult) -> None:
    label = result.operation.label
    if not result.ok:
        click.echo(f"  {click.style('✗', fg='red')} {label:25s} — {click.style(result.error, fg='red')}")
        return
    files = plural(result.stats.file_count, "file")
    size = click.style(bytes_to_human(result.stats.total_size), fg="green", bold=True)
    if result.dry_run:
        click.echo(f"  {click.style('·', fg='cyan')} {label:25s} — would remove {files}, {size}")
    else:
        click.echo(f"  {click.style('✓', fg='green')} {label:25s} — removed {files}, freed {size}")


def _result_to_dict(result: OperationResult) -> dict[str, Any]:
    return {
        "operation": result.operation.key,
        "index": result.operation.index,
        "files_removed": result.stats.file_count,
        "freed_bytes": result.stats.total_size,
        "roots": [str(r) for r in result.roots],
        "error": result.error,
    }


def _interactive_select() -> list[Operation]:
    """Let the user pick which operations to run."""
    click.echo("\nSelect what to clean (enter numbers, comma-separated):\n")
    for operation in Operation:
        click.echo(f"  [{operation.index}] {operation.label}")
    click.echo()
    raw = click.prompt("Selection", default="", show_default=False)
    selected: list[Operation] = []
    for part in raw.split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        try:
            operation = Operation.from_selection(int(part))
        except ValueError:
            click.echo(f"Ignoring unknown selection: {part}", err=True)
            continue
        if operation not in selected:
            selected.append(operation)
    return selected


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Show or change settings."""


@config.command("show")
def config_show() -> None:
    """Print the current settings."""
    settings = Settings.instance()
    click.echo(f"# {settings.path}")
    click.echo(json.dumps(settings.as_dict(), indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Store a setting. VALUE is parsed as JSON when possible.

    \b
    Examples:
        dustpan config set temp_dir /var/tmp
        dustpan config set browsers '["firefox", "chrome"]'
    """
    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    try:
        Settings.instance().set(key, parsed)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="VALUE") from exc
    click.echo(f"{key} = {json.dumps(parsed)}")
