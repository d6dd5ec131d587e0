"""
Run Command - relock the project.

Compares the previous relocked snapshot with the freshly resolved
package-lock.json and writes a lock file in which only the requirements whose
ranges actually changed have moved.

Usage:
    relock run                 # Relock and write outputs
    relock run --dry-run       # Show what would change
    relock run --check         # CI: exit 1 if the lock on disk is stale
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import click
from rich.console import Console
from rich.table import Table

from ...config import load_config
from ...core.errors import RelockError
from ...core.lockfile import dump_json, manifest_requires, read_json, with_requires, write_json
from ...core.pipeline import RelockResult, relock
from ...core.types import DecisionAction, format_path
from ..utils import echo_info, echo_success, echo_warning, fail, setup_logging
from .bootstrap import bootstrap_project

console = Console()

ACTION_STYLES = {
    DecisionAction.ADDED: "green",
    DecisionAction.UPDATED: "yellow",
    DecisionAction.REEXAMINED: "cyan",
    DecisionAction.KEPT: "dim",
}


@click.command()
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project directory containing package.json",
)
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Config file (default: relock.cfg.json)")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing")
@click.option("--check", is_flag=True, help="Exit 1 if the outputs on disk are out of date")
@click.option("--print", "print_lock", is_flag=True, help="Print the relocked snapshot")
@click.option("--json", "as_json", is_flag=True, help="Output the run summary as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def run(
    project_dir: str,
    config_file: str | None,
    dry_run: bool,
    check: bool,
    print_lock: bool,
    as_json: bool,
    verbose: bool,
):
    """
    Relock dependencies against the previous snapshot.

    Requirements whose range is unchanged keep their previous resolution,
    including everything below them. New requirements and minor/major range
    changes take the current resolution. Patch-level changes and project
    modules are compared one level deeper.

    \b
    Exit Codes:
        0 - Success
        1 - Outputs are stale (with --check)
        2 - Error during relocking
    """
    project_root = Path(project_dir).resolve()
    try:
        config = load_config(project_root, config_file)
    except RelockError as e:
        fail(e.message)
    setup_logging(verbose or config.verbose)

    previous_path = project_root / config.relocked_filename
    if not previous_path.exists():
        # must be the first time
        try:
            output_path = bootstrap_project(project_root, config, dry_run=dry_run or check)
        except FileNotFoundError as e:
            fail(f"File not found: {e.filename}")
        except RelockError as e:
            fail(e.message)
        if not as_json:
            echo_info(f"No previous snapshot at {previous_path.name}, bootstrapping")
            echo_success(f"Initial snapshot {'would be written' if dry_run or check else 'written'} to {output_path}")
        return

    try:
        previous = read_json(previous_path)
        manifest = read_json(project_root / config.package_filename)
        current_lock = read_json(project_root / config.package_locked_filename)
        current = with_requires(current_lock, manifest_requires(manifest))
        result = relock(previous, current, config.is_project_module)
    except FileNotFoundError as e:
        fail(f"File not found: {e.filename}")
    except RelockError as e:
        fail(e.message)

    snapshot = with_requires(result.lock, manifest_requires(manifest, include_dev=False))
    outputs: List[Tuple[Path, Dict[str, Any]]] = [
        (project_root / config.output_locked_filename, result.lock),
        (project_root / config.output_relocked_filename, snapshot),
    ]

    stale = _stale_outputs(outputs) if check else []
    if not dry_run and not check:
        for path, document in outputs:
            write_json(path, document)

    if as_json:
        summary = result.summary()
        summary["stale"] = [str(path) for path in stale]
        click.echo(json.dumps(summary, indent=2))
    else:
        _print_report(result)
        if check:
            for path in stale:
                echo_warning(f"{path.name} is out of date")
            if not stale:
                echo_success("Relocked files are up to date")
        elif dry_run:
            echo_info("Dry run, nothing written")
        else:
            echo_success(f"Relocked {len(result.decisions)} requirements")

    if print_lock:
        click.echo(dump_json(snapshot), nl=False)

    if stale:
        sys.exit(1)


def _stale_outputs(outputs: List[Tuple[Path, Dict[str, Any]]]) -> List[Path]:
    """Outputs whose on-disk content differs from what would be written."""
    # when both outputs share a file name only the last write survives
    final: Dict[Path, Dict[str, Any]] = {}
    for path, document in outputs:
        final[path] = document

    stale = []
    for path, document in final.items():
        if not path.exists() or path.read_text(encoding="utf-8") != dump_json(document):
            stale.append(path)
    return stale


def _print_report(result: RelockResult) -> None:
    """Print the per-requirement decisions as a table."""
    for cycle in result.cycles:
        echo_warning(str(cycle))

    shown = [d for d in result.decisions if d.action != DecisionAction.KEPT]
    kept = len(result.decisions) - len(shown)
    if not shown:
        console.print(f"[green]✓ No requirement changed, {kept} kept[/green]")
        return

    table = Table(title="Relock Decisions")
    table.add_column("Package", style="cyan")
    table.add_column("Range")
    table.add_column("Previous", style="dim")
    table.add_column("Locked", style="green")
    table.add_column("Action")

    for decision in shown:
        previous_range = decision.previous_range or "-"
        range_text = decision.current_range
        if decision.previous_range and decision.previous_range != decision.current_range:
            range_text = f"{previous_range} → {decision.current_range}"
        style = ACTION_STYLES[decision.action]
        table.add_row(
            format_path(decision.path + (decision.name,)),
            range_text,
            decision.previous_version or "-",
            decision.locked_version or "-",
            f"[{style}]{decision.action.value}[/{style}]",
        )

    console.print(table)
    console.print(f"[dim]{kept} requirement(s) kept at their previous resolution[/dim]")
