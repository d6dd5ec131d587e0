"""
Bootstrap Command - seed the first relocked snapshot.

With no previous snapshot there is nothing to relock against, so the current
package-lock.json is copied with the manifest's combined dependency ranges as
its root `requires`.

Usage:
    relock bootstrap
    relock bootstrap --project-dir ./app --dry-run
"""

from pathlib import Path

import click

from ...config import RelockConfig, load_config
from ...core.errors import RelockError
from ...core.lockfile import bootstrap_snapshot, read_json, write_json
from ..utils import echo_info, echo_success, fail, setup_logging


def bootstrap_project(project_root: Path, config: RelockConfig, dry_run: bool = False) -> Path:
    """
    Write the initial snapshot for a project.

    Returns:
        Path of the snapshot (written unless dry_run).
    """
    manifest = read_json(project_root / config.package_filename)
    lock = read_json(project_root / config.package_locked_filename)
    snapshot = bootstrap_snapshot(manifest, lock)

    output_path = project_root / config.output_relocked_filename
    if not dry_run:
        write_json(output_path, snapshot)
    return output_path


@click.command()
@click.option(
    "--project-dir",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project directory containing package.json",
)
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Config file (default: relock.cfg.json)")
@click.option("--dry-run", is_flag=True, help="Show what would be written without writing")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def bootstrap(project_dir: str, config_file: str | None, dry_run: bool, verbose: bool):
    """
    Create the first relocked snapshot from package.json and package-lock.json.

    \b
    Examples:
        relock bootstrap
        relock bootstrap --dry-run
    """
    project_root = Path(project_dir).resolve()
    try:
        config = load_config(project_root, config_file)
        setup_logging(verbose or config.verbose)
        output_path = bootstrap_project(project_root, config, dry_run=dry_run)
    except FileNotFoundError as e:
        fail(f"File not found: {e.filename}")
    except RelockError as e:
        fail(e.message)

    if dry_run:
        echo_info(f"Would write initial snapshot to {output_path}")
    else:
        echo_success(f"Initial snapshot written to {output_path}")
