"""
Tree Command - show the canonical dependency tree of a lock file.

Useful to see which nested override satisfies each requirement, which
subtrees share a signature, and where circular references were cut.

Usage:
    relock tree package-lock.json
    relock tree package-lock.json --manifest package.json --depth 2
"""

from pathlib import Path
from typing import Dict

import click
from rich.console import Console
from rich.tree import Tree

from ...core.builder import TreeBuilder
from ...core.errors import RelockError
from ...core.lockfile import manifest_requires, read_json, with_requires
from ...core.signature import short_signature
from ...core.types import TreeNode
from ..utils import echo_warning, fail, setup_logging

console = Console()


@click.command()
@click.argument("lockfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--manifest", "-m", type=click.Path(exists=True, dir_okay=False), help="package.json providing the root requires")
@click.option("--depth", "-d", type=int, default=-1, help="Maximum depth to display (-1 for all)")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def tree(lockfile: str, manifest: str | None, depth: int, verbose: bool):
    """
    Print the dependency tree built from LOCKFILE.

    The root requires come from --manifest, or from the lock file's own
    `requires` mapping, or else from every top-level entry.
    """
    setup_logging(verbose)
    try:
        document = read_json(Path(lockfile))
        if manifest:
            document = with_requires(document, manifest_requires(read_json(Path(manifest))))
        elif not isinstance(document.get("requires"), dict):
            document = with_requires(document, _top_level_requires(document))
        build = TreeBuilder().build(document)
    except RelockError as e:
        fail(e.message)

    label = f"[bold]{document.get('name') or '<root>'}[/bold] {document.get('version') or ''}"
    view = Tree(label.strip())
    _add_children(view, build.tree, depth)
    console.print(view)

    console.print(
        f"[dim]{len(build.lock_paths) - 1} lock entries, "
        f"{len(build.subtrees)} distinct subtrees[/dim]"
    )
    for cycle in build.cycles:
        echo_warning(str(cycle))


def _top_level_requires(document: Dict) -> Dict[str, str]:
    dependencies = document.get("dependencies") or {}
    return {
        name: entry.get("version", "")
        for name, entry in dependencies.items()
        if isinstance(entry, dict)
    }


def _add_children(view: Tree, node: TreeNode, depth: int) -> None:
    if depth == 0:
        return
    for dependency in node.dependencies:
        label = (
            f"[cyan]{dependency.name}[/cyan]@{dependency.version} "
            f"[dim]{dependency.range} {short_signature(dependency.signature)}[/dim]"
        )
        if dependency.circular:
            label += " [yellow](circular)[/yellow]"
        branch = view.add(label)
        _add_children(branch, dependency, depth - 1)
