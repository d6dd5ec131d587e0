"""
relock CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import bootstrap, run, tree


@click.group()
@click.version_option(package_name="relock")
def main():
    """relock: keep lock file churn down to what your manifest changed.

    \b
    Quick Start:
      relock bootstrap          # first run: seed package.relocked.json
      relock run                # relock after editing package.json
      relock run --check        # CI: fail if the relocked lock is stale
      relock tree package-lock.json
    """
    pass


# Register commands
main.add_command(run.run)
main.add_command(bootstrap.bootstrap)
main.add_command(tree.tree)

if __name__ == "__main__":
    main()
