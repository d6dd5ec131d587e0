"""Unit tests for the 'bootstrap' command."""

import json

from relock.cli.commands.bootstrap import bootstrap, bootstrap_project
from relock.config import RelockConfig


class TestBootstrapCommand:
    def test_writes_initial_snapshot(self, runner, fresh_project):
        result = runner.invoke(bootstrap, ["-p", str(fresh_project)])

        assert result.exit_code == 0
        assert "Initial snapshot written to" in result.output

        snapshot = json.loads((fresh_project / "package.relocked.json").read_text())
        assert snapshot["requires"] == {"a": "^1.0.0", "b": "^1.0.0", "jest": "^29.0.0"}
        assert set(snapshot["dependencies"]) == {"a", "b", "c", "jest"}

    def test_dry_run(self, runner, fresh_project):
        result = runner.invoke(bootstrap, ["-p", str(fresh_project), "--dry-run"])

        assert result.exit_code == 0
        assert "Would write initial snapshot" in result.output
        assert not (fresh_project / "package.relocked.json").exists()

    def test_configured_file_names(self, runner, fresh_project):
        (fresh_project / "package-lock.json").rename(fresh_project / "shrinkwrap.json")
        config = fresh_project / "relock.yaml"
        config.write_text("packageLockedFilename: shrinkwrap.json\noutputRelockedFilename: out/snapshot.json\n")

        result = runner.invoke(bootstrap, ["-p", str(fresh_project), "--config", str(config)])

        assert result.exit_code == 0
        assert (fresh_project / "out" / "snapshot.json").exists()

    def test_missing_manifest(self, runner, fresh_project):
        (fresh_project / "package.json").unlink()

        result = runner.invoke(bootstrap, ["-p", str(fresh_project)])

        assert result.exit_code == 2
        assert "File not found" in result.output

    def test_malformed_lock(self, runner, fresh_project):
        (fresh_project / "package-lock.json").write_text("{")

        result = runner.invoke(bootstrap, ["-p", str(fresh_project)])

        assert result.exit_code == 2
        assert "Failed to parse" in result.output


class TestBootstrapProject:
    def test_returns_output_path(self, fresh_project):
        path = bootstrap_project(fresh_project, RelockConfig(), dry_run=True)

        assert path == fresh_project / "package.relocked.json"
        assert not path.exists()
