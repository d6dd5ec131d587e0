"""Shared fixtures for CLI command tests."""

import json

import pytest
from click.testing import CliRunner

PREVIOUS_SNAPSHOT = {
    "name": "app",
    "version": "1.0.0",
    "lockfileVersion": 1,
    "requires": {"a": "^1.0.0"},
    "dependencies": {
        "a": {"version": "1.0.3", "requires": {"c": "^2.0.0"}},
        "c": {"version": "2.0.1"},
    },
}

CURRENT_LOCK = {
    "name": "app",
    "version": "1.0.0",
    "lockfileVersion": 1,
    "requires": True,
    "dependencies": {
        "a": {"version": "1.0.4", "requires": {"c": "^2.0.0"}},
        "b": {"version": "1.0.0"},
        "c": {"version": "2.0.2"},
        "jest": {"version": "29.1.0", "dev": True},
    },
}

MANIFEST = {
    "name": "app",
    "version": "1.0.0",
    "dependencies": {"a": "^1.0.0", "b": "^1.0.0"},
    "devDependencies": {"jest": "^29.0.0"},
}


def write(path, data):
    path.write_text(json.dumps(data, indent=2))


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fresh_project(tmp_path):
    """A project that has never been relocked."""
    write(tmp_path / "package.json", MANIFEST)
    write(tmp_path / "package-lock.json", CURRENT_LOCK)
    return tmp_path


@pytest.fixture
def project(fresh_project):
    """A project with a previous relocked snapshot."""
    write(fresh_project / "package.relocked.json", PREVIOUS_SNAPSHOT)
    return fresh_project
