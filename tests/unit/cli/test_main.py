"""Unit tests for the CLI entry point and shared helpers."""

import pytest

from relock.cli.main import main
from relock.cli.utils import echo_error, echo_info, echo_success, echo_warning, fail


class TestMain:
    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("run", "bootstrap", "tree"):
            assert command in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(main, ["frobnicate"])
        assert result.exit_code != 0


class TestUtils:
    def test_echo_error_goes_to_stderr(self, capsys):
        echo_error("boom")

        captured = capsys.readouterr()
        assert "boom" in captured.err
        assert captured.out == ""

    def test_status_messages_go_to_stdout(self, capsys):
        echo_success("relocked")
        echo_warning("stale")
        echo_info("lock.json")

        captured = capsys.readouterr()
        assert [line.split()[-1] for line in captured.out.splitlines()] == ["relocked", "stale", "lock.json"]
        assert captured.err == ""

    def test_fail_exits_with_status_2(self, capsys):
        with pytest.raises(SystemExit) as exc:
            fail("broken lock")

        assert exc.value.code == 2
        assert "broken lock" in capsys.readouterr().err
