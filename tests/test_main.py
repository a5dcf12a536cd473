"""Tests for the `workvisor` command line entry point."""

from __future__ import annotations

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from workvisor.local.supervisor import SpawnError
from workvisor.main import main, parse_args


@pytest.fixture
def quiet_main():
    """Patches the side effects of main(): logging setup, process title and the server."""
    with patch("workvisor.main.setup_logging"), \
            patch("workvisor.main.setproctitle"), \
            patch("workvisor.main.run_server", new_callable=AsyncMock) as run_server:
        yield run_server


class TestParseArgs:
    def test_trailing_arguments_are_forwarded_verbatim(self):
        args = parse_args(["--port", "9000", "./worker", "--port", "1", "-v", "plain"])

        assert args.port == 9000
        assert args.executable == "./worker"
        assert args.arguments == ["--port", "1", "-v", "plain"]
        assert args.verbose is False

    def test_defaults(self):
        args = parse_args(["./worker"])

        assert args.arguments == []
        assert isinstance(args.port, int)
        assert args.host

    def test_no_autostart_flag(self):
        assert parse_args(["--no-autostart", "./worker"]).autostart is False

    def test_executable_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args([])
        assert exc_info.value.code == 2


class TestMain:
    def test_missing_executable_is_fatal_before_serving(self, quiet_main, tmp_path, caplog):
        missing = tmp_path / "no-such-worker"

        with pytest.raises(SystemExit) as exc_info:
            main([str(missing)])

        assert exc_info.value.code == 1
        quiet_main.assert_not_called()
        assert any("Executable file not found" in record.getMessage() for record in caplog.records)

    def test_serves_until_exit(self, quiet_main):
        with pytest.raises(SystemExit) as exc_info:
            main(["--no-autostart", "--host", "127.0.0.1", "--port", "9555", sys.executable, "-c", "pass"])

        assert exc_info.value.code == 0
        quiet_main.assert_awaited_once()
        supervisor, host, port, _timeout = quiet_main.await_args.args
        assert supervisor.executable == sys.executable
        assert supervisor.arguments == ("-c", "pass")
        assert (host, port) == ("127.0.0.1", 9555)

    def test_autostart_starts_child(self, quiet_main):
        with patch("workvisor.main.Supervisor") as supervisor_cls, pytest.raises(SystemExit):
            main([sys.executable, "-c", "pass"])

        supervisor_cls.return_value.start.assert_called_once_with()

    def test_failed_autostart_is_not_fatal(self, quiet_main):
        supervisor = MagicMock()
        supervisor.start.side_effect = SpawnError("failed to start process: boom")

        with patch("workvisor.main.Supervisor", return_value=supervisor), \
                pytest.raises(SystemExit) as exc_info:
            main([sys.executable])

        assert exc_info.value.code == 0
        quiet_main.assert_awaited_once()

    def test_bind_failure_is_fatal(self, quiet_main):
        quiet_main.side_effect = OSError("address already in use")

        with pytest.raises(SystemExit) as exc_info:
            main(["--no-autostart", sys.executable])

        assert exc_info.value.code == 1
