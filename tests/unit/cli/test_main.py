"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from src.cli.main import __version__, _configure_logging, app
from src.cli.models import ExitCode


runner = CliRunner()


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    def test_verbosity_0_sets_warning_level(self):
        """Verbosity 0 sets logging to WARNING level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(0)

            mock_get_logger.assert_any_call("src")
            mock_logger.setLevel.assert_called_with(logging.WARNING)

    def test_verbosity_1_sets_info_level(self):
        """Verbosity 1 sets logging to INFO level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(1)

            mock_logger.setLevel.assert_called_with(logging.INFO)

    def test_verbosity_2_sets_debug_level(self):
        """Verbosity 2+ sets logging to DEBUG level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(2)

            mock_logger.setLevel.assert_called_with(logging.DEBUG)

    def test_logdir_creates_log_file(self, tmp_path):
        """--logdir writes a timestamped log file."""
        logdir = tmp_path / "logs"

        _configure_logging(1, str(logdir))
        logging.getLogger("src").handlers.clear()

        files = list(logdir.glob("notion-sync_*.log"))
        assert len(files) == 1


class TestCommands:
    """Test cases for the CLI commands."""

    @patch('src.cli.main.SyncCommand')
    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main._configure_logging')
    def test_import(self, mock_logging, mock_output, mock_sync_cmd):
        """import passes the database, output folder and vault through."""
        mock_sync_cmd.return_value.run_import.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["import", "abc", "--output", "Imports", "--vault", "/v"])

        assert result.exit_code == 0
        mock_sync_cmd.return_value.run_import.assert_called_once_with(
            "abc", output_folder="Imports", vault_path="/v"
        )

    @patch('src.cli.main.SyncCommand')
    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main._configure_logging')
    def test_refresh_exit_code(self, mock_logging, mock_output, mock_sync_cmd):
        """refresh exits with the command's exit code."""
        mock_sync_cmd.return_value.run_refresh.return_value = ExitCode.ROW_FAILURES

        result = runner.invoke(app, ["refresh", "Tasks"])

        assert result.exit_code == ExitCode.ROW_FAILURES
        mock_sync_cmd.return_value.run_refresh.assert_called_once_with("Tasks", vault_path=None, force=False)

    @patch('src.cli.main.SyncCommand')
    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main._configure_logging')
    def test_refresh_force(self, mock_logging, mock_output, mock_sync_cmd):
        """--force is passed through to refresh."""
        mock_sync_cmd.return_value.run_refresh.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["refresh", "Tasks", "--force"])

        assert result.exit_code == 0
        mock_sync_cmd.return_value.run_refresh.assert_called_once_with(
            "Tasks", vault_path=None, force=True
        )

    @patch('src.cli.main.SyncCommand')
    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main._configure_logging')
    def test_config(self, mock_logging, mock_output, mock_sync_cmd):
        """config passes the values to save through."""
        mock_sync_cmd.return_value.run_config.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["config", "--vault", "/v", "-o", "DBs"])

        assert result.exit_code == 0
        mock_sync_cmd.return_value.run_config.assert_called_once_with(
            vault_path="/v", output_folder="DBs"
        )

    @patch('src.cli.main.SyncCommand')
    @patch('src.cli.main.OutputHandler')
    @patch('src.cli.main._configure_logging')
    def test_list(self, mock_logging, mock_output, mock_sync_cmd):
        """list runs with the chosen verbosity and color settings."""
        mock_sync_cmd.return_value.run_list.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["list", "-v", "2", "--no-color"])

        assert result.exit_code == 0
        mock_logging.assert_called_once_with(2, None)
        mock_output.assert_called_once_with(verbosity=2, no_color=True)

    def test_version(self):
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_import_requires_database(self):
        """import without an argument is a usage error."""
        result = runner.invoke(app, ["import"])

        assert result.exit_code != 0
