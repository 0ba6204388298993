# ==============================================================================
# Tests for CLI Help Commands
# ==============================================================================
"""
Tests that all CLI help commands generate the expected output.

Verifies that every command and subcommand in the voicetime CLI:
- Exits with code 0 when invoked with --help
- Contains the expected description text
- Lists the expected subcommands or options

These tests use the real app from voicetime.app (not minimal Typer apps)
to ensure the full command tree is wired up correctly.
"""

from typer.testing import CliRunner

from voicetime.app import app

runner = CliRunner()


# ==============================================================================
# Root App
# ==============================================================================


class TestRootHelp:
    """Tests for the root `voicetime --help` output."""

    def test_exit_code(self):
        """Root --help exits successfully."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0

    def test_description(self):
        """Root --help shows the app description."""
        result = runner.invoke(app, ["--help"])
        assert "Voice channel presence reporting CLI" in result.output

    def test_lists_all_subcommands(self):
        """Root --help lists every top-level command."""
        result = runner.invoke(app, ["--help"])
        for cmd in ["config", "report", "status"]:
            assert cmd in result.output, f"Missing command: {cmd}"


# ==============================================================================
# Report
# ==============================================================================


class TestReportHelp:
    """Tests for `voicetime report` help output."""

    def test_description(self):
        result = runner.invoke(app, ["report", "--help"])
        assert result.exit_code == 0
        assert "Presence report operations" in result.output

    def test_lists_subcommands(self):
        result = runner.invoke(app, ["report", "--help"])
        for cmd in ["run", "file"]:
            assert cmd in result.output, f"Missing subcommand: {cmd}"

    def test_run_options(self):
        """report run --help lists its options."""
        result = runner.invoke(app, ["report", "run", "--help"])
        assert result.exit_code == 0
        for option in ["--date", "--clan-id", "--format", "--send", "--json", "--verbose"]:
            assert option in result.output, f"Missing option: {option}"

    def test_file_options(self):
        result = runner.invoke(app, ["report", "file", "--help"])
        assert result.exit_code == 0
        assert "PATH" in result.output
        assert "--send" not in result.output


# ==============================================================================
# Config and Status
# ==============================================================================


class TestConfigHelp:
    """Tests for `voicetime config` help output."""

    def test_description(self):
        result = runner.invoke(app, ["config", "--help"])
        assert result.exit_code == 0
        assert "Configuration management" in result.output
        assert "show" in result.output


class TestStatusHelp:
    """Tests for `voicetime status` help output."""

    def test_exit_code(self):
        result = runner.invoke(app, ["status", "--help"])
        assert result.exit_code == 0
        assert "--json" in result.output
