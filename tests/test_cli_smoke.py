"""Smoke tests for CLI commands.

Tests that CLI commands parse correctly and don't crash. Uses Click's
CliRunner with a temporary --config file, so nothing touches ~/.superhat.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from superhat.cli.main import cli
from superhat.exceptions import InputBackendUnavailableError
from superhat.models import AppConfig, BindingTable, Panel


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_path(temp_dir):
    return temp_dir / "config.json"


@pytest.fixture
def invoke(runner, config_path):
    """Invoke the CLI against the temporary config file."""

    def run(*args, input=None):
        return runner.invoke(cli, ["--config", str(config_path), *args], input=input)

    return run


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        """Test main help lists the run options."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "40 cockpit switches" in result.output
        for option in ("--headless", "--backend", "--rebind", "--dry-run", "--config"):
            assert option in result.output

    def test_version_flag(self, runner):
        """Test --version prints the package version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    @pytest.mark.parametrize("command", ["bindings", "config", "devices", "monitor", "decode"])
    def test_subcommand_help(self, runner, command):
        """Test every subcommand has working help."""
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0

    def test_invalid_backend_rejected(self, runner):
        """Test an unknown --backend is refused by click."""
        result = runner.invoke(cli, ["--backend", "keyboard"])
        assert result.exit_code != 0
        assert "Invalid value" in result.output


@pytest.mark.integration
class TestDecodeCommand:
    """Test switch number lookup."""

    def test_single_switch(self, invoke):
        """Test decoding one switch shows its panel, gesture and keys."""
        result = invoke("decode", "23")
        assert result.exit_code == 0
        assert "Right MFD" in result.output
        assert "side ↑ UP" in result.output
        assert "shift+alt+3" in result.output

    def test_all_switches(self, invoke):
        """Test decode without a number lists all 40 switches."""
        result = invoke("decode")
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 40

    def test_out_of_range(self, invoke):
        """Test decode rejects switch numbers above 40."""
        result = invoke("decode", "41")
        assert result.exit_code != 0


@pytest.mark.integration
class TestConfigCommands:
    """Test config show/set/reset against a temporary file."""

    def test_show_defaults_without_file(self, invoke, config_path):
        """Test config show prints defaults without creating a file."""
        result = invoke("config", "show")
        assert result.exit_code == 0
        assert "long_press_ms: 500" in result.output
        assert "key_combos" not in result.output
        assert not config_path.exists()

    def test_show_all_includes_hidden_fields(self, invoke):
        """Test --all also shows bindings and key combinations."""
        result = invoke("config", "show", "--all")
        assert "key_combos" in result.output
        assert "bindings" in result.output

    def test_show_unknown_field(self, invoke):
        """Test showing an unknown field fails."""
        result = invoke("config", "show", "-f", "nope")
        assert result.exit_code != 0

    def test_set_saves(self, invoke, config_path):
        """Test config set writes the new value to disk."""
        result = invoke("config", "set", "sequence_timeout_ms", "2000")
        assert result.exit_code == 0
        assert AppConfig.load_or_default(config_path).sequence_timeout_ms == 2000

    def test_set_string_value(self, invoke, config_path):
        """Test config set accepts an enum value as plain text."""
        result = invoke("config", "set", "selected_panel", "b")
        assert result.exit_code == 0
        assert AppConfig.load_or_default(config_path).selected_panel is Panel.B

    def test_set_text_field_keeps_numeric_value(self, invoke, config_path):
        """Test a text setting that looks like a number is stored as text."""
        result = invoke("config", "set", "midi_port_filter", "123")
        assert result.exit_code == 0
        assert AppConfig.load_or_default(config_path).midi_port_filter == "123"

        result = invoke("config", "set", "midi_port_filter", "null")
        assert result.exit_code == 0
        assert AppConfig.load_or_default(config_path).midi_port_filter is None

    def test_set_invalid_value(self, invoke, config_path):
        """Test an invalid value is reported and nothing is saved."""
        result = invoke("config", "set", "poll_interval_ms", "400")
        assert result.exit_code != 0
        assert "Invalid value for poll_interval_ms" in result.output
        assert not config_path.exists()

    def test_set_unknown_field(self, invoke):
        """Test setting an unknown field fails."""
        result = invoke("config", "set", "volume", "11")
        assert result.exit_code != 0

    def test_partial_reset_repairs_invalid_field(self, invoke, config_path):
        """Test resetting one broken field keeps the other settings."""
        config_path.write_text(json.dumps({"key_combos": [["a"]], "sound_enabled": False}))
        assert invoke("config", "show").exit_code != 0

        result = invoke("config", "reset", "key_combos", "-y")
        assert result.exit_code == 0

        config = AppConfig.load_or_default(config_path)
        assert len(config.key_combos) == 40
        assert config.sound_enabled is False

    def test_full_reset_needs_confirmation(self, invoke, config_path):
        """Test a full reset only happens after confirmation."""
        invoke("config", "set", "long_press_ms", "800")

        result = invoke("config", "reset", input="n\n")
        assert result.exit_code != 0
        assert AppConfig.load_or_default(config_path).long_press_ms == 800

        result = invoke("config", "reset", input="y\n")
        assert result.exit_code == 0
        assert AppConfig.load_or_default(config_path) == AppConfig()

    def test_invalid_file_is_reported(self, invoke, config_path):
        """Test a config file with bad JSON is reported."""
        config_path.write_text("{not json")
        result = invoke("config", "show")
        assert result.exit_code != 0
        assert "invalid syntax" in result.output


@pytest.mark.integration
class TestBindingsCommands:
    """Test bindings show/reset."""

    def test_show_incomplete(self, invoke):
        """Test bindings show reports an incomplete table."""
        result = invoke("bindings", "show")
        assert result.exit_code == 0
        assert "Incomplete" in result.output

    def test_show_complete(self, invoke, config_path, bindings):
        """Test bindings show lists each raw button."""
        AppConfig(bindings=bindings).save(config_path)
        result = invoke("bindings", "show")
        assert result.exit_code == 0
        assert "device 1 / button 3" in result.output
        assert "Complete." in result.output

    def test_show_marks_shared_buttons(self, invoke, config_path):
        """Test buttons bound to several directions are marked shared."""
        table = BindingTable.model_validate(
            {d: {"device_id": 1, "button_id": 1} for d in ("up", "right", "down", "left")}
        )
        AppConfig(bindings=table).save(config_path)
        assert "(shared)" in invoke("bindings", "show").output

    def test_reset(self, invoke, config_path, bindings):
        """Test bindings reset clears the table and keeps other settings."""
        AppConfig(bindings=bindings, long_press_ms=700).save(config_path)
        result = invoke("bindings", "reset", "--yes")
        assert result.exit_code == 0

        config = AppConfig.load_or_default(config_path)
        assert not config.bindings.is_complete
        assert config.long_press_ms == 700


@pytest.mark.integration
class TestRunCommand:
    """Test the default command without opening any device."""

    def test_headless_runs_orchestrator(self, invoke, temp_dir):
        """Test the run options reach the orchestrator."""
        with patch("superhat.orchestration.Orchestrator") as orchestrator_cls:
            result = invoke(
                "--headless", "--dry-run", "--backend", "midi",
                "--log-file", str(temp_dir / "test.log"),
            )

        assert result.exit_code == 0
        kwargs = orchestrator_cls.call_args.kwargs
        assert kwargs["headless"] is True
        assert kwargs["dry_run"] is True
        assert kwargs["backend"].value == "midi"
        orchestrator_cls.return_value.run.assert_called_once()
        orchestrator_cls.return_value.shutdown.assert_called_once()

    def test_startup_error_shows_hint(self, invoke, temp_dir):
        """Test a startup error prints the message and the log path."""
        log_file = temp_dir / "test.log"
        with patch("superhat.orchestration.Orchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.run.side_effect = InputBackendUnavailableError(
                "gamepad", "no controller"
            )
            result = invoke("--headless", "--log-file", str(log_file))

        assert result.exit_code == 1
        assert "ERROR:" in result.output
        assert str(log_file) in result.output
        orchestrator_cls.return_value.shutdown.assert_called_once()

    def test_invalid_config_file(self, invoke, config_path, temp_dir):
        """Test an invalid config file stops the run with the field name."""
        config_path.write_text(json.dumps({"long_press_ms": "soon"}))
        result = invoke("--headless", "--log-file", str(temp_dir / "test.log"))
        assert result.exit_code == 1
        assert "long_press_ms" in result.output
