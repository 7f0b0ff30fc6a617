"""Tests for the headless console UI."""

import threading
from unittest.mock import Mock

import pytest

from superhat.console import ConsoleUI
from superhat.core import SwitchActive
from superhat.models import AppConfig, Binding, BindingTable, Direction, Panel
from superhat.orchestration import Orchestrator
from superhat.output import ClickFeedback, RecordingActuator
from superhat.protocols import (
    BindingCaptured,
    DeviceEvent,
    DuplicateBinding,
    PanelSelected,
    RebindingCompleted,
    SequenceInvalid,
    SwitchActivated,
    SwitchReleased,
)
from superhat.ui_shared import UIAdapter

from conftest import FakeInputSource, wait_until


class TestFormatting:
    """Test what the console prints for each event."""

    @pytest.fixture
    def ui(self):
        return ConsoleUI(Mock(spec=Orchestrator))

    @pytest.mark.unit
    def test_is_a_ui_adapter(self, ui):
        """Test the console UI satisfies the UIAdapter protocol."""
        assert isinstance(ui, UIAdapter)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "action,text",
        [
            (PanelSelected(Panel.B), "Panel: Right MFD"),
            (SwitchActivated(23), "Switch 23 pressed"),
            (SwitchReleased(23), "Switch 23 released"),
            (SequenceInvalid(), "Invalid sequence"),
            (
                BindingCaptured(Direction.UP, Binding(device_id=1, button_id=4)),
                "UP -> device 1 / button 4",
            ),
        ],
    )
    def test_actions(self, ui, capsys, action, text):
        """Test each action prints a readable line."""
        ui.on_action(action)
        assert text in capsys.readouterr().out

    @pytest.mark.unit
    def test_rebinding_completed_reports_save_result(self, ui, capsys):
        """Test the console only claims a save that actually happened."""
        ui.on_action(RebindingCompleted(BindingTable(), saved=True))
        assert "Bindings saved" in capsys.readouterr().out

        ui.on_action(RebindingCompleted(BindingTable(), saved=False))
        out = capsys.readouterr().out
        assert "save failed" in out
        assert "Bindings saved" not in out

    @pytest.mark.unit
    def test_duplicate_binding(self, ui, capsys):
        """Test a refused duplicate names the direction already using the button."""
        binding = Binding(device_id=1, button_id=1)
        ui.on_action(DuplicateBinding(Direction.DOWN, binding, Direction.UP))
        assert "already UP" in capsys.readouterr().out

    @pytest.mark.unit
    def test_modes_only_when_verbose(self, capsys):
        """Test mode changes are printed only in verbose mode."""
        quiet = ConsoleUI(Mock(spec=Orchestrator))
        quiet.on_mode_changed(SwitchActive(Panel.A, 3))
        assert capsys.readouterr().out == ""

        verbose = ConsoleUI(Mock(spec=Orchestrator), verbose=True)
        verbose.on_mode_changed(SwitchActive(Panel.A, 3))
        assert "switch 3 active" in capsys.readouterr().out

    @pytest.mark.unit
    def test_device_events(self, ui, capsys):
        """Test connects and disconnects are printed."""
        ui.on_device_event(DeviceEvent.CONNECTED, "Fake Stick")
        ui.on_device_event(DeviceEvent.DISCONNECTED, "Fake Stick")
        out = capsys.readouterr().out
        assert "Connected: Fake Stick" in out
        assert "Disconnected: Fake Stick" in out


class TestLifecycle:
    """Test the console UI driving a real orchestrator."""

    @pytest.mark.integration
    def test_run_until_stopped(self, bindings, temp_dir, capsys):
        """Test the console runs a real orchestrator until stopped."""
        source = FakeInputSource()
        orchestrator = Orchestrator(
            AppConfig(bindings=bindings),
            config_path=temp_dir / "config.json",
            headless=True,
            input_source=source,
            actuator=RecordingActuator(),
            feedback=Mock(spec=ClickFeedback),
        )
        ui = ConsoleUI(orchestrator)
        orchestrator.register_ui(ui)

        printed = []

        def output() -> str:
            printed.append(capsys.readouterr().out)
            return "".join(printed)

        runner = threading.Thread(target=orchestrator.run, daemon=True)
        runner.start()
        try:
            assert wait_until(lambda: source.started)
            source.connect()
            source.tap(Direction.UP)
            source.press(Direction.UP)
            assert wait_until(lambda: "Switch 3 pressed" in output())
        finally:
            ui.stop()
            runner.join(timeout=2.0)
            orchestrator.shutdown()

        assert not runner.is_alive()
        assert "Connected: Fake Stick" in output()
