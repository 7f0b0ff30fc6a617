"""Tests for switch actuation and click feedback."""

import logging
import time
from unittest.mock import Mock, call

import numpy as np
import pytest
import soundfile as sf

from superhat.exceptions import ActuatorError
from superhat.models import Panel, default_key_combos
from superhat.output import (
    ActuatorDispatcher,
    ClickFeedback,
    KeyboardActuator,
    RecordingActuator,
    synthesize_click,
)
from superhat.output.feedback import SAMPLE_RATE, load_click
from superhat.protocols import PanelSelected, SwitchActivated, SwitchActuator, SwitchReleased


class TestKeyboardActuator:
    """Test key presses through a mocked pyautogui."""

    @pytest.fixture
    def keyboard(self):
        return Mock()

    @pytest.fixture
    def actuator(self, keyboard):
        return KeyboardActuator(default_key_combos(), keyboard=keyboard)

    @pytest.mark.unit
    def test_activate_presses_in_order(self, actuator, keyboard):
        """Test activation holds the keys in order."""
        actuator.activate(1)
        assert keyboard.keyDown.call_args_list == [call("ctrl"), call("alt"), call("1")]
        keyboard.keyUp.assert_not_called()

    @pytest.mark.unit
    def test_deactivate_releases_in_reverse(self, actuator, keyboard):
        """Test deactivation releases the keys in reverse order."""
        actuator.deactivate(23)
        assert keyboard.keyUp.call_args_list == [call("3"), call("alt"), call("shift")]

    @pytest.mark.unit
    @pytest.mark.parametrize("number", [0, 41])
    def test_out_of_range_switch(self, actuator, keyboard, number):
        """Test switch numbers outside 1-40 raise ActuatorError."""
        with pytest.raises(ActuatorError):
            actuator.activate(number)
        keyboard.keyDown.assert_not_called()

    @pytest.mark.unit
    def test_keyboard_failure_becomes_actuator_error(self, actuator, keyboard):
        """Test a keyboard backend failure is raised as ActuatorError."""
        keyboard.keyDown.side_effect = OSError("no display")
        with pytest.raises(ActuatorError) as exc_info:
            actuator.activate(2)
        assert exc_info.value.switch_number == 2

    @pytest.mark.unit
    def test_keys_for_is_a_copy(self, actuator):
        """Test keys_for returns a copy of the combination."""
        actuator.keys_for(5).append("x")
        assert actuator.keys_for(5) == ["ctrl", "alt", "5"]

    @pytest.mark.unit
    def test_wrong_table_size(self):
        """Test a key table without 40 entries is refused."""
        with pytest.raises(ValueError):
            KeyboardActuator([["a"]] * 10, keyboard=Mock())


class TestActuatorDispatcher:
    """Test the action observer that drives an actuator."""

    @pytest.fixture
    def actuator(self):
        return Mock(spec=SwitchActuator)

    @pytest.fixture
    def dispatcher(self, actuator):
        return ActuatorDispatcher(actuator)

    @pytest.mark.unit
    def test_activate_then_release(self, dispatcher, actuator):
        """Test the dispatcher activates and releases one switch."""
        dispatcher.on_action(SwitchActivated(7))
        assert dispatcher.active_switch == 7
        dispatcher.on_action(SwitchReleased(7))
        assert dispatcher.active_switch is None
        assert actuator.mock_calls == [call.activate(7), call.deactivate(7)]

    @pytest.mark.unit
    def test_second_activation_refused(self, dispatcher, actuator):
        """Test a second switch is refused while one is active."""
        dispatcher.on_action(SwitchActivated(7))
        dispatcher.on_action(SwitchActivated(8))
        actuator.activate.assert_called_once_with(7)
        assert dispatcher.active_switch == 7

    @pytest.mark.unit
    def test_release_of_inactive_switch_ignored(self, dispatcher, actuator):
        """Test releasing a switch that is not active does nothing."""
        dispatcher.on_action(SwitchReleased(3))
        actuator.deactivate.assert_not_called()

    @pytest.mark.unit
    def test_other_actions_ignored(self, dispatcher, actuator):
        """Test non-switch actions never reach the actuator."""
        dispatcher.on_action(PanelSelected(Panel.B))
        assert actuator.mock_calls == []

    @pytest.mark.unit
    def test_failed_activation_leaves_nothing_active(self, dispatcher, actuator, caplog):
        """Test a failed activation is logged and leaves no switch active."""
        actuator.activate.side_effect = ActuatorError(7, "no display")
        with caplog.at_level(logging.ERROR):
            dispatcher.on_action(SwitchActivated(7))
        assert dispatcher.active_switch is None
        assert "no display" in caplog.text

    @pytest.mark.unit
    def test_failed_release_still_frees_the_slot(self, dispatcher, actuator):
        """Test a failed release still lets the next switch activate."""
        actuator.deactivate.side_effect = ActuatorError(7, "gone")
        dispatcher.on_action(SwitchActivated(7))
        dispatcher.on_action(SwitchReleased(7))
        dispatcher.on_action(SwitchActivated(8))
        assert dispatcher.active_switch == 8

    @pytest.mark.unit
    def test_with_recording_actuator(self):
        """Test the dispatcher drives the recording actuator."""
        recording = RecordingActuator()
        dispatcher = ActuatorDispatcher(recording)
        dispatcher.on_action(SwitchActivated(40))
        dispatcher.on_action(SwitchReleased(40))
        assert recording.calls == [("activate", 40), ("deactivate", 40)]


class TestClickSounds:
    """Test click synthesis and loading."""

    @pytest.mark.unit
    def test_synthesized_click_shape(self):
        """Test the synthesized click is short stereo float32."""
        click = synthesize_click(Panel.A)
        assert click.dtype == np.float32
        assert click.shape[1] == 2
        assert 0 < click.shape[0] < SAMPLE_RATE

    @pytest.mark.unit
    def test_click_is_panned_toward_its_panel(self):
        """Test each panel's click is louder on its own side."""
        left = synthesize_click(Panel.A)
        right = synthesize_click(Panel.B)
        assert np.abs(left[:, 0]).sum() > np.abs(left[:, 1]).sum()
        assert np.abs(right[:, 1]).sum() > np.abs(right[:, 0]).sum()

    @pytest.mark.unit
    def test_load_click_from_wav(self, temp_dir):
        """Test loading a click from a WAV file."""
        path = temp_dir / "click.wav"
        sf.write(str(path), synthesize_click(Panel.B), SAMPLE_RATE)
        data, sample_rate = load_click(path)
        assert sample_rate == SAMPLE_RATE
        assert data.shape == synthesize_click(Panel.B).shape

    @pytest.mark.unit
    def test_load_missing_click(self, temp_dir):
        """Test loading a missing click file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_click(temp_dir / "missing.wav")


class TestClickFeedback:
    """Test the panel click observer with a mocked player."""

    def wait_for(self, player, count=1, timeout=2.0):
        deadline = time.monotonic() + timeout
        while player.call_count < count and time.monotonic() < deadline:
            time.sleep(0.01)

    @pytest.mark.unit
    def test_play_applies_volume(self):
        """Test the click is scaled by the volume."""
        player = Mock()
        feedback = ClickFeedback(volume=0.5, player=player)
        feedback.play(Panel.A)

        data, sample_rate = player.call_args.args
        assert sample_rate == SAMPLE_RATE
        assert np.allclose(data, synthesize_click(Panel.A) * 0.5)

    @pytest.mark.unit
    def test_player_failure_is_swallowed(self):
        """Test a playback failure never reaches the caller."""
        player = Mock(side_effect=RuntimeError("no audio device"))
        ClickFeedback(player=player).play(Panel.B)

    @pytest.mark.unit
    def test_missing_custom_sound_falls_back(self, temp_dir):
        """Test a missing custom sound falls back to the synthesized click."""
        player = Mock()
        feedback = ClickFeedback(left_path=temp_dir / "nope.wav", player=player, volume=1.0)
        feedback.play(Panel.A)
        assert np.allclose(player.call_args.args[0], synthesize_click(Panel.A))

    @pytest.mark.integration
    def test_panel_selected_plays_on_worker(self):
        """Test a panel selection plays the click on the worker thread."""
        player = Mock()
        feedback = ClickFeedback(player=player)

        feedback.on_action(PanelSelected(Panel.B))
        self.wait_for(player)
        feedback.close()

        player.assert_called_once()

    @pytest.mark.unit
    def test_disabled_plays_nothing(self):
        """Test disabled feedback plays nothing."""
        player = Mock()
        feedback = ClickFeedback(enabled=False, player=player)
        feedback.on_action(PanelSelected(Panel.A))
        feedback.close()
        player.assert_not_called()

    @pytest.mark.unit
    def test_other_actions_play_nothing(self):
        """Test only panel selections play a click."""
        player = Mock()
        feedback = ClickFeedback(player=player)
        feedback.on_action(SwitchActivated(1))
        feedback.close()
        player.assert_not_called()
