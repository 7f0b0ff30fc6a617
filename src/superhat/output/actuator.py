"""Switch actuators: turn resolved switch numbers into key presses."""

import logging
from typing import Any, Optional

from superhat.exceptions import ActuatorError
from superhat.models import SWITCH_COUNT
from superhat.protocols import Action, SwitchActivated, SwitchActuator, SwitchReleased

logger = logging.getLogger(__name__)


def _check_number(switch_number: int) -> None:
    if not 1 <= switch_number <= SWITCH_COUNT:
        raise ActuatorError(switch_number, f"switch number must be 1-{SWITCH_COUNT}")


class KeyboardActuator:
    """
    Holds a key combination down for as long as a switch is active.

    Keys are pressed in the configured order and released in reverse order,
    so modifiers wrap the final key.
    """

    def __init__(self, key_combos: list[list[str]], keyboard: Optional[Any] = None):
        """
        Args:
            key_combos: One key combination per switch, in switch order
            keyboard: Object with pyautogui's keyDown/keyUp interface.
                pyautogui itself is imported on first use if None.
        """
        if len(key_combos) != SWITCH_COUNT:
            raise ValueError(f"expected {SWITCH_COUNT} key combinations, got {len(key_combos)}")
        self._key_combos = [list(combo) for combo in key_combos]
        self._keyboard = keyboard

    def _get_keyboard(self) -> Any:
        if self._keyboard is None:
            # pyautogui needs a display at import time
            import pyautogui

            pyautogui.FAILSAFE = False
            pyautogui.PAUSE = 0
            self._keyboard = pyautogui
        return self._keyboard

    def keys_for(self, switch_number: int) -> list[str]:
        """
        Get the key combination for a switch.

        Raises:
            ActuatorError: If switch_number is outside 1-40
        """
        _check_number(switch_number)
        return list(self._key_combos[switch_number - 1])

    def activate(self, switch_number: int) -> None:
        """
        Press the switch's keys.

        Raises:
            ActuatorError: If the number is out of range or the keyboard backend fails
        """
        keys = self.keys_for(switch_number)
        logger.debug(f"Switch {switch_number}: pressing {'+'.join(keys)}")
        try:
            keyboard = self._get_keyboard()
            for key in keys:
                keyboard.keyDown(key)
        except Exception as e:
            raise ActuatorError(switch_number, str(e)) from e

    def deactivate(self, switch_number: int) -> None:
        keys = self.keys_for(switch_number)
        logger.debug(f"Switch {switch_number}: releasing {'+'.join(keys)}")
        try:
            keyboard = self._get_keyboard()
            for key in reversed(keys):
                keyboard.keyUp(key)
        except Exception as e:
            raise ActuatorError(switch_number, str(e)) from e


class RecordingActuator:
    """Actuator for dry runs and tests: logs and records calls instead of pressing keys."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def activate(self, switch_number: int) -> None:
        _check_number(switch_number)
        logger.info(f"[dry-run] activate switch {switch_number}")
        self.calls.append(("activate", switch_number))

    def deactivate(self, switch_number: int) -> None:
        _check_number(switch_number)
        logger.info(f"[dry-run] deactivate switch {switch_number}")
        self.calls.append(("deactivate", switch_number))


class ActuatorDispatcher:
    """
    Action observer that drives an actuator.

    Calls activate() once per SwitchActivated and deactivate() once per
    SwitchReleased. A second activation while a switch is still active, or a
    release of a switch that is not active, is refused and logged.
    """

    def __init__(self, actuator: SwitchActuator):
        self._actuator = actuator
        self._active: Optional[int] = None

    @property
    def active_switch(self) -> Optional[int]:
        return self._active

    def on_action(self, action: Action) -> None:
        if isinstance(action, SwitchActivated):
            self._activate(action.switch_number)
        elif isinstance(action, SwitchReleased):
            self._deactivate(action.switch_number)

    def _activate(self, switch_number: int) -> None:
        if self._active is not None:
            logger.warning(
                f"Refusing to activate switch {switch_number}: switch {self._active} is still active"
            )
            return
        try:
            self._actuator.activate(switch_number)
        except ActuatorError as e:
            logger.error(e.technical_message)
            return
        self._active = switch_number

    def _deactivate(self, switch_number: int) -> None:
        if self._active != switch_number:
            logger.warning(f"Ignoring release of switch {switch_number}: it is not active")
            return
        # Cleared first so a failed release never blocks the next activation
        self._active = None
        try:
            self._actuator.deactivate(switch_number)
        except ActuatorError as e:
            logger.error(e.technical_message)
