"""Game controller input via pygame joysticks."""

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

# No window is ever opened: use the dummy video driver and keep receiving
# joystick events while another application (the simulator) has focus.
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")

import pygame  # noqa: E402

from superhat.exceptions import InputBackendUnavailableError  # noqa: E402
from superhat.protocols import ButtonKind, DeviceEvent  # noqa: E402

from .base import InputSource  # noqa: E402

logger = logging.getLogger(__name__)

# Hat positions are reported as virtual buttons HAT_BUTTON_BASE + hat * 4 + n,
# n being 0 up, 1 right, 2 down, 3 left. Real buttons stay below the base.
HAT_BUTTON_BASE = 200

_ALLOWED_EVENTS = [
    pygame.JOYBUTTONDOWN,
    pygame.JOYBUTTONUP,
    pygame.JOYHATMOTION,
    pygame.JOYDEVICEADDED,
    pygame.JOYDEVICEREMOVED,
]


@dataclass(frozen=True)
class GamepadInfo:
    """Description of a connected controller, for `superhat devices`."""

    index: int
    name: str
    buttons: int
    hats: int
    guid: str

    def __str__(self) -> str:
        return f"[{self.index}] {self.name} ({self.buttons} buttons, {self.hats} hats)"


def hat_positions(value: tuple[int, int]) -> set[int]:
    """
    Split a hat value into the virtual button offsets it holds down.

    Diagonals hold two offsets, e.g. (1, 1) is up and right.
    """
    x, y = value
    pressed = set()
    if y > 0:
        pressed.add(0)
    if x > 0:
        pressed.add(1)
    if y < 0:
        pressed.add(2)
    if x < 0:
        pressed.add(3)
    return pressed


def hat_button_id(hat: int, offset: int) -> int:
    return HAT_BUTTON_BASE + hat * 4 + offset


class GamepadInput(InputSource):
    """
    Reads every connected joystick on a background pygame thread.

    Buttons are reported as ``button_id = button + 1``. SDL hands out a new
    instance id on every connection, so ``device_id`` comes from a registry
    keyed by controller GUID (and by order among identical controllers):
    a controller that is unplugged and plugged back in keeps its id, and
    ids are numbered from 1 in the order controllers are first seen.
    Buttons still held on a removed controller are released.
    """

    name = "gamepad"

    def __init__(self, poll_interval: float = 0.005, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            poll_interval: Sleep between pygame event pumps (seconds)
            clock: Time source for event timestamps
        """
        super().__init__(clock)
        self._poll_interval = poll_interval
        self._joysticks: dict[int, pygame.joystick.JoystickType] = {}
        self._names: dict[int, str] = {}
        self._pressed: dict[int, set[int]] = {}
        self._hats: dict[tuple[int, int], set[int]] = {}
        self._device_ids: dict[int, int] = {}
        self._slots: dict[tuple[str, int], int] = {}
        self._next_device_id = 1
        self._running = threading.Event()
        self._ready = threading.Event()
        self._init_error: pygame.error | None = None
        self._thread: threading.Thread | None = None

    @staticmethod
    def list_devices() -> list[GamepadInfo]:
        """Enumerate connected controllers."""
        pygame.joystick.init()
        devices = []
        for index in range(pygame.joystick.get_count()):
            joystick = pygame.joystick.Joystick(index)
            devices.append(
                GamepadInfo(
                    index=index,
                    name=joystick.get_name(),
                    buttons=joystick.get_numbuttons(),
                    hats=joystick.get_numhats(),
                    guid=joystick.get_guid(),
                )
            )
        return devices

    @property
    def connected_devices(self) -> list[str]:
        return list(self._names.values())

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            logger.warning("GamepadInput is already running")
            return

        self._running.set()
        self._ready.clear()
        self._init_error = None
        self._thread = threading.Thread(target=self._run, name="superhat-gamepad", daemon=True)
        self._thread.start()
        self._ready.wait(timeout=5.0)

        if self._init_error is not None:
            self._running.clear()
            raise InputBackendUnavailableError("gamepad", str(self._init_error))
        logger.info("Gamepad input started")

    def stop(self) -> None:
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=1.0)
        self._thread = None
        logger.info("Gamepad input stopped")

    def _run(self) -> None:
        # pygame wants init, event pumping and quit on the same thread
        try:
            pygame.display.init()
            pygame.joystick.init()
            pygame.event.set_allowed(None)
            pygame.event.set_allowed(_ALLOWED_EVENTS)
        except pygame.error as e:
            logger.error(f"Failed to initialize pygame: {e}")
            self._init_error = e
            self._ready.set()
            return

        self._ready.set()
        try:
            while self._running.is_set():
                for event in pygame.event.get():
                    self.handle_event(event)
                time.sleep(self._poll_interval)
        finally:
            self._release_all()
            self._joysticks.clear()
            self._names.clear()
            self._device_ids.clear()
            pygame.joystick.quit()
            pygame.display.quit()

    def handle_event(self, event: pygame.event.Event) -> None:
        """Translate one pygame event. Runs on the pygame thread."""
        if event.type == pygame.JOYBUTTONDOWN:
            self._press(event.instance_id, event.button + 1)
        elif event.type == pygame.JOYBUTTONUP:
            self._release(event.instance_id, event.button + 1)
        elif event.type == pygame.JOYHATMOTION:
            self._move_hat(event.instance_id, event.hat, tuple(event.value))
        elif event.type == pygame.JOYDEVICEADDED:
            self._add_device(event.device_index)
        elif event.type == pygame.JOYDEVICEREMOVED:
            self._remove_device(event.instance_id)

    def _press(self, instance_id: int, button_id: int) -> None:
        pressed = self._pressed.setdefault(instance_id, set())
        if button_id in pressed:
            return
        pressed.add(button_id)
        self._emit(self._device_id(instance_id), button_id, ButtonKind.DOWN)

    def _release(self, instance_id: int, button_id: int) -> None:
        pressed = self._pressed.get(instance_id, set())
        if button_id not in pressed:
            return
        pressed.discard(button_id)
        self._emit(self._device_id(instance_id), button_id, ButtonKind.UP)

    def _move_hat(self, instance_id: int, hat: int, value: tuple[int, int]) -> None:
        previous = self._hats.get((instance_id, hat), set())
        current = hat_positions(value)
        self._hats[(instance_id, hat)] = current

        # Releases first so a roll from up to right reads as up-up then right-down
        for offset in sorted(previous - current):
            self._release(instance_id, hat_button_id(hat, offset))
        for offset in sorted(current - previous):
            self._press(instance_id, hat_button_id(hat, offset))

    def _add_device(self, device_index: int) -> None:
        try:
            joystick = pygame.joystick.Joystick(device_index)
        except pygame.error as e:
            logger.error(f"Could not open controller {device_index}: {e}")
            return
        instance_id = joystick.get_instance_id()
        self._joysticks[instance_id] = joystick
        self._names[instance_id] = joystick.get_name()
        self._device_ids[instance_id] = self._assign_device_id(joystick.get_guid())
        logger.debug(f"Controller instance {instance_id} is device {self._device_ids[instance_id]}")
        self._notify_device(DeviceEvent.CONNECTED, self._names[instance_id])

    def _assign_device_id(self, guid: str) -> int:
        # Identical controllers share a GUID; take the first of its slots not in use
        in_use = set(self._device_ids.values())
        slot = 0
        while self._slots.get((guid, slot)) in in_use:
            slot += 1
        if (guid, slot) not in self._slots:
            self._slots[(guid, slot)] = self._new_device_id()
        return self._slots[(guid, slot)]

    def _new_device_id(self) -> int:
        device_id = self._next_device_id
        self._next_device_id += 1
        return device_id

    def _device_id(self, instance_id: int) -> int:
        # Events can arrive before (or without) JOYDEVICEADDED
        if instance_id not in self._device_ids:
            self._device_ids[instance_id] = self._new_device_id()
        return self._device_ids[instance_id]

    def _remove_device(self, instance_id: int) -> None:
        for button_id in sorted(self._pressed.get(instance_id, set())):
            self._release(instance_id, button_id)
        self._pressed.pop(instance_id, None)
        for key in [key for key in self._hats if key[0] == instance_id]:
            del self._hats[key]

        self._device_ids.pop(instance_id, None)
        self._joysticks.pop(instance_id, None)
        name = self._names.pop(instance_id, f"instance {instance_id}")
        self._notify_device(DeviceEvent.DISCONNECTED, name)

    def _release_all(self) -> None:
        for instance_id, pressed in list(self._pressed.items()):
            for button_id in sorted(pressed):
                self._release(instance_id, button_id)
