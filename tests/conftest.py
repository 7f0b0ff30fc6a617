"""Pytest fixtures for tests."""

import time
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from superhat.core import GestureStateMachine
from superhat.input import InputSource
from superhat.models import Binding, BindingTable, Direction, Panel
from superhat.protocols import ButtonKind, DeviceEvent, RawInputEvent

# Raw buttons used by the `bindings` fixture, device 1 like a first joystick
BUTTONS = {
    Direction.UP: 1,
    Direction.RIGHT: 2,
    Direction.DOWN: 3,
    Direction.LEFT: 4,
}
DEVICE = 1


class FakeClock:
    """Manually advanced monotonic clock, in seconds."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class RecordingObserver:
    """Mode and action observer that keeps everything it is told."""

    def __init__(self):
        self.modes = []
        self.actions = []

    def on_mode_changed(self, mode) -> None:
        self.modes.append(mode)

    def on_action(self, action) -> None:
        self.actions.append(action)

    def clear(self) -> None:
        self.modes.clear()
        self.actions.clear()


class HatDriver:
    """Presses and releases the bound hat buttons of a state machine."""

    def __init__(self, machine: GestureStateMachine, clock: FakeClock):
        self.machine = machine
        self.clock = clock

    def down(self, direction: Direction) -> None:
        self.machine.process_raw(
            RawInputEvent(DEVICE, BUTTONS[direction], ButtonKind.DOWN, self.clock())
        )

    def up(self, direction: Direction) -> None:
        self.machine.process_raw(
            RawInputEvent(DEVICE, BUTTONS[direction], ButtonKind.UP, self.clock())
        )

    def tap(self, direction: Direction, hold: float = 0.05) -> None:
        """Short press: down, a little time, poll, up."""
        self.down(direction)
        self.clock.advance(hold)
        self.machine.poll()
        self.up(direction)

    def long_press(self, direction: Direction, hold: float = 0.6) -> None:
        """Hold past the long-press threshold, then release."""
        self.down(direction)
        self.clock.advance(hold)
        self.machine.poll()
        self.up(direction)

    def raw(self, device_id: int, button_id: int, kind: ButtonKind = ButtonKind.DOWN) -> None:
        self.machine.process_raw(RawInputEvent(device_id, button_id, kind, self.clock()))


class FakeInputSource(InputSource):
    """Input source driven by the test instead of a device."""

    name = "fake"

    def __init__(self, fail_with: Exception | None = None):
        super().__init__()
        self.fail_with = fail_with
        self.started = False
        self.stopped = False

    def start(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    @property
    def connected_devices(self) -> list[str]:
        return ["Fake Stick"] if self.started else []

    def press(self, direction: Direction) -> None:
        self._emit(DEVICE, BUTTONS[direction], ButtonKind.DOWN)

    def release(self, direction: Direction) -> None:
        self._emit(DEVICE, BUTTONS[direction], ButtonKind.UP)

    def tap(self, direction: Direction) -> None:
        self.press(direction)
        self.release(direction)

    def connect(self, name: str = "Fake Stick") -> None:
        self._notify_device(DeviceEvent.CONNECTED, name)


def wait_until(predicate, timeout: float = 2.0) -> bool:
    """Poll a condition set by a background thread."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bindings():
    """A complete binding table using BUTTONS on DEVICE."""
    table = BindingTable.unbound()
    for direction, button in BUTTONS.items():
        table.bind(direction, Binding(device_id=DEVICE, button_id=button))
    return table


@pytest.fixture
def recorder():
    return RecordingObserver()


@pytest.fixture
def machine(bindings, clock, recorder):
    """State machine on panel A with a complete table, observed by `recorder`."""
    sm = GestureStateMachine(bindings, initial_panel=Panel.A, clock=clock)
    sm.register_mode_observer(recorder)
    sm.register_action_observer(recorder)
    return sm


@pytest.fixture
def hat(machine, clock):
    return HatDriver(machine, clock)
