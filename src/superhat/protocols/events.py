"""Domain events.

- Raw input: edges reported by an input backend, before classification
- Machine input: the alphabet the gesture state machine consumes
- Commands: external requests queued by the UIs
- Actions: what the state machine emits for the outside world
- Device events: input backend connection changes
"""

from dataclasses import dataclass
from enum import Enum

from superhat.models import BindingTable, Binding, Direction, Panel


class ButtonKind(Enum):
    """Edge of a raw button event."""

    DOWN = "down"
    UP = "up"


@dataclass(frozen=True)
class RawInputEvent:
    """A button edge from any raw input source."""

    device_id: int
    button_id: int
    kind: ButtonKind
    timestamp: float

    @property
    def key(self) -> tuple[int, int]:
        """Identity of the physical button."""
        return (self.device_id, self.button_id)


class DeviceEvent(Enum):
    """Events from input backends."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


# =================================================================
# Machine input
# =================================================================


@dataclass(frozen=True)
class ButtonDown:
    direction: Direction


@dataclass(frozen=True)
class ButtonUp:
    direction: Direction
    was_long_press: bool = False


@dataclass(frozen=True)
class LongPress:
    direction: Direction


@dataclass(frozen=True)
class RebindCapture:
    device_id: int
    button_id: int


@dataclass(frozen=True)
class Tick:
    now: float


@dataclass(frozen=True)
class StartRebinding:
    """Command: enter rebinding from any non-rebinding mode."""


@dataclass(frozen=True)
class CancelRebinding:
    """Command: abandon rebinding and restore the previous bindings."""


MachineEvent = ButtonDown | ButtonUp | LongPress | RebindCapture | Tick | StartRebinding | CancelRebinding
Command = StartRebinding | CancelRebinding


# =================================================================
# Actions
# =================================================================


@dataclass(frozen=True)
class PanelSelected:
    panel: Panel


@dataclass(frozen=True)
class SwitchActivated:
    switch_number: int


@dataclass(frozen=True)
class SwitchReleased:
    switch_number: int


@dataclass(frozen=True)
class SequenceInvalid:
    """The tap buffer can never resolve. Cleared by the next release."""


@dataclass(frozen=True)
class SequenceTimedOut:
    """No tap arrived in time. The buffer was discarded."""


@dataclass(frozen=True)
class RebindingStarted:
    pass


@dataclass(frozen=True)
class BindingCaptured:
    direction: Direction
    binding: Binding


@dataclass(frozen=True)
class DuplicateBinding:
    """A captured button is already bound to another direction and was refused."""

    direction: Direction
    binding: Binding
    existing: Direction


@dataclass(frozen=True)
class RebindingCompleted:
    """All four directions are bound. ``saved`` is False if the bindings could not be persisted."""

    bindings: BindingTable
    saved: bool = False


@dataclass(frozen=True)
class RebindingCancelled:
    pass


Action = (
    PanelSelected
    | SwitchActivated
    | SwitchReleased
    | SequenceInvalid
    | SequenceTimedOut
    | RebindingStarted
    | BindingCaptured
    | DuplicateBinding
    | RebindingCompleted
    | RebindingCancelled
)
