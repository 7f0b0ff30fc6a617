"""Events and protocols shared by the state machine and its collaborators.

For model lifecycle events and observers see superhat.model_manager.protocols.
"""

from .events import (
    Action,
    BindingCaptured,
    ButtonDown,
    ButtonKind,
    ButtonUp,
    CancelRebinding,
    Command,
    DeviceEvent,
    DuplicateBinding,
    LongPress,
    MachineEvent,
    PanelSelected,
    RawInputEvent,
    RebindCapture,
    RebindingCancelled,
    RebindingCompleted,
    RebindingStarted,
    SequenceInvalid,
    SequenceTimedOut,
    StartRebinding,
    SwitchActivated,
    SwitchReleased,
    Tick,
)
from .observers import ActionObserver, BindingStore, DeviceObserver, ModeObserver, SwitchActuator

__all__ = [
    # Events
    "Action",
    "BindingCaptured",
    "ButtonDown",
    "ButtonKind",
    "ButtonUp",
    "CancelRebinding",
    "Command",
    "DeviceEvent",
    "DuplicateBinding",
    "LongPress",
    "MachineEvent",
    "PanelSelected",
    "RawInputEvent",
    "RebindCapture",
    "RebindingCancelled",
    "RebindingCompleted",
    "RebindingStarted",
    "SequenceInvalid",
    "SequenceTimedOut",
    "StartRebinding",
    "SwitchActivated",
    "SwitchReleased",
    "Tick",
    # Observers and collaborators
    "ActionObserver",
    "BindingStore",
    "DeviceObserver",
    "ModeObserver",
    "SwitchActuator",
]
