"""Core gesture recognition: decoder, mapper, state machine and input loop."""

from superhat.core.engine import InputLoop
from superhat.core.gestures import (
    could_extend,
    decode_switch_number,
    gesture_for,
    resolve,
    switch_number,
)
from superhat.core.mapper import DirectionMapper
from superhat.core.modes import (
    AwaitingSide,
    AwaitingSwitch,
    Invalid,
    Mode,
    Rebinding,
    SwitchActive,
    describe,
)
from superhat.core.state_machine import GestureStateMachine, HeldButton

__all__ = [
    "AwaitingSide",
    "AwaitingSwitch",
    "DirectionMapper",
    "GestureStateMachine",
    "HeldButton",
    "InputLoop",
    "Invalid",
    "Mode",
    "Rebinding",
    "SwitchActive",
    "could_extend",
    "decode_switch_number",
    "describe",
    "gesture_for",
    "resolve",
    "switch_number",
]
