"""Output stage: switch actuation and audible feedback."""

from .actuator import ActuatorDispatcher, KeyboardActuator, RecordingActuator
from .feedback import ClickFeedback, synthesize_click

__all__ = [
    "ActuatorDispatcher",
    "ClickFeedback",
    "KeyboardActuator",
    "RecordingActuator",
    "synthesize_click",
]
