"""Modes of the gesture state machine.

A mode is an immutable value. The state machine replaces it on every
accepted transition and hands the same value to observers, so a UI can
keep a reference without seeing it change underneath.
"""

from dataclasses import dataclass

from superhat.models import Direction, Panel


@dataclass(frozen=True)
class AwaitingSide:
    """Idle on a panel: a short tap picks a side, a long press picks a panel."""

    panel: Panel


@dataclass(frozen=True)
class AwaitingSwitch:
    """Side chosen, collecting the taps that pick a position on it."""

    panel: Panel
    side: Direction
    buffer: tuple[Direction, ...]
    last_input_time: float


@dataclass(frozen=True)
class SwitchActive:
    """A switch is held down until the next release."""

    panel: Panel
    switch_number: int


@dataclass(frozen=True)
class Invalid:
    """The taps could not resolve. The next release returns to AwaitingSide."""

    panel: Panel


@dataclass(frozen=True)
class Rebinding:
    """Capturing raw buttons for the directions, starting at next_direction."""

    next_direction: Direction


Mode = AwaitingSide | AwaitingSwitch | SwitchActive | Invalid | Rebinding


def describe(mode: Mode) -> str:
    """One-line human description of a mode, used by the console UI and status bar."""
    if isinstance(mode, AwaitingSide):
        return f"{mode.panel.display_name}: select side"
    if isinstance(mode, AwaitingSwitch):
        taps = " ".join(d.symbol for d in mode.buffer) or "-"
        return f"{mode.panel.display_name}: side {mode.side.symbol}, taps {taps}"
    if isinstance(mode, SwitchActive):
        return f"{mode.panel.display_name}: switch {mode.switch_number} active"
    if isinstance(mode, Invalid):
        return f"{mode.panel.display_name}: invalid sequence, release to reset"
    return f"Rebinding: press {mode.next_direction.name}"
