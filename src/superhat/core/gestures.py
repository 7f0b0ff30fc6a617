"""Gesture decoding: tap buffers to switch positions and switch numbers.

Every side of a panel holds five switches, numbered clockwise. After a side
is chosen, its switches are addressed by taps relative to the side:

    position 0: [L, L]
    position 1: [L, side]
    position 2: [side]
    position 3: [R, side]
    position 4: [R, R]

where (L, R) is the side's relative pair. All functions here are pure.
"""

from collections.abc import Sequence

from superhat.models import SWITCH_COUNT, Direction, Panel

POSITIONS_PER_SIDE = 5
SWITCHES_PER_PANEL = 20


def resolve(side: Direction, buffer: Sequence[Direction]) -> int | None:
    """
    Get the position (0-4) a tap buffer selects on a side.

    Returns:
        The position, or None if the buffer is incomplete or can never resolve.
        Use could_extend() to tell those two apart.
    """
    taps = tuple(buffer)
    if taps == (side,):
        return 2

    left, right = side.relative_pair
    return {
        (left, left): 0,
        (left, side): 1,
        (right, side): 3,
        (right, right): 4,
    }.get(taps)


def could_extend(side: Direction, buffer: Sequence[Direction]) -> bool:
    """
    Check if a tap buffer is a prefix of some valid gesture for the side.

    False means the buffer can never resolve and must be discarded.
    """
    taps = tuple(buffer)
    if len(taps) == 0:
        return True
    if len(taps) == 1:
        return taps[0] is side or taps[0] in side.relative_pair
    return resolve(side, taps) is not None


def gesture_for(side: Direction, position: int) -> tuple[Direction, ...]:
    """
    Get the tap buffer that selects a position on a side.

    Raises:
        ValueError: If position is outside 0-4
    """
    left, right = side.relative_pair
    gestures = (
        (left, left),
        (left, side),
        (side,),
        (right, side),
        (right, right),
    )
    if not 0 <= position < POSITIONS_PER_SIDE:
        raise ValueError(f"position must be 0-{POSITIONS_PER_SIDE - 1}, got {position}")
    return gestures[position]


def switch_number(panel: Panel, side: Direction, position: int) -> int:
    """Get the global switch number (1-40) for a position on a panel side."""
    return side.side_base + position + panel.offset + 1


def decode_switch_number(number: int) -> tuple[Panel, Direction, int]:
    """
    Split a global switch number into (panel, side, position).

    Raises:
        ValueError: If number is outside 1-40
    """
    if not 1 <= number <= SWITCH_COUNT:
        raise ValueError(f"switch number must be 1-{SWITCH_COUNT}, got {number}")

    index = number - 1
    panel = Panel.A if index < SWITCHES_PER_PANEL else Panel.B
    local = index - panel.offset
    side = list(Direction)[local // POSITIONS_PER_SIDE]
    return panel, side, local % POSITIONS_PER_SIDE
