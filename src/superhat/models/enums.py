"""Enumerations for hat directions and panels."""

from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Logical hat direction."""

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def relative_pair(self) -> tuple["Direction", "Direction"]:
        """
        Get the (left-neighbour, right-neighbour) of this direction.

        Seen from the centre of the panel looking at this side, the first
        element is the direction that walks toward the lower-numbered
        switches and the second toward the higher-numbered ones.
        """
        return _RELATIVE_PAIRS[self]

    @property
    def opposite(self) -> "Direction":
        """Get the direction on the other side of the hat."""
        return _OPPOSITES[self]

    @property
    def side_base(self) -> int:
        """Offset of this side's first switch within a panel (0, 5, 10, 15)."""
        return _SIDE_BASES[self]

    @property
    def symbol(self) -> str:
        """Arrow glyph used by the UIs."""
        return _SYMBOLS[self]

    def next_in_binding_order(self) -> Optional["Direction"]:
        """
        Get the direction captured after this one while rebinding.

        Returns:
            Next direction in Up -> Right -> Down -> Left order, or None after Left
        """
        order = list(Direction)
        index = order.index(self)
        if index + 1 < len(order):
            return order[index + 1]
        return None


_RELATIVE_PAIRS = {
    Direction.UP: (Direction.LEFT, Direction.RIGHT),
    Direction.RIGHT: (Direction.UP, Direction.DOWN),
    Direction.DOWN: (Direction.RIGHT, Direction.LEFT),
    Direction.LEFT: (Direction.DOWN, Direction.UP),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.RIGHT: Direction.LEFT,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
}

_SIDE_BASES = {
    Direction.UP: 0,
    Direction.RIGHT: 5,
    Direction.DOWN: 10,
    Direction.LEFT: 15,
}

_SYMBOLS = {
    Direction.UP: "↑",
    Direction.RIGHT: "→",
    Direction.DOWN: "↓",
    Direction.LEFT: "←",
}


class Panel(str, Enum):
    """One of the two addressable banks of 20 switches."""

    A = "a"  # Left MFD
    B = "b"  # Right MFD

    @property
    def offset(self) -> int:
        """Offset added to a panel-local switch number (0 or 20)."""
        return 0 if self is Panel.A else 20

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return "Left MFD" if self is Panel.A else "Right MFD"

    @classmethod
    def for_direction(cls, direction: Direction) -> Optional["Panel"]:
        """
        Get the panel selected by a long press in the given direction.

        Only Left and Right select panels; Up and Down return None.
        """
        if direction is Direction.LEFT:
            return cls.A
        if direction is Direction.RIGHT:
            return cls.B
        return None


class InputBackend(str, Enum):
    """Raw input source used to read the hat."""

    GAMEPAD = "gamepad"
    MIDI = "midi"
