"""Panel legend shared by the TUI and the console UI.

A panel is drawn as the bezel of a square display: five switches per side,
numbered clockwise from the top-left corner. On a 7x7 grid the corners stay
empty and the centre is free for the panel name.

Each switch carries the full gesture that selects it: the side tap followed
by the taps that pick the position.
"""

from dataclasses import dataclass

from superhat.core.gestures import POSITIONS_PER_SIDE, gesture_for, switch_number
from superhat.models import Direction, Panel

GRID_SIZE = POSITIONS_PER_SIDE + 2

# CSS classes applied to switch cells by the TUI
ACTIVE_CLASS = "active"
SIDE_CLASS = "side"
CANDIDATE_CLASS = "candidate"


@dataclass(frozen=True)
class SwitchCell:
    """Where a switch sits on the bezel and how to reach it."""

    number: int
    side: Direction
    position: int
    row: int
    col: int

    @property
    def gesture(self) -> tuple[Direction, ...]:
        return (self.side, *gesture_for(self.side, self.position))

    @property
    def gesture_text(self) -> str:
        return " ".join(d.symbol for d in self.gesture)


@dataclass(frozen=True)
class PanelLayout:
    panel: Panel
    cells: tuple[SwitchCell, ...]

    def cell_at(self, row: int, col: int) -> SwitchCell | None:
        for cell in self.cells:
            if (cell.row, cell.col) == (row, col):
                return cell
        return None

    def cell_for(self, number: int) -> SwitchCell | None:
        for cell in self.cells:
            if cell.number == number:
                return cell
        return None

    def side_cells(self, side: Direction) -> list[SwitchCell]:
        return [cell for cell in self.cells if cell.side is side]


def _grid_position(side: Direction, position: int) -> tuple[int, int]:
    last = GRID_SIZE - 1
    step = position + 1
    if side is Direction.UP:
        return 0, step
    if side is Direction.RIGHT:
        return step, last
    if side is Direction.DOWN:
        return last, last - step
    return last - step, 0


def panel_layout(panel: Panel) -> PanelLayout:
    """Build the bezel layout of a panel, in switch order."""
    cells = []
    for side in Direction:
        for position in range(POSITIONS_PER_SIDE):
            row, col = _grid_position(side, position)
            cells.append(
                SwitchCell(
                    number=switch_number(panel, side, position),
                    side=side,
                    position=position,
                    row=row,
                    col=col,
                )
            )
    return PanelLayout(panel, tuple(cells))
