"""Widget representing a single switch on a panel bezel."""

from textual.widgets import Static

from superhat.ui_shared import ACTIVE_CLASS, CANDIDATE_CLASS, SIDE_CLASS, SwitchCell


class SwitchWidget(Static):
    """
    One switch (presentation only).

    Shows the switch number and the taps that reach it. The panel widget
    toggles CSS classes as the gesture progresses.
    """

    DEFAULT_CSS = f"""
    SwitchWidget {{
        width: 100%;
        height: 100%;
        border: solid $surface;
        content-align: center middle;
    }}

    SwitchWidget.{SIDE_CLASS} {{
        border: solid $accent 60%;
    }}

    SwitchWidget.{CANDIDATE_CLASS} {{
        border: double $warning 80%;
    }}

    SwitchWidget.{ACTIVE_CLASS} {{
        background: $success 60%;
        border: solid $success;
    }}
    """

    def __init__(self, cell: SwitchCell) -> None:
        super().__init__(f"[b]{cell.number}[/b]\n[dim]{cell.gesture_text}[/dim]")
        self.cell = cell

    def set_state(self, side: bool = False, candidate: bool = False, active: bool = False) -> None:
        self.set_class(side, SIDE_CLASS)
        self.set_class(candidate, CANDIDATE_CLASS)
        self.set_class(active, ACTIVE_CLASS)
