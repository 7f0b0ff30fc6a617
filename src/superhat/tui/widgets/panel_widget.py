"""Bezel of 20 switches around one panel."""

from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static

from superhat.core import AwaitingSide, AwaitingSwitch, Invalid, Mode, SwitchActive, gesture_for
from superhat.models import Panel
from superhat.ui_shared import GRID_SIZE, panel_layout

from .switch_widget import SwitchWidget


class PanelWidget(Container):
    """
    7x7 grid with five switches per side and the panel name in the centre.

    The widget is stateless: show_mode() recomputes every highlight from
    the mode it is given.
    """

    DEFAULT_CSS = f"""
    PanelWidget {{
        layout: grid;
        grid-size: {GRID_SIZE} {GRID_SIZE};
        grid-gutter: 0;
        padding: 1;
        border: round $surface;
        width: 1fr;
        height: 100%;
    }}

    PanelWidget.selected {{
        border: round $success;
    }}

    PanelWidget .panel-name {{
        column-span: {GRID_SIZE - 2};
        row-span: {GRID_SIZE - 2};
        content-align: center middle;
        width: 100%;
        height: 100%;
    }}
    """

    def __init__(self, panel: Panel) -> None:
        super().__init__(id=f"panel-{panel.value}")
        self.panel = panel
        self.layout_model = panel_layout(panel)
        self.switch_widgets: dict[int, SwitchWidget] = {}
        self._name_label = Static(self._name_text(), classes="panel-name")

    def compose(self) -> ComposeResult:
        # Grid cells fill row by row; the centre label spans the inner square
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                cell = self.layout_model.cell_at(row, col)
                if cell is not None:
                    widget = SwitchWidget(cell)
                    self.switch_widgets[cell.number] = widget
                    yield widget
                elif row == 1 and col == 1:
                    yield self._name_label
                elif row in (0, GRID_SIZE - 1):
                    yield Static("")

    def _name_text(self, status: str = "") -> str:
        return f"[b]{self.panel.display_name}[/b]\n{status}"

    def show_mode(self, mode: Mode) -> None:
        """Highlight the panel and its switches for a state machine mode."""
        selected = isinstance(mode, (AwaitingSide, AwaitingSwitch, SwitchActive, Invalid)) and (
            mode.panel is self.panel
        )
        self.set_class(selected, "selected")

        status = ""
        for number, widget in self.switch_widgets.items():
            cell = widget.cell
            side = candidate = active = False
            if selected and isinstance(mode, AwaitingSwitch) and cell.side is mode.side:
                side = True
                taps = gesture_for(cell.side, cell.position)
                candidate = taps[: len(mode.buffer)] == mode.buffer
            elif selected and isinstance(mode, SwitchActive):
                active = number == mode.switch_number
            widget.set_state(side=side, candidate=candidate, active=active)

        if selected and isinstance(mode, AwaitingSwitch):
            status = f"side {mode.side.symbol}"
        elif selected and isinstance(mode, SwitchActive):
            status = f"switch {mode.switch_number}"
        elif selected and isinstance(mode, Invalid):
            status = "[red]invalid[/red]"
        self._name_label.update(self._name_text(status))
