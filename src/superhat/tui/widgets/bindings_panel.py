"""Side panel listing the hat bindings and guiding rebinding."""

from textual.widgets import Static

from superhat.models import BindingTable, Direction


class BindingsPanel(Static):
    """
    Shows which raw button drives each direction.

    While rebinding, the direction waiting for a button is highlighted and
    a prompt explains what to press.
    """

    DEFAULT_CSS = """
    BindingsPanel {
        width: 32;
        height: 100%;
        border: round $surface;
        padding: 0 1;
    }

    BindingsPanel.rebinding {
        border: round $warning;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._bindings = BindingTable.unbound()
        self._waiting_for: Direction | None = None
        self._message = ""
        self._render_table()

    def update_bindings(
        self,
        bindings: BindingTable,
        waiting_for: Direction | None = None,
        message: str = "",
    ) -> None:
        """
        Args:
            bindings: Table to display
            waiting_for: Direction being captured, or None when not rebinding
            message: Extra line shown under the table (e.g. a refused duplicate)
        """
        self._bindings = bindings
        self._waiting_for = waiting_for
        self._message = message
        self.set_class(waiting_for is not None, "rebinding")
        self._render_table()

    def _render_table(self) -> None:
        lines = ["[b]Hat bindings[/b]", ""]
        for direction, binding in self._bindings.items():
            text = f"{direction.symbol} {direction.name:<5} {binding}"
            if direction is self._waiting_for:
                text = f"[reverse]{text}[/reverse]"
            lines.append(text)

        lines.append("")
        if self._waiting_for is not None:
            lines.append(f"Press the hat [b]{self._waiting_for.name}[/b]")
            lines.append("[dim]Esc to cancel[/dim]")
        else:
            lines.append("[dim]R to rebind[/dim]")
        if self._message:
            lines.append(self._message)
        self.update("\n".join(lines))
