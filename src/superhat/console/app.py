"""Headless UI: prints what the hat is doing to the terminal."""

import logging
import threading
from typing import TYPE_CHECKING, Optional

import click

from superhat.core import Mode, describe
from superhat.protocols import (
    Action,
    BindingCaptured,
    DeviceEvent,
    DuplicateBinding,
    PanelSelected,
    RebindingCancelled,
    RebindingCompleted,
    RebindingStarted,
    SequenceInvalid,
    SequenceTimedOut,
    SwitchActivated,
    SwitchReleased,
)

if TYPE_CHECKING:
    from superhat.orchestration import Orchestrator

logger = logging.getLogger(__name__)


class ConsoleUI:
    """
    UIAdapter for running without the TUI (``superhat --headless``).

    run() initializes the orchestrator and blocks until Ctrl+C or stop().
    Every action is printed on its own line. Mode changes, including
    tap-by-tap progress, are only printed with ``verbose``.
    """

    def __init__(self, orchestrator: "Orchestrator", verbose: bool = False):
        self.orchestrator = orchestrator
        self.verbose = verbose
        self._stop = threading.Event()

    # =================================================================
    # UIAdapter Protocol Implementation
    # =================================================================

    def initialize(self) -> None:
        self._stop.clear()

    def register_with_services(self, orchestrator: "Orchestrator") -> None:
        orchestrator.register_mode_observer(self)
        orchestrator.register_action_observer(self)
        orchestrator.register_device_observer(self)

    def run(self) -> None:
        """
        Start the orchestrator and wait.

        Raises:
            SuperhatError: If the orchestrator failed to start
            KeyboardInterrupt: On Ctrl+C
        """
        self.orchestrator.initialize()
        click.echo(f"superhat running with {self.orchestrator.backend.value} input. Ctrl+C to quit.")
        if self.orchestrator.mode is not None:
            click.echo(describe(self.orchestrator.mode))

        while not self._stop.wait(0.5):
            pass

    def stop(self) -> None:
        self._stop.set()

    def shutdown(self) -> None:
        self._stop.set()
        self.orchestrator.unregister_observer(self)

    # =================================================================
    # Observer Protocols
    # =================================================================

    def on_mode_changed(self, mode: Mode) -> None:
        if self.verbose:
            click.echo(f"  {describe(mode)}")

    def on_action(self, action: Action) -> None:
        message = self._format_action(action)
        if message:
            click.echo(message)

    def on_device_event(self, event: DeviceEvent, device_name: str) -> None:
        if event is DeviceEvent.CONNECTED:
            click.secho(f"Connected: {device_name}", fg="green")
        else:
            click.secho(f"Disconnected: {device_name}", fg="yellow")

    @staticmethod
    def _format_action(action: Action) -> Optional[str]:
        if isinstance(action, PanelSelected):
            return click.style(f"Panel: {action.panel.display_name}", bold=True)
        if isinstance(action, SwitchActivated):
            return click.style(f"Switch {action.switch_number} pressed", fg="green")
        if isinstance(action, SwitchReleased):
            return f"Switch {action.switch_number} released"
        if isinstance(action, SequenceInvalid):
            return click.style("Invalid sequence", fg="red")
        if isinstance(action, SequenceTimedOut):
            return click.style("Selection timed out", fg="yellow")
        if isinstance(action, RebindingStarted):
            return click.style("Rebinding: press the hat Up, Right, Down, then Left", fg="cyan")
        if isinstance(action, BindingCaptured):
            return f"  {action.direction.name} -> {action.binding}"
        if isinstance(action, DuplicateBinding):
            return click.style(
                f"  {action.binding} is already {action.existing.name}, press another button",
                fg="yellow",
            )
        if isinstance(action, RebindingCompleted):
            if action.saved:
                return click.style("Bindings saved", fg="green")
            return click.style("Bindings kept in memory, save failed (see log)", fg="red")
        if isinstance(action, RebindingCancelled):
            return "Rebinding cancelled, previous bindings kept"
        return None
