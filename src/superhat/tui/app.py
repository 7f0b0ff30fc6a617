"""Textual TUI showing both panels, the hat bindings and the gesture in progress."""

import logging
from typing import TYPE_CHECKING, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header

from superhat.exceptions import handle_errors
from superhat.models import Panel

from .services import TUIService
from .widgets import BindingsPanel, PanelWidget, StatusBar

if TYPE_CHECKING:
    from superhat.orchestration import Orchestrator

logger = logging.getLogger(__name__)


class SuperhatApp(App):
    """
    Textual TUI for superhat.

    A pure UI layer: the orchestrator owns the state machine and every
    service. Keys only send commands (rebind, cancel, sound) and the hat
    itself drives everything else.

    Implements UIAdapter via structural subtyping (no explicit inheritance
    to avoid metaclass conflicts between App and Protocol).
    """

    TITLE = "superhat"
    SUB_TITLE = "40 switches on one hat"

    BINDINGS = [
        Binding("r", "rebind", "Rebind hat", show=True),
        Binding("escape", "cancel_rebind", "Cancel rebind", show=True),
        Binding("s", "toggle_sound", "Click on/off", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(self, orchestrator: "Orchestrator"):
        """
        Args:
            orchestrator: The orchestrator (not yet initialized). It is
                initialized from on_mount once the widgets exist.
        """
        super().__init__()
        self.orchestrator = orchestrator
        self.tui_service: Optional[TUIService] = None
        self._initialized = False
        self._startup_error: Optional[Exception] = None
        logger.info("superhat TUI created")

    # =================================================================
    # UIAdapter Protocol Implementation
    # =================================================================

    def initialize(self) -> None:
        """Create the TUI service. The orchestrator connects it as an observer."""
        if self._initialized:
            logger.warning("TUI already initialized")
            return
        self.tui_service = TUIService(self)
        self._initialized = True

    def run(self) -> None:
        """
        Run the Textual TUI (blocks until app exits).

        Raises:
            SuperhatError: If the orchestrator failed to start (e.g. no input backend)
        """
        if not self._initialized:
            raise RuntimeError("TUI must be initialized before running")

        logger.info("Starting Textual TUI")
        super().run()

        # Re-raised after Textual has restored the terminal
        if self._startup_error:
            raise self._startup_error

    def register_with_services(self, orchestrator: "Orchestrator") -> None:
        """
        Connect the TUI service to the state machine and the input source.

        Called by orchestrator.initialize() before any input is read.
        """
        if not self.tui_service:
            raise RuntimeError("TUI service not initialized - call initialize() first")
        orchestrator.register_mode_observer(self.tui_service)
        orchestrator.register_action_observer(self.tui_service)
        orchestrator.register_device_observer(self.tui_service)

    def shutdown(self) -> None:
        logger.info("Shutting down TUI")
        if self.tui_service:
            self.orchestrator.unregister_observer(self.tui_service)

    # =================================================================
    # Textual Lifecycle
    # =================================================================

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal():
            yield PanelWidget(Panel.A)
            yield PanelWidget(Panel.B)
            yield BindingsPanel()

        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        """
        Initialize the orchestrator now that the widgets exist.

        Startup errors are kept and re-raised from run() after Textual
        exits, so the CLI can print them with their recovery hint.
        """
        if not self._initialized or not self.tui_service:
            raise RuntimeError("TUI must be initialized via UIAdapter.initialize() before mounting")

        logger.info("Initializing orchestrator from TUI on_mount")
        try:
            self.orchestrator.initialize()
        except Exception as e:
            logger.error(f"Failed to initialize orchestrator: {e}")
            self._startup_error = e
            self.exit(1)
            return

        self.sub_title = f"{self.orchestrator.backend.value} input"
        if self.orchestrator.mode is not None:
            self.tui_service.show_mode(self.orchestrator.mode)

    # =================================================================
    # Actions
    # =================================================================

    def action_rebind(self) -> None:
        """Start capturing new hat bindings (Up, Right, Down, Left)."""
        self.orchestrator.start_rebinding()

    def action_cancel_rebind(self) -> None:
        """Abandon rebinding and keep the previous bindings."""
        if self.orchestrator.state_machine and self.orchestrator.state_machine.is_rebinding:
            self.orchestrator.cancel_rebinding()

    @handle_errors(operation_name="toggle sound", re_raise=False)
    def action_toggle_sound(self) -> None:
        enabled = self.orchestrator.toggle_sound()
        self.notify(f"Panel click {'on' if enabled else 'off'}")
        if self.tui_service:
            self.tui_service.refresh_status()
