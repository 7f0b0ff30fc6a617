"""Service for keeping the TUI in sync with the state machine."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from textual.css.query import NoMatches

from superhat.core import Mode, Rebinding, SwitchActive, describe
from superhat.protocols import (
    Action,
    BindingCaptured,
    DeviceEvent,
    DuplicateBinding,
    RebindingCancelled,
    RebindingCompleted,
    SequenceInvalid,
    SequenceTimedOut,
)
from superhat.tui.widgets import BindingsPanel, PanelWidget, StatusBar

if TYPE_CHECKING:
    from superhat.tui.app import SuperhatApp

logger = logging.getLogger(__name__)


class TUIService:
    """
    Synchronizes the Terminal UI with the gesture state machine.

    Implements ModeObserver, ActionObserver and DeviceObserver. Every
    callback arrives on the input loop thread (or the backend's thread for
    device events) and is marshalled onto Textual's thread with
    call_from_thread.
    """

    def __init__(self, app: "SuperhatApp"):
        self.app = app
        self._message = ""
        logger.info("TUIService initialized")

    def _call(self, callback: Callable[..., None], *args) -> None:
        # Events can still arrive between Textual exiting and shutdown()
        if not self.app.is_running:
            return
        self.app.call_from_thread(callback, *args)

    # =================================================================
    # ModeObserver Protocol
    # =================================================================

    def on_mode_changed(self, mode: Mode) -> None:
        logger.debug(f"TUIService received mode: {mode}")
        self._call(self.show_mode, mode)

    # =================================================================
    # ActionObserver Protocol
    # =================================================================

    def on_action(self, action: Action) -> None:
        if isinstance(action, DuplicateBinding):
            message = f"{action.binding} is already {action.existing.name}, press another button"
            self._message = f"[yellow]{message}[/yellow]"
            self._call(self._notify, message, "warning")
            self._call(self.refresh_bindings)
        elif isinstance(action, BindingCaptured):
            self._message = ""
        elif isinstance(action, RebindingCompleted):
            if action.saved:
                self._call(self._notify, "Bindings saved", "information")
            else:
                self._call(self._notify, "Bindings kept in memory, save failed", "error")
        elif isinstance(action, RebindingCancelled):
            self._call(self._notify, "Rebinding cancelled, previous bindings kept", "information")
        elif isinstance(action, (SequenceInvalid, SequenceTimedOut)):
            logger.debug(f"Selection abandoned: {type(action).__name__}")

    # =================================================================
    # DeviceObserver Protocol
    # =================================================================

    def on_device_event(self, event: DeviceEvent, device_name: str) -> None:
        if event is DeviceEvent.CONNECTED:
            self._call(self._notify, f"Connected: {device_name}", "information")
        else:
            self._call(self._notify, f"Disconnected: {device_name}", "warning")
        self._call(self.refresh_status)

    # =================================================================
    # UI Update Helpers (Textual thread)
    # =================================================================

    def show_mode(self, mode: Mode) -> None:
        """Update every widget for a mode."""
        try:
            for panel_widget in self.app.query(PanelWidget):
                panel_widget.show_mode(mode)

            self.refresh_bindings(mode)
            self.refresh_status(mode)
        except Exception as e:
            logger.error(f"Error updating TUI for mode {mode}: {e}")

    def refresh_bindings(self, mode: Mode | None = None) -> None:
        state_machine = self.app.orchestrator.state_machine
        if state_machine is None:
            return
        if mode is None:
            mode = state_machine.mode
        waiting_for = mode.next_direction if isinstance(mode, Rebinding) else None
        self.app.query_one(BindingsPanel).update_bindings(
            state_machine.bindings, waiting_for, self._message
        )

    def refresh_status(self, mode: Mode | None = None) -> None:
        orchestrator = self.app.orchestrator
        if mode is None:
            mode = orchestrator.mode
        if mode is None:
            return

        devices = orchestrator.connected_devices
        try:
            self.app.query_one(StatusBar).update_state(
                mode_text=describe(mode),
                backend=orchestrator.backend.value,
                device=devices[0] if devices else None,
                sound=orchestrator.feedback.enabled if orchestrator.feedback else False,
                rebinding=isinstance(mode, Rebinding),
                active=isinstance(mode, SwitchActive),
            )
        except NoMatches:
            # Status bar might not be mounted yet
            pass

    def _notify(self, message: str, severity: str) -> None:
        self.app.notify(message, severity=severity)
