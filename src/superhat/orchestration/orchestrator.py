"""
Application orchestrator for coordinating services and UIs.

The orchestrator wires the config service, the gesture state machine, the
input loop, the input backend, the actuator and the feedback sink, and
manages the lifecycle of the registered UIs. It runs the same way with the
Textual TUI or with the headless console UI.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from superhat.core import GestureStateMachine, InputLoop, Mode
from superhat.exceptions import ErrorContext
from superhat.input import InputSource, create_input_source
from superhat.model_manager import ModelManagerService
from superhat.models import DEFAULT_CONFIG_PATH, AppConfig, InputBackend
from superhat.output import ActuatorDispatcher, ClickFeedback, KeyboardActuator, RecordingActuator
from superhat.protocols import (
    ActionObserver,
    CancelRebinding,
    DeviceObserver,
    ModeObserver,
    StartRebinding,
    SwitchActuator,
    SwitchReleased,
)
from superhat.services import ConfigBindingStore, PanelPersistence
from superhat.ui_shared import UIAdapter

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Top-level coordinator for superhat.

    Architecture:
        Orchestrator (this class)
        ├── config_service: ModelManagerService[AppConfig]
        ├── state_machine: GestureStateMachine (owned by the input loop thread)
        ├── input_loop: InputLoop, fed by input_source
        ├── action observers: ActuatorDispatcher, ClickFeedback, PanelPersistence
        └── UIs: TUI or console, observing modes, actions and devices

    Lifecycle:
        register_ui() -> run() -> (UI calls initialize()) -> shutdown()
    """

    def __init__(
        self,
        config: AppConfig,
        config_path: Optional[Path] = DEFAULT_CONFIG_PATH,
        backend: Optional[InputBackend] = None,
        headless: bool = False,
        rebind: bool = False,
        dry_run: bool = False,
        input_source: Optional[InputSource] = None,
        actuator: Optional[SwitchActuator] = None,
        feedback: Optional[ClickFeedback] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Application configuration
            config_path: Where config changes are saved (None = never save)
            backend: Input backend (defaults to config.input_backend)
            headless: True when running without the TUI
            rebind: Start by capturing new bindings even if the table is complete
            dry_run: Log switch activations instead of pressing keys
            input_source: Input source to use instead of creating one for the backend
            actuator: Actuator to use instead of the keyboard
            feedback: Feedback sink to use instead of the configured click sounds
            clock: Time source shared by the state machine and the input source
        """
        self.config = config
        self.config_path = config_path
        self.backend = backend or config.input_backend
        self.headless = headless
        self._rebind = rebind
        self._dry_run = dry_run
        self._clock = clock

        self._input_source = input_source
        self._actuator = actuator
        self.feedback = feedback

        self.config_service: Optional[ModelManagerService[AppConfig]] = None
        self.state_machine: Optional[GestureStateMachine] = None
        self.input_loop: Optional[InputLoop] = None
        self.dispatcher: Optional[ActuatorDispatcher] = None

        self._uis: list[UIAdapter] = []
        self._initialized = False

    # =================================================================
    # UI lifecycle
    # =================================================================

    def register_ui(self, ui: UIAdapter) -> None:
        """
        Register a UI implementation.

        Call this before run(). A UI with a register_with_services(orchestrator)
        method is called back during initialize() to connect its observers.
        """
        if ui not in self._uis:
            self._uis.append(ui)
            logger.info(f"Registered UI: {ui.__class__.__name__}")

    def run(self) -> None:
        """
        Initialize and run all registered UIs.

        The blocking UI (TUI or console) calls initialize() once it is ready
        to receive events, and returns when the user quits.
        """
        if not self._uis:
            logger.warning("No UIs registered")
            return

        for ui in self._uis:
            logger.info(f"Initializing UI: {ui.__class__.__name__}")
            ui.initialize()

        for ui in self._uis:
            logger.info(f"Running UI: {ui.__class__.__name__}")
            ui.run()

    def initialize(self) -> None:
        """
        Build the services, connect observers and start reading input.

        Observers only hear about changes, so a UI shows the starting mode by
        reading `mode` once this returns.

        Raises:
            InputBackendUnavailableError: If the input backend cannot be opened.
                Call shutdown() to stop what was already started.
        """
        if self._initialized:
            return
        logger.info("Initializing Orchestrator services")

        self.config_service = ModelManagerService[AppConfig](
            AppConfig, self.config, default_path=self.config_path
        )
        binding_store = ConfigBindingStore(self.config_service)

        self.state_machine = GestureStateMachine(
            bindings=binding_store.load(),
            binding_store=binding_store,
            initial_panel=self.config.selected_panel,
            long_press_threshold=self.config.long_press_threshold,
            sequence_timeout=self.config.sequence_timeout,
            reject_duplicate_bindings=self.config.reject_duplicate_bindings,
            clock=self._clock,
        )

        if self._actuator is None:
            self._actuator = (
                RecordingActuator() if self._dry_run else KeyboardActuator(self.config.key_combos)
            )
        self.dispatcher = ActuatorDispatcher(self._actuator)

        if self.feedback is None:
            self.feedback = ClickFeedback(
                enabled=self.config.sound_enabled,
                volume=self.config.click_sounds.volume,
                left_path=self.config.click_sounds.left,
                right_path=self.config.click_sounds.right,
            )

        # Actuator first so keys are pressed before anything else reacts
        self.state_machine.register_action_observer(self.dispatcher)
        self.state_machine.register_action_observer(self.feedback)
        self.state_machine.register_action_observer(PanelPersistence(self.config_service))

        if self._input_source is None:
            self._input_source = create_input_source(
                self.backend, self.config.midi_port_filter, clock=self._clock
            )

        # UIs connect their observers before any event is produced
        for ui in self._uis:
            if hasattr(ui, "register_with_services"):
                ui.register_with_services(self)

        # Queued through the loop so UIs receive it on the loop thread like any other change
        self.input_loop = InputLoop(self.state_machine, poll_interval=self.config.poll_interval)
        if self._rebind and not self.state_machine.is_rebinding:
            self.input_loop.submit_command(StartRebinding())

        self.input_loop.start()
        self._initialized = True

        self._start_input()
        logger.info("Orchestrator initialized successfully")

    def _start_input(self) -> None:
        self._input_source.on_event(self.input_loop.submit_raw)
        try:
            self._input_source.start()
        except Exception:
            logger.exception(f"Failed to start {self.backend.value} input")
            raise
        logger.info(f"{self.backend.value} input started")

    def shutdown(self) -> None:
        """Stop input, release any held switch and shut the UIs down."""
        logger.info("Shutting down Orchestrator")

        for ui in self._uis:
            logger.info(f"Shutting down UI: {ui.__class__.__name__}")
            with ErrorContext(f"shut down UI {ui.__class__.__name__}", logger, re_raise=False):
                ui.shutdown()

        if self._input_source is not None:
            with ErrorContext("stop input source", logger, re_raise=False):
                self._input_source.stop()

        if self.input_loop is not None:
            self.input_loop.stop()

        # Never leave a key combination held down
        if self.dispatcher is not None and self.dispatcher.active_switch is not None:
            with ErrorContext("release active switch", logger, re_raise=False):
                self.dispatcher.on_action(SwitchReleased(self.dispatcher.active_switch))

        if self.feedback is not None:
            self.feedback.close()

        self._initialized = False

    # =================================================================
    # Observer registration for the UIs
    # =================================================================

    def register_mode_observer(self, observer: ModeObserver) -> None:
        self.state_machine.register_mode_observer(observer)

    def register_action_observer(self, observer: ActionObserver) -> None:
        self.state_machine.register_action_observer(observer)

    def register_device_observer(self, observer: DeviceObserver) -> None:
        self._input_source.register_device_observer(observer)

    def unregister_observer(self, observer: ModeObserver | ActionObserver | DeviceObserver) -> None:
        """Disconnect an observer from everything it was registered with."""
        if self.state_machine is not None:
            if isinstance(observer, ModeObserver):
                self.state_machine.unregister_mode_observer(observer)
            if isinstance(observer, ActionObserver):
                self.state_machine.unregister_action_observer(observer)
        if self._input_source is not None and isinstance(observer, DeviceObserver):
            self._input_source.unregister_device_observer(observer)

    # =================================================================
    # Commands from the UIs
    # =================================================================

    @property
    def mode(self) -> Optional[Mode]:
        return self.state_machine.mode if self.state_machine else None

    @property
    def connected_devices(self) -> list[str]:
        return self._input_source.connected_devices if self._input_source else []

    def start_rebinding(self) -> None:
        """Ask the input loop to start capturing new bindings."""
        if self.input_loop is not None:
            self.input_loop.submit_command(StartRebinding())

    def cancel_rebinding(self) -> None:
        """Ask the input loop to abandon rebinding and restore the previous bindings."""
        if self.input_loop is not None:
            self.input_loop.submit_command(CancelRebinding())

    def toggle_sound(self) -> bool:
        """
        Toggle the panel click and remember the choice.

        Returns:
            True if sound is now enabled
        """
        enabled = not (self.feedback.enabled if self.feedback else self.config.sound_enabled)
        if self.feedback is not None:
            self.feedback.enabled = enabled

        if self.config_service is not None:
            with ErrorContext("save sound setting", logger, re_raise=False):
                self.config_service.set("sound_enabled", enabled)
                if self.config_path is not None:
                    self.config_service.save()
        return enabled
