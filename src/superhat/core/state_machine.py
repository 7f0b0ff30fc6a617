"""Gesture state machine: hat presses in, panel and switch actions out."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from threading import Lock
from typing import NamedTuple

from superhat.core import gestures
from superhat.core.mapper import DirectionMapper
from superhat.core.modes import (
    AwaitingSide,
    AwaitingSwitch,
    Invalid,
    Mode,
    Rebinding,
    SwitchActive,
)
from superhat.exceptions import ErrorContext
from superhat.model_manager import ObserverManager
from superhat.models import Binding, BindingTable, Direction, Panel
from superhat.protocols import (
    Action,
    ActionObserver,
    BindingCaptured,
    BindingStore,
    ButtonDown,
    ButtonKind,
    ButtonUp,
    CancelRebinding,
    DuplicateBinding,
    LongPress,
    MachineEvent,
    ModeObserver,
    PanelSelected,
    RawInputEvent,
    RebindCapture,
    RebindingCancelled,
    RebindingCompleted,
    RebindingStarted,
    SequenceInvalid,
    SequenceTimedOut,
    StartRebinding,
    SwitchActivated,
    SwitchReleased,
    Tick,
)

logger = logging.getLogger(__name__)

DEFAULT_LONG_PRESS_THRESHOLD = 0.5
DEFAULT_SEQUENCE_TIMEOUT = 1.5


@dataclass
class HeldButton:
    """Bookkeeping for one mapped button that is currently down."""

    direction: Direction
    press_time: float
    long_press_fired: bool = False


class _Step(NamedTuple):
    """Result of applying one event: the new mode (None if unchanged) and its actions."""

    mode: Mode | None
    actions: list[Action]


class GestureStateMachine:
    """
    Turns classified hat input into panel selections and switch activations.

    The machine owns the current mode, the per-button hold records and the
    binding table it was given. It never raises on input: every combination
    of mode and event not listed in the transition table is a no-op.

    Input arrives in three ways:
    - process_raw(): raw button edges, classified through the DirectionMapper
    - poll(): periodic long-press scan and timeout check
    - handle(): a machine event or UI command, applied directly

    Threading:
        Meant to be driven from a single loop thread (see InputLoop). A lock
        still guards the state so UIs may read `mode` from elsewhere. Observers
        are notified after the lock is released.
    """

    def __init__(
        self,
        bindings: BindingTable,
        binding_store: BindingStore | None = None,
        initial_panel: Panel = Panel.A,
        default_panel: Panel = Panel.A,
        long_press_threshold: float = DEFAULT_LONG_PRESS_THRESHOLD,
        sequence_timeout: float = DEFAULT_SEQUENCE_TIMEOUT,
        reject_duplicate_bindings: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the state machine.

        Args:
            bindings: Binding table. Rebinding mutates this object in place.
            binding_store: Where completed bindings are persisted (None = memory only)
            initial_panel: Panel selected at startup
            default_panel: Panel selected after rebinding
            long_press_threshold: Hold duration that counts as a long press (seconds)
            sequence_timeout: Inactivity that abandons a switch selection (seconds)
            reject_duplicate_bindings: Refuse to capture a button already captured
                for an earlier direction in the same rebinding
            clock: Monotonic time source in seconds
        """
        self._lock = Lock()
        self._bindings = bindings
        self._mapper = DirectionMapper(bindings)
        self._binding_store = binding_store
        self._default_panel = default_panel
        self._long_press_threshold = long_press_threshold
        self._sequence_timeout = sequence_timeout
        self._reject_duplicates = reject_duplicate_bindings
        self._clock = clock

        self._held: dict[tuple[int, int], HeldButton] = {}
        self._long_press_latched = False
        self._rebind_snapshot: BindingTable | None = None

        if bindings.is_complete:
            self._mode: Mode = AwaitingSide(initial_panel)
        else:
            logger.info("Binding table incomplete, starting in rebinding mode")
            self._mode = Rebinding(Direction.UP)

        self._mode_observers = ObserverManager[ModeObserver](observer_type_name="mode")
        self._action_observers = ObserverManager[ActionObserver](observer_type_name="action")

        # Per-mode dispatch table over the event type
        self._transitions: dict[type, dict[type, Callable[..., _Step | None]]] = {
            AwaitingSide: {
                LongPress: self._select_panel,
                ButtonUp: self._select_side,
                StartRebinding: self._start_rebinding,
            },
            AwaitingSwitch: {
                ButtonDown: self._add_tap,
                Tick: self._check_timeout,
                StartRebinding: self._start_rebinding,
            },
            SwitchActive: {
                ButtonUp: self._release_switch,
                StartRebinding: self._start_rebinding,
            },
            Invalid: {
                ButtonUp: self._clear_invalid,
                StartRebinding: self._start_rebinding,
            },
            Rebinding: {
                RebindCapture: self._capture_binding,
                CancelRebinding: self._cancel_rebinding,
            },
        }

    # =================================================================
    # Observers
    # =================================================================

    def register_mode_observer(self, observer: ModeObserver) -> None:
        self._mode_observers.register(observer)

    def unregister_mode_observer(self, observer: ModeObserver) -> None:
        self._mode_observers.unregister(observer)

    def register_action_observer(self, observer: ActionObserver) -> None:
        self._action_observers.register(observer)

    def unregister_action_observer(self, observer: ActionObserver) -> None:
        self._action_observers.unregister(observer)

    # =================================================================
    # State access
    # =================================================================

    @property
    def mode(self) -> Mode:
        with self._lock:
            return self._mode

    @property
    def bindings(self) -> BindingTable:
        return self._bindings

    @property
    def mapper(self) -> DirectionMapper:
        return self._mapper

    @property
    def held_buttons(self) -> dict[tuple[int, int], HeldButton]:
        """Snapshot of the hold records, keyed by (device_id, button_id)."""
        with self._lock:
            return {
                key: HeldButton(held.direction, held.press_time, held.long_press_fired)
                for key, held in self._held.items()
            }

    @property
    def is_rebinding(self) -> bool:
        return isinstance(self.mode, Rebinding)

    # =================================================================
    # Input
    # =================================================================

    def process_raw(self, raw: RawInputEvent) -> None:
        """
        Feed one raw button edge.

        While rebinding, every Down becomes a RebindCapture and Ups are
        dropped. Otherwise the edge is classified; unmapped buttons, repeated
        Downs and Ups with no hold record are dropped.
        """
        with self._lock:
            event = self._translate(raw)
            step = self._apply(event) if event is not None else None
        if step is not None:
            self._publish([step])

    def poll(self, now: float | None = None) -> None:
        """
        Fire due long presses, then check the sequence timeout.

        Each continuous hold fires at most one LongPress. Call this at least
        every half long-press threshold.

        Args:
            now: Current time in seconds (defaults to the machine's clock)
        """
        if now is None:
            now = self._clock()

        steps: list[_Step] = []
        with self._lock:
            for held in self._held.values():
                if held.long_press_fired or now - held.press_time < self._long_press_threshold:
                    continue
                held.long_press_fired = True
                self._long_press_latched = True
                logger.debug(f"Long press: {held.direction.name}")
                step = self._apply(LongPress(held.direction))
                if step is not None:
                    steps.append(step)

            step = self._apply(Tick(now))
            if step is not None:
                steps.append(step)

        self._publish(steps)

    def handle(self, event: MachineEvent) -> None:
        """Apply a machine event or UI command directly."""
        with self._lock:
            step = self._apply(event)
        if step is not None:
            self._publish([step])

    def start_rebinding(self) -> None:
        self.handle(StartRebinding())

    def cancel_rebinding(self) -> None:
        self.handle(CancelRebinding())

    # =================================================================
    # Internals (called with the lock held)
    # =================================================================

    def _translate(self, raw: RawInputEvent) -> MachineEvent | None:
        """Turn a raw edge into a machine event, updating the hold records."""
        if isinstance(self._mode, Rebinding):
            if raw.kind is ButtonKind.DOWN:
                return RebindCapture(raw.device_id, raw.button_id)
            return None

        if raw.kind is ButtonKind.DOWN:
            direction = self._mapper.classify(raw.device_id, raw.button_id)
            if direction is None:
                logger.debug(f"Unmapped input: device {raw.device_id} / button {raw.button_id}")
                return None
            if raw.key in self._held:
                return None
            self._held[raw.key] = HeldButton(direction, raw.timestamp)
            return ButtonDown(direction)

        held = self._held.pop(raw.key, None)
        if held is None:
            return None
        was_long_press = held.long_press_fired or self._long_press_latched
        if not self._held:
            self._long_press_latched = False
        return ButtonUp(held.direction, was_long_press)

    def _apply(self, event: MachineEvent) -> _Step | None:
        handler = self._transitions[type(self._mode)].get(type(event))
        if handler is None:
            return None

        step = handler(self._mode, event)
        if step is None:
            return None

        if step.mode is not None:
            if step.mode == self._mode:
                step = _Step(None, step.actions)
            else:
                logger.debug(f"Mode: {self._mode} -> {step.mode}")
                self._mode = step.mode
        return step

    def _select_panel(self, mode: AwaitingSide, event: LongPress) -> _Step | None:
        panel = Panel.for_direction(event.direction)
        if panel is None:
            return None
        logger.info(f"Panel selected: {panel.display_name}")
        return _Step(AwaitingSide(panel), [PanelSelected(panel)])

    def _select_side(self, mode: AwaitingSide, event: ButtonUp) -> _Step | None:
        if event.was_long_press:
            return None
        return _Step(AwaitingSwitch(mode.panel, event.direction, (), self._clock()), [])

    def _add_tap(self, mode: AwaitingSwitch, event: ButtonDown) -> _Step:
        buffer = (*mode.buffer, event.direction)
        position = gestures.resolve(mode.side, buffer)
        if position is not None:
            number = gestures.switch_number(mode.panel, mode.side, position)
            logger.info(f"Switch {number} activated")
            return _Step(SwitchActive(mode.panel, number), [SwitchActivated(number)])

        if not gestures.could_extend(mode.side, buffer):
            logger.debug(f"Invalid sequence on side {mode.side.name}: {[d.name for d in buffer]}")
            return _Step(Invalid(mode.panel), [SequenceInvalid()])

        return _Step(AwaitingSwitch(mode.panel, mode.side, buffer, self._clock()), [])

    def _check_timeout(self, mode: AwaitingSwitch, event: Tick) -> _Step | None:
        if event.now - mode.last_input_time <= self._sequence_timeout:
            return None
        logger.debug("Switch selection timed out")
        return _Step(AwaitingSide(mode.panel), [SequenceTimedOut()])

    def _release_switch(self, mode: SwitchActive, event: ButtonUp) -> _Step:
        logger.info(f"Switch {mode.switch_number} released")
        return _Step(AwaitingSide(mode.panel), [SwitchReleased(mode.switch_number)])

    def _clear_invalid(self, mode: Invalid, event: ButtonUp) -> _Step:
        return _Step(AwaitingSide(mode.panel), [])

    def _start_rebinding(self, mode: Mode, event: StartRebinding) -> _Step:
        actions: list[Action] = []
        if isinstance(mode, SwitchActive):
            actions.append(SwitchReleased(mode.switch_number))
        actions.append(RebindingStarted())

        self._rebind_snapshot = self._bindings.model_copy(deep=True)
        self._held.clear()
        self._long_press_latched = False
        logger.info("Rebinding started")
        return _Step(Rebinding(Direction.UP), actions)

    def _capture_binding(self, mode: Rebinding, event: RebindCapture) -> _Step | None:
        direction = mode.next_direction
        binding = Binding(device_id=event.device_id, button_id=event.button_id)
        if not binding.is_bound:
            return None

        if self._reject_duplicates:
            order = list(Direction)
            for earlier in order[: order.index(direction)]:
                if self._bindings.get(earlier) == binding:
                    logger.info(f"{binding} is already bound to {earlier.name}, refusing it")
                    return _Step(None, [DuplicateBinding(direction, binding, earlier)])

        self._bindings.bind(direction, binding)
        logger.info(f"Bound {direction.name} to {binding}")
        actions: list[Action] = [BindingCaptured(direction, binding)]

        next_direction = direction.next_in_binding_order()
        if next_direction is not None:
            return _Step(Rebinding(next_direction), actions)

        self._rebind_snapshot = None
        actions.append(RebindingCompleted(self._bindings.model_copy(deep=True)))
        logger.info("Rebinding completed")
        return _Step(AwaitingSide(self._default_panel), actions)

    def _cancel_rebinding(self, mode: Rebinding, event: CancelRebinding) -> _Step | None:
        snapshot = self._rebind_snapshot
        if snapshot is None or not snapshot.is_complete:
            logger.info("No complete binding table to return to, staying in rebinding mode")
            return None

        for direction, binding in snapshot.items():
            self._bindings.bind(direction, binding)
        self._rebind_snapshot = None
        logger.info("Rebinding cancelled, previous bindings restored")
        return _Step(AwaitingSide(self._default_panel), [RebindingCancelled()])

    # =================================================================
    # Output (called without the lock)
    # =================================================================

    def _publish(self, steps: list[_Step]) -> None:
        for step in steps:
            for action in step.actions:
                if isinstance(action, RebindingCompleted):
                    action = replace(action, saved=self._persist_bindings(action.bindings))
                self._action_observers.notify("on_action", action)
            if step.mode is not None:
                self._mode_observers.notify("on_mode_changed", step.mode)

    def _persist_bindings(self, bindings: BindingTable) -> bool:
        if self._binding_store is None:
            return False
        with ErrorContext("persist bindings", logger, re_raise=False) as ctx:
            self._binding_store.save(bindings)
        if ctx.error is not None:
            return False
        logger.info("Bindings saved")
        return True
