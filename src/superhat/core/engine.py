"""Input loop that feeds the gesture state machine from a single queue."""

import logging
import threading
from queue import Empty, Full, Queue

from superhat.core.state_machine import GestureStateMachine
from superhat.protocols import Command, RawInputEvent

logger = logging.getLogger(__name__)

QUEUE_SIZE = 1024


class InputLoop:
    """
    Drains raw input and UI commands into the state machine, in arrival order.

    Input backends call submit_raw() from their own threads and UIs call
    submit_command(). Only the loop thread touches the state machine. Each
    iteration waits at most ``poll_interval`` for the first item, drains the
    rest without blocking, then lets the machine scan for long presses and
    timeouts.
    """

    def __init__(self, state_machine: GestureStateMachine, poll_interval: float = 0.02):
        """
        Args:
            state_machine: The machine to drive
            poll_interval: Maximum wait for the next item (seconds). Keep it at
                or below half of the long-press threshold.
        """
        self._state_machine = state_machine
        self._poll_interval = poll_interval
        self._queue: Queue[RawInputEvent | Command] = Queue(maxsize=QUEUE_SIZE)
        self._running = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state_machine(self) -> GestureStateMachine:
        return self._state_machine

    @property
    def is_running(self) -> bool:
        return self._running.is_set()

    def submit_raw(self, event: RawInputEvent) -> None:
        """Queue a raw button edge. Safe to call from any thread."""
        self._put(event)

    def submit_command(self, command: Command) -> None:
        """Queue a UI command (start or cancel rebinding). Safe to call from any thread."""
        self._put(command)

    def _put(self, item: RawInputEvent | Command) -> None:
        try:
            self._queue.put_nowait(item)
        except Full:
            logger.warning(f"Input queue full, dropped {item}")

    def run_once(self) -> int:
        """
        Run one loop iteration.

        Returns:
            Number of queued items processed
        """
        items: list[RawInputEvent | Command] = []
        try:
            items.append(self._queue.get(timeout=self._poll_interval))
            while True:
                items.append(self._queue.get_nowait())
        except Empty:
            pass

        for item in items:
            if isinstance(item, RawInputEvent):
                self._state_machine.process_raw(item)
            else:
                self._state_machine.handle(item)

        self._state_machine.poll()
        return len(items)

    def run(self) -> None:
        """Run until stop() is called. Blocks the calling thread."""
        self._running.set()
        logger.info("Input loop started")
        while self._running.is_set():
            try:
                self.run_once()
            except Exception as e:
                # Keep reading input even if one event blew up downstream
                logger.error(f"Error in input loop: {e}", exc_info=True)
        logger.info("Input loop stopped")

    def start(self) -> None:
        """Run the loop on a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Input loop is already running")
            return
        self._running.set()
        self._thread = threading.Thread(target=self.run, name="superhat-input", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        """Stop the loop and wait for the background thread to finish."""
        self._running.clear()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._thread = None
