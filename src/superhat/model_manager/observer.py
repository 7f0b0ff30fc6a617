"""Thread-safe observer list shared by the services and the state machine."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=object)


class ObserverManager(Generic[T]):
    """
    Observer list with thread-safe registration and failure-isolated notification.

    Type Parameters:
        T: The observer protocol type (e.g., ModeObserver, ActionObserver)

    Thread Safety:
        Registration may happen from any thread. The lock is only held while
        the observer list is copied, never while callbacks run, so an observer
        may register or unregister from inside its own callback.

    Example:
        ```python
        self._mode_observers = ObserverManager[ModeObserver](observer_type_name="mode")
        self._mode_observers.register(tui)
        self._mode_observers.notify("on_mode_changed", mode)
        ```
    """

    def __init__(self, lock: Lock | None = None, observer_type_name: str = "observer"):
        """
        Initialize the observer manager.

        Args:
            lock: Lock guarding the observer list. A new one is created if None.
            observer_type_name: Label used in log messages (e.g., "mode", "action")
        """
        self._observers: list[T] = []
        self._lock = lock or Lock()
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register an observer. Registering the same observer twice is a no-op."""
        with self._lock:
            if observer in self._observers:
                logger.debug(f"{self._observer_type_name} observer already registered: {observer}")
                return
            self._observers.append(observer)
        logger.info(f"Registered {self._observer_type_name} observer: {observer}")

    def unregister(self, observer: T) -> None:
        """Unregister an observer."""
        with self._lock:
            if observer not in self._observers:
                logger.warning(
                    f"Attempted to unregister unknown {self._observer_type_name} observer: {observer}"
                )
                return
            self._observers.remove(observer)
        logger.debug(f"Unregistered {self._observer_type_name} observer: {observer}")

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``callback_name`` on every registered observer, in registration order.

        Args:
            callback_name: Name of the observer method (e.g., 'on_action')
            *args: Positional arguments for the callback
            **kwargs: Keyword arguments for the callback

        Error Handling:
            A failing observer is logged with its traceback and skipped. The
            remaining observers are still notified and nothing propagates to
            the caller.
        """
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(
                    f"{self._observer_type_name} observer {observer} has no method '{callback_name}'"
                )
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error notifying {self._observer_type_name} observer {observer} "
                    f"via {callback_name}: {e}",
                    exc_info=True,
                )

    def clear(self) -> None:
        """Remove all registered observers."""
        with self._lock:
            count = len(self._observers)
            self._observers.clear()
        if count:
            logger.info(f"Cleared {count} {self._observer_type_name} observer(s)")

    def __contains__(self, observer: T) -> bool:
        with self._lock:
            return observer in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __bool__(self) -> bool:
        with self._lock:
            return bool(self._observers)
