"""Common base for raw input sources."""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from superhat.model_manager import ObserverManager
from superhat.protocols import ButtonKind, DeviceEvent, DeviceObserver, RawInputEvent

logger = logging.getLogger(__name__)

RawEventCallback = Callable[[RawInputEvent], None]


class InputSource(ABC):
    """
    Produces raw button edges for one input backend.

    Subclasses call _emit() from whatever thread their backend delivers
    events on. The registered callback (normally InputLoop.submit_raw) must
    therefore be thread-safe.

    Identifiers start at 1 so that (0, 0) stays free for the unbound binding.
    """

    name: str = "input"

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._callback: RawEventCallback | None = None
        self._device_observers = ObserverManager[DeviceObserver](observer_type_name="device")

    def on_event(self, callback: RawEventCallback) -> None:
        """Register the callback that receives raw events."""
        self._callback = callback

    def register_device_observer(self, observer: DeviceObserver) -> None:
        self._device_observers.register(observer)

    def unregister_device_observer(self, observer: DeviceObserver) -> None:
        self._device_observers.unregister(observer)

    @abstractmethod
    def start(self) -> None:
        """
        Start delivering events.

        Raises:
            InputBackendUnavailableError: If the backend cannot be opened
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering events and release the backend."""

    @property
    @abstractmethod
    def connected_devices(self) -> list[str]:
        """Names of the devices currently delivering input."""

    def _emit(self, device_id: int, button_id: int, kind: ButtonKind) -> None:
        event = RawInputEvent(device_id, button_id, kind, self._clock())
        logger.debug(f"Raw input: {event}")
        if self._callback is not None:
            self._callback(event)

    def _notify_device(self, event: DeviceEvent, device_name: str) -> None:
        logger.info(f"{self.name} device {event.value}: {device_name}")
        self._device_observers.notify("on_device_event", event, device_name)

    def __enter__(self) -> "InputSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
