"""Observer and collaborator protocols around the gesture state machine."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from superhat.models import BindingTable

from .events import Action, DeviceEvent

if TYPE_CHECKING:
    from superhat.core.modes import Mode


@runtime_checkable
class ModeObserver(Protocol):
    """
    Observer that receives every new mode of the state machine.

    Presentation sinks implement this. They must not feed anything back into
    the state machine from the callback.
    """

    def on_mode_changed(self, mode: "Mode") -> None:
        """
        Handle a mode transition.

        Args:
            mode: The new (immutable) mode

        Threading:
            Called from the input loop thread. UI implementations must
            marshal to their own thread.
        """
        ...


@runtime_checkable
class ActionObserver(Protocol):
    """Observer that receives the state machine's output actions, in order."""

    def on_action(self, action: Action) -> None:
        """
        Handle an output action.

        Threading:
            Called from the input loop thread. Implementations must return
            quickly: the loop does not read input while they run.
        """
        ...


@runtime_checkable
class DeviceObserver(Protocol):
    """Observer that receives input backend connection changes."""

    def on_device_event(self, event: DeviceEvent, device_name: str) -> None:
        """
        Handle a connection change.

        Threading:
            Called from the backend's own polling thread.
        """
        ...


@runtime_checkable
class BindingStore(Protocol):
    """Durable storage for the binding table."""

    def load(self) -> BindingTable:
        """Load the stored table (all unbound if nothing is stored)."""
        ...

    def save(self, bindings: BindingTable) -> None:
        """
        Store a table.

        Raises:
            OSError or ConfigurationError if the table could not be written
        """
        ...


@runtime_checkable
class SwitchActuator(Protocol):
    """Final output stage: makes a resolved switch take effect downstream."""

    def activate(self, switch_number: int) -> None:
        """Press switch 1-40."""
        ...

    def deactivate(self, switch_number: int) -> None:
        """Release switch 1-40."""
        ...
