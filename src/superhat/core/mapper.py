"""Raw button to logical direction classification."""

from superhat.models import BindingTable, Direction


class DirectionMapper:
    """
    Classifies raw (device_id, button_id) pairs using a binding table.

    The mapper holds a reference to the table rather than a copy, so a
    rebinding performed on that table takes effect on the next event.
    """

    def __init__(self, bindings: BindingTable):
        self._bindings = bindings

    @property
    def bindings(self) -> BindingTable:
        return self._bindings

    @bindings.setter
    def bindings(self, bindings: BindingTable) -> None:
        self._bindings = bindings

    def classify(self, device_id: int, button_id: int) -> Direction | None:
        """
        Get the direction bound to a raw button.

        Returns:
            The bound direction, or None for unmapped input (including any
            input while the table is incomplete)
        """
        return self._bindings.find(device_id, button_id)
