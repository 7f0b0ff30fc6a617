"""Binding table mapping logical directions to raw controller buttons."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import Direction


class Binding(BaseModel):
    """
    Raw input identifier for a single physical button.

    The pair (0, 0) is the sentinel for "unbound". Input sources never
    produce it, so an unbound direction can never match real input.
    """

    model_config = ConfigDict(frozen=True)

    device_id: int = Field(default=0, ge=0, description="Controller identifier")
    button_id: int = Field(default=0, ge=0, description="Button identifier on the controller")

    @classmethod
    def unbound(cls) -> "Binding":
        """Create the unbound sentinel."""
        return cls(device_id=0, button_id=0)

    @property
    def is_bound(self) -> bool:
        """Check if this binding refers to a real button."""
        return (self.device_id, self.button_id) != (0, 0)

    def matches(self, device_id: int, button_id: int) -> bool:
        """Check if a raw (device_id, button_id) pair is this binding."""
        return self.is_bound and self.device_id == device_id and self.button_id == button_id

    def __str__(self) -> str:
        if not self.is_bound:
            return "unbound"
        return f"device {self.device_id} / button {self.button_id}"


class BindingTable(BaseModel):
    """Which raw button drives each of the four logical directions."""

    up: Binding = Field(default_factory=Binding.unbound, description="Binding for Up")
    right: Binding = Field(default_factory=Binding.unbound, description="Binding for Right")
    down: Binding = Field(default_factory=Binding.unbound, description="Binding for Down")
    left: Binding = Field(default_factory=Binding.unbound, description="Binding for Left")

    def get(self, direction: Direction) -> Binding:
        """Get the binding for a direction."""
        return getattr(self, direction.value)

    def bind(self, direction: Direction, binding: Binding) -> None:
        """Assign a raw button to a direction."""
        setattr(self, direction.value, binding)

    def items(self) -> list[tuple[Direction, Binding]]:
        """Get (direction, binding) pairs in Up, Right, Down, Left order."""
        return [(direction, self.get(direction)) for direction in Direction]

    @property
    def is_complete(self) -> bool:
        """
        Check if the table can drive the state machine.

        Complete means all four directions are bound and no two directions
        share the same raw button.
        """
        bindings = [binding for _, binding in self.items()]
        if not all(binding.is_bound for binding in bindings):
            return False
        return len(set(bindings)) == len(bindings)

    def find(self, device_id: int, button_id: int) -> Direction | None:
        """
        Find the direction bound to a raw button.

        Args:
            device_id: Controller identifier
            button_id: Button identifier

        Returns:
            The first direction (in Up, Right, Down, Left order) whose binding
            matches exactly, or None
        """
        for direction, binding in self.items():
            if binding.matches(device_id, button_id):
                return direction
        return None

    def duplicates(self) -> list[Direction]:
        """Get every bound direction that shares its raw button with another direction."""
        seen: dict[Binding, list[Direction]] = {}
        for direction, binding in self.items():
            if binding.is_bound:
                seen.setdefault(binding, []).append(direction)
        return [d for directions in seen.values() if len(directions) > 1 for d in directions]

    @classmethod
    def unbound(cls) -> "BindingTable":
        """Create a table with every direction unbound."""
        return cls()
