"""Lifecycle protocol shared by the TUI and the headless console UI."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class UIAdapter(Protocol):
    """
    A UI managed by the Orchestrator.

    The orchestrator calls initialize() on every UI, then run(), and
    shutdown() on exit. The blocking UI is responsible for calling
    orchestrator.initialize() once it is ready to receive events (the TUI
    does it on mount).

    A UI with a register_with_services(orchestrator) method is called back
    from orchestrator.initialize() to connect its observers before any
    input is read.
    """

    def initialize(self) -> None:
        """Prepare the UI. No events are delivered yet."""
        ...

    def run(self) -> None:
        """Run the UI. Blocks until the user quits."""
        ...

    def shutdown(self) -> None:
        """Release UI resources."""
        ...
