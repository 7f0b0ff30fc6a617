"""Status bar widget showing mode, input device and sound state."""

from textual.widgets import Static


class StatusBar(Static):
    """
    Status bar displaying current application state.

    Shows:
    - Current state machine mode
    - Input backend and connected device
    - Whether panel clicks are enabled
    """

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        color: $text;
        padding: 0 1;
    }

    StatusBar.rebinding {
        background: $warning;
    }

    StatusBar.active {
        background: $success;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._mode_text = "Starting"
        self._backend = "gamepad"
        self._device: str | None = None
        self._sound = True
        self._update_display()

    def update_state(
        self,
        mode_text: str,
        backend: str,
        device: str | None,
        sound: bool,
        rebinding: bool = False,
        active: bool = False,
    ) -> None:
        """
        Update all status information.

        Args:
            mode_text: One-line description of the current mode
            backend: Input backend name
            device: Connected device name, or None
            sound: Whether panel clicks are enabled
            rebinding: Highlight the bar while bindings are captured
            active: Highlight the bar while a switch is held
        """
        self._mode_text = mode_text
        self._backend = backend
        self._device = device
        self._sound = sound
        self.set_class(rebinding, "rebinding")
        self.set_class(active, "active")
        self._update_display()

    def _update_display(self) -> None:
        device_text = f"🎮 {self._device}" if self._device else f"🎮 No {self._backend} device"
        sound_text = "🔊 Click on" if self._sound else "🔇 Click off"
        self.update(" | ".join([self._mode_text, device_text, sound_text]))
