"""Input and output device exceptions."""

from .base import SuperhatError


class InputDeviceError(SuperhatError):
    """A raw input source failed to start or stopped working."""

    def __init__(self, user_message: str, backend: str | None = None, **kwargs):
        super().__init__(user_message, **kwargs)
        self.backend = backend


class InputBackendUnavailableError(InputDeviceError):
    """The selected input backend cannot be opened on this machine."""

    def __init__(self, backend: str, reason: str):
        """
        Args:
            backend: Backend name ("gamepad" or "midi")
            reason: Why the backend could not be opened
        """
        super().__init__(
            user_message=f"The {backend} input backend is not available: {reason}",
            technical_message=f"Failed to open {backend} input backend: {reason}",
            backend=backend,
            recoverable=True,
            recovery_hint=(
                "Run 'superhat devices' to see what is connected, "
                "or pick another backend with --backend."
            ),
        )
        self.reason = reason


class ActuatorError(SuperhatError):
    """A resolved switch could not be actuated."""

    def __init__(self, switch_number: int, reason: str):
        """
        Args:
            switch_number: The switch that was being pressed or released
            reason: What went wrong
        """
        super().__init__(
            user_message=f"Could not actuate switch {switch_number}: {reason}",
            recoverable=True,
        )
        self.switch_number = switch_number
        self.reason = reason
