"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from superhat.model_manager.persistence import PydanticPersistence

from .bindings import BindingTable
from .enums import InputBackend, Panel

SWITCH_COUNT = 40

DEFAULT_CONFIG_DIR = Path.home() / ".superhat"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"


def default_key_combos() -> list[list[str]]:
    """
    Default key combination for each switch, indexed by switch number - 1.

    Matches the default OSB key file of Falcon BMS 4.37: Ctrl+Alt for the
    left MFD, Shift+Alt for the right MFD, top-row digits for the top and
    right sides, numpad digits for the bottom and left sides.
    """
    digits = ["1", "2", "3", "4", "5", "6", "7", "8", "9", "0"]
    combos: list[list[str]] = []
    for modifier in ("ctrl", "shift"):
        combos.extend([modifier, "alt", digit] for digit in digits)
        combos.extend([modifier, "alt", f"num{digit}"] for digit in digits)
    return combos


class ClickSoundConfig(BaseModel):
    """Audible feedback for panel selection."""

    left: Path | None = Field(
        default=None,
        description="WAV file played when panel A is selected (None = built-in click)",
    )
    right: Path | None = Field(
        default=None,
        description="WAV file played when panel B is selected (None = built-in click)",
    )
    volume: float = Field(default=0.5, ge=0.0, le=1.0, description="Click volume (0.0-1.0)")

    @field_serializer("left", "right")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string."""
        return str(path) if path is not None else None


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Hat bindings
    bindings: BindingTable = Field(
        default_factory=BindingTable.unbound,
        description="Raw button bound to each hat direction",
    )
    reject_duplicate_bindings: bool = Field(
        default=False,
        description="Refuse to bind one raw button to two directions while rebinding",
    )

    # Session state
    selected_panel: Panel = Field(default=Panel.A, description="Panel selected at last exit")

    # Timing
    long_press_ms: int = Field(
        default=500, gt=0, description="Hold duration that selects a panel (milliseconds)"
    )
    sequence_timeout_ms: int = Field(
        default=1500,
        gt=0,
        description="Inactivity that abandons a switch selection (milliseconds)",
    )
    poll_interval_ms: int = Field(
        default=20, gt=0, description="Maximum wait for the next input event (milliseconds)"
    )

    # Input
    input_backend: InputBackend = Field(
        default=InputBackend.GAMEPAD, description="Where hat input is read from"
    )
    midi_port_filter: str | None = Field(
        default=None,
        description="Substring of the MIDI input port to open (None = first port)",
    )

    # Output
    key_combos: list[list[str]] = Field(
        default_factory=default_key_combos,
        description="Key combination pressed for each switch, in switch order",
    )

    # Feedback
    sound_enabled: bool = Field(default=True, description="Play a click when the panel changes")
    click_sounds: ClickSoundConfig = Field(
        default_factory=ClickSoundConfig, description="Click sound settings"
    )

    @field_validator("key_combos")
    @classmethod
    def validate_key_combos(cls, combos: list[list[str]]) -> list[list[str]]:
        """Require one non-empty key combination per switch."""
        if len(combos) != SWITCH_COUNT:
            raise ValueError(f"expected {SWITCH_COUNT} key combinations, got {len(combos)}")
        for number, combo in enumerate(combos, start=1):
            if not combo:
                raise ValueError(f"key combination for switch {number} is empty")
        return combos

    @model_validator(mode="after")
    def validate_poll_interval(self) -> "AppConfig":
        """Keep the input wait short enough for long-press and timeout detection."""
        if self.poll_interval_ms * 2 > self.long_press_ms:
            raise ValueError(
                f"poll_interval_ms ({self.poll_interval_ms}) must be at most half of "
                f"long_press_ms ({self.long_press_ms})"
            )
        return self

    @property
    def long_press_threshold(self) -> float:
        """Long-press threshold in seconds."""
        return self.long_press_ms / 1000.0

    @property
    def sequence_timeout(self) -> float:
        """Sequence timeout in seconds."""
        return self.sequence_timeout_ms / 1000.0

    @property
    def poll_interval(self) -> float:
        """Input wait in seconds."""
        return self.poll_interval_ms / 1000.0

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.superhat/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        PydanticPersistence.save_json(self, path)
