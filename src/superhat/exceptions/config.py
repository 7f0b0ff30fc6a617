"""Configuration-related exceptions."""

from typing import Any

from .base import SuperhatError


class ConfigurationError(SuperhatError):
    """Configuration is invalid or cannot be loaded."""


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file is empty or is not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Args:
            file_path: Path to the invalid config file
            parse_error: The parser's error message
        """
        user_msg = "Configuration file has invalid syntax"
        recovery = (
            "Fix the JSON syntax or delete the file to start from defaults "
            "(a .bak copy of the previous version may sit next to it).\n"
            f"  - Edit: {file_path}"
        )

        if "trailing comma" in parse_error.lower():
            user_msg = "Configuration file has a trailing comma"
            recovery = f"Remove the trailing comma from {file_path}"
        elif "empty" in parse_error.lower():
            user_msg = "Configuration file is empty"
            recovery = f"Delete {file_path} to recreate it with defaults"

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """Configuration values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the config file (optional)
        """
        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if field.startswith("bindings"):
            recovery += "\nRun 'superhat --rebind' to capture the hat buttons again"
        elif field.startswith("key_combos"):
            recovery += "\nRun 'superhat config reset key_combos' to restore the default key table"
        elif "ms" in field:
            recovery += "\npoll_interval_ms must stay at or below half of long_press_ms"

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
