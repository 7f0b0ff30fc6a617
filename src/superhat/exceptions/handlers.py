"""Helpers for handling superhat exceptions consistently.

- `handle_errors`: decorator that logs, notifies and optionally swallows
- `ErrorContext`: context manager for the same pattern around a block
- `wrap_pydantic_error`: turns pydantic validation errors into config errors
- `format_error_for_display`: (message, hint) pair for the CLI and TUI
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Optional, TypeVar

from .base import SuperhatError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR,
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "play click")
        user_notification: Optional callback to notify the user
        fallback_value: Value to return if an error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        log_level: Logging level for the error

    Example:
        ```python
        @handle_errors(operation_name="play click", re_raise=False)
        def _play(self, samples):
            sounddevice.play(samples, samplerate)
        ```
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except SuperhatError as e:
                logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")
                if user_notification:
                    user_notification(e.get_full_message())
                if re_raise:
                    raise
                return fallback_value
            except Exception as e:
                logger.log(log_level, f"Unexpected error during {operation_name}: {e}", exc_info=True)
                if user_notification:
                    user_notification(f"Error: {e}")
                if re_raise:
                    raise
                return fallback_value

        return wrapper

    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("persist bindings", re_raise=False) as ctx:
            store.save(bindings)

        if ctx.error:
            logger.warning("Bindings only live in memory until the next save")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        """
        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to this module's logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self) -> "ErrorContext":
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        if not issubclass(exc_type, Exception):
            # KeyboardInterrupt and friends always propagate
            return False

        self.error = exc_val
        if isinstance(exc_val, SuperhatError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> SuperhatError:
    """
    Convert a pydantic validation error raised while loading a file.

    Args:
        error: The pydantic ValidationError
        file_path: Path to the file that failed to load

    Returns:
        ConfigFileInvalidError for JSON syntax errors, ConfigValidationError otherwise
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <parser message> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first = errors[0]
            field = ".".join(str(loc) for loc in first.get("loc", ())) or "config"
            return ConfigValidationError(
                field=field,
                value=first.get("input"),
                error_msg=first.get("msg", "validation failed"),
                file_path=file_path,
            )
        if errors:
            lines = [
                f"  - {'.'.join(str(loc) for loc in err.get('loc', ())) or 'config'}: "
                f"{err.get('msg', 'validation failed')}"
                for err in errors
            ]
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(lines),
                file_path=file_path,
            )

    return ConfigValidationError(
        field="unknown", value=None, error_msg=error_msg, file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, SuperhatError):
        return error.user_message, error.recovery_hint

    return f"{type(error).__name__}: {error}", None
