"""
Exception hierarchy for superhat.

```
SuperhatError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   └── ConfigValidationError
├── InputDeviceError
│   └── InputBackendUnavailableError
└── ActuatorError
```

The gesture state machine itself never raises. These exceptions cover the
plumbing around it: loading the config file, opening an input backend and
pressing keys. See `superhat.exceptions.handlers` for the helpers that log
and display them.
"""

from .base import SuperhatError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .devices import ActuatorError, InputBackendUnavailableError, InputDeviceError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
)

__all__ = [
    "ActuatorError",
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "ErrorContext",
    "InputBackendUnavailableError",
    "InputDeviceError",
    "SuperhatError",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
]
