"""Base exception class for superhat.

Every application error carries two messages and a recovery flag:

- `user_message`: shown in the TUI or on the console
- `technical_message`: written to the log file
- `recoverable`: whether the app can carry on after the error
- `recovery_hint`: optional suggestion for the user
"""

from typing import Optional


class SuperhatError(Exception):
    """
    Base exception for all superhat errors.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logging
        recoverable: Whether the error can be recovered from
        recovery_hint: Optional hint for how to fix the issue
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """Get the user message followed by the recovery hint, if any."""
        msg = self.user_message
        if self.recovery_hint:
            msg += f"\n\nSuggestion: {self.recovery_hint}"
        return msg
