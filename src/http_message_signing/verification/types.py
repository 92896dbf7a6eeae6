"""
Type definitions for signature verification

Verification distinguishes a signature that does not match, which is a normal
``False`` result, from a message that cannot be verified at all, which raises
``VerificationError``.
"""

from typing import Any, Dict, Optional

from ..exceptions import ErrorCodes, HttpSignatureError


class VerificationError(HttpSignatureError):
    """Raised when a message cannot be verified; the root cause is chained"""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.VERIFICATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details)

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.message} (code: {self.error_code}, cause: {self.__cause__})"
        return f"{self.message} (code: {self.error_code})"

    @classmethod
    def for_message(cls, message: Any) -> 'VerificationError':
        """Create the error naming the message that could not be verified."""
        return cls(
            f"Unable to verify request '{message!r}'",
            ErrorCodes.VERIFICATION_FAILED,
            {"message": repr(message)}
        )
