"""
Custom Exceptions for Postal Code Gate Application

This module defines custom exception classes that provide specific
error handling for the failure scenarios of the postal code gate.
"""

INVALID_FORMAT_MESSAGE = "無効な形式"
POST_CODE_MISMATCH_MESSAGE = "郵便番号が違います。"


class PostCodeGateException(Exception):
    """
    Base exception for the postal code gate

    All custom exceptions in the gate inherit from this base class
    so a single error handler can render any of them.
    """

    def __init__(self, message: str, error_code: str = None):
        """
        Initialize gate exception

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        """String representation of the exception"""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InvalidPostCodeFormatException(PostCodeGateException):
    """
    Raised when a submitted code is not exactly 7 ASCII digits

    Full-width digits, hyphens, any other character or a wrong
    length all end up here; the input is never silently corrected.
    """

    def __init__(self):
        super().__init__(INVALID_FORMAT_MESSAGE, "INVALID_FORMAT")


class PostCodeMismatchException(PostCodeGateException):
    """
    Raised when a well-formed code does not equal the configured secret
    """

    def __init__(self):
        super().__init__(POST_CODE_MISMATCH_MESSAGE, "POST_CODE_MISMATCH")


class ConfigurationException(PostCodeGateException):
    """
    Raised at startup when configuration is invalid

    Args:
        setting: Name of the offending environment variable
        reason: Why the value was rejected
    """

    def __init__(self, setting: str, reason: str):
        message = f"Invalid configuration for '{setting}': {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.setting = setting
        self.reason = reason


class SessionInvalidException(PostCodeGateException):
    """
    Raised when a session token is tampered, malformed or expired
    """

    def __init__(self, reason: str):
        """
        Initialize session invalid exception

        Args:
            reason: Description of why the token was rejected
        """
        message = f"Session token rejected: {reason}"
        super().__init__(message, "SESSION_INVALID")
        self.reason = reason
