# ABOUTME: Custom exception classes for Gitpod AWS sign-in attempts
# ABOUTME: Wraps HTTP, JSON and subprocess failures with the context needed to diagnose them

"""Custom exceptions for sign-in attempts."""


class SigninError(Exception):
    """Base exception for a sign-in attempt that was tried and failed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(SigninError):
    """Raised when a required environment setting is missing or malformed."""

    def __init__(self, message: str, variable: str = None):
        super().__init__(message)
        self.variable = variable


class TokenRequestError(SigninError):
    """Raised when a token endpoint cannot be reached or returns an unusable body."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class CommandError(SigninError):
    """Raised when an external command cannot be run or exits non-zero."""

    def __init__(self, message: str, command: list = None, output: str = "", returncode: int = None):
        super().__init__(message)
        self.command = command or []
        self.output = output
        self.returncode = returncode
