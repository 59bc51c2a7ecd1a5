"""Exceptions raised while preparing and running a command with secrets."""
from typing import Optional


class RbwchainError(Exception):
    """Base class for wrapper-level failures (always exit code 1)."""
    pass


class PrerequisiteMissing(RbwchainError):
    """The credential command is not installed or not on PATH."""

    def __init__(self, message: str, program: str):
        super().__init__(message)
        self.program = program


class FetchError(RbwchainError):
    """The credential command ran but did not produce a usable secret."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class DecodeError(FetchError):
    """The credential command printed bytes that are not valid UTF-8."""
    pass


class ConfigError(RbwchainError):
    """Configuration error exception."""
    pass


class StagingError(RbwchainError):
    """The temporary secret file could not be created, written or flushed."""
    pass


class LaunchError(RbwchainError):
    """A process could not be started."""
    pass


class AbnormalTermination(RbwchainError):
    """The child ended without a usable exit code or signal."""
    pass
