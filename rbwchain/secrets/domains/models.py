"""Domain models for running a command with secrets."""
from dataclasses import dataclass, field
from typing import List

VERSION = "0.1.0"

# Wrapper-identity variables injected into every child environment
VERSION_VAR = "RBWCHAIN_VERSION"
SECRET_NOTE_VAR = "RBWCHAIN_SECRET_NOTE"
DEBUG_VAR = "RBWCHAIN_DEBUG"

DEFAULT_PROGRAM = "rbw"
DEFAULT_PROGRAM_ARGS = ["get"]


@dataclass
class CredentialCommand:
    """External command that prints a secret for an identifier.

    The fetch runs ``[program, *args, identifier]``.
    """
    program: str = DEFAULT_PROGRAM
    args: List[str] = field(default_factory=lambda: list(DEFAULT_PROGRAM_ARGS))


@dataclass
class Settings:
    """Resolved configuration for one run."""
    credential_command: CredentialCommand = field(default_factory=CredentialCommand)
    debug: bool = False


@dataclass
class FileSpec:
    """Target of file mode: env var name plus optional filename suffix."""
    name: str
    suffix: str = ""
