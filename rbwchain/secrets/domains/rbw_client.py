"""Client for the external credential command (``rbw get`` by default)."""
import logging
import shutil
import subprocess
from typing import List, Optional

from .errors import DecodeError, FetchError, LaunchError
from .models import CredentialCommand

logger = logging.getLogger(__name__)


class CredentialClient:
    """Wrapper around the credential command."""

    def __init__(self, command: Optional[CredentialCommand] = None, log: Optional[logging.Logger] = None):
        self.command = command or CredentialCommand()
        self.log = log or logger

    @property
    def program(self) -> str:
        return self.command.program

    def argv(self, identifier: str) -> List[str]:
        """Full argument vector used to fetch ``identifier``."""
        return [self.command.program, *self.command.args, identifier]

    def display(self, identifier: str) -> str:
        """Human-readable form of the fetch command, for diagnostics."""
        return " ".join(self.argv(identifier))

    def is_available(self) -> bool:
        """Check whether the credential program resolves on PATH."""
        return shutil.which(self.command.program) is not None

    def fetch(self, identifier: str) -> str:
        """
        Fetch the secret text for an identifier.

        Args:
            identifier: Secret note name passed verbatim to the command

        Returns:
            The command's standard output decoded as UTF-8

        Raises:
            LaunchError: If the command cannot be started
            FetchError: If the command exits with a non-zero status
            DecodeError: If the output is not valid UTF-8
        """
        command_display = self.display(identifier)
        self.log.debug(f"Fetching secret content for note: '{identifier}'")

        try:
            result = subprocess.run(self.argv(identifier), capture_output=True, check=False)
        except OSError as e:
            raise LaunchError(f"Failed to execute '{command_display}': {e}") from e

        if result.returncode != 0:
            stderr_text = result.stderr.decode("utf-8", errors="replace").strip()
            raise FetchError(
                f"Command '{command_display}' failed with status {result.returncode}: {stderr_text}",
                returncode=result.returncode,
                stderr=stderr_text,
            )

        try:
            content = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Output of '{command_display}' is not valid UTF-8 (offset {e.start})") from e

        self.log.debug(f"Successfully fetched {len(result.stdout)} bytes of secret content.")
        return content
