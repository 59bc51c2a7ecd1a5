"""Workflow: fetch a secret, expose it to a child command, relay its status."""
import os
import signal
import logging
import subprocess
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..domains.env_parser import parse_env_vars
from ..domains.errors import AbnormalTermination, LaunchError, PrerequisiteMissing
from ..domains.models import DEBUG_VAR, SECRET_NOTE_VAR, VERSION, VERSION_VAR, FileSpec
from ..domains.rbw_client import CredentialClient
from ..domains.staging import staged_secret_file

logger = logging.getLogger(__name__)

RBW_HOMEPAGE = "https://github.com/doy/rbw"


def ensure_credential_command(client: CredentialClient) -> None:
    """
    Check the credential program is on PATH before any fetch.

    Raises:
        PrerequisiteMissing: If the program cannot be resolved
    """
    if not client.is_available():
        raise PrerequisiteMissing(
            f"The '{client.program}' command was not found in your system's PATH.",
            program=client.program,
        )


def prerequisite_hint(program: str) -> str:
    """Remediation line shown after a PrerequisiteMissing error."""
    if program == "rbw":
        return f"Please ensure rbw ({RBW_HOMEPAGE}) is installed and accessible."
    return f"Please ensure {program} is installed and accessible."


def wrapper_env_vars(secret_note: str, debug: bool) -> Dict[str, str]:
    """Variables identifying the wrapper, injected in both modes."""
    env_vars = {
        VERSION_VAR: VERSION,
        SECRET_NOTE_VAR: secret_note,
    }
    if debug:
        env_vars[DEBUG_VAR] = "1"
    return env_vars


def build_parsed_env(secret_note: str, content: str, debug: bool, log: logging.Logger) -> Dict[str, str]:
    """
    Environment for parsed mode: wrapper variables overlaid with parsed pairs.

    Parsed pairs win when a name collides with a wrapper variable.
    """
    log.debug("Using environment variable mode.")

    parsed_vars = parse_env_vars(content, log)
    if not parsed_vars and content.strip():
        log.warning(f"No valid 'KEY=VALUE' pairs found in secret note '{secret_note}'.")

    env_vars = wrapper_env_vars(secret_note, debug)
    standard_count = len(env_vars)
    env_vars.update(parsed_vars)

    log.debug(
        f"Injecting {len(env_vars)} environment variable(s) "
        f"({len(parsed_vars)} parsed + {standard_count} standard)."
    )
    # Names only, values are secret
    log.debug(f"Variables set: [{', '.join(sorted(env_vars))}]")
    return env_vars


def _defer_signal(_signum, _frame) -> None:
    pass


@contextmanager
def _interrupts_deferred() -> Iterator[None]:
    """
    Keep terminal interrupts from killing the wrapper while the child runs.

    The terminal sends SIGINT/SIGQUIT to the whole foreground group, so the
    child receives them directly. A Python-level handler (unlike SIG_IGN) is
    reset to the default on exec, so the child still reacts normally.
    """
    saved = {}
    for name in ("SIGINT", "SIGQUIT"):
        signum = getattr(signal, name, None)
        if signum is None or signal.getsignal(signum) == signal.SIG_IGN:
            continue
        saved[signum] = signal.signal(signum, _defer_signal)
    try:
        yield
    finally:
        for signum, handler in saved.items():
            signal.signal(signum, handler)


def launch_child(command: str, args: List[str], env_vars: Dict[str, str], log: logging.Logger) -> int:
    """
    Run the child with inherited stdio and wait for it.

    Args:
        command: Program to execute (resolved on PATH)
        args: Arguments passed through untouched
        env_vars: Variables added on top of the wrapper's own environment
        log: Run logger

    Returns:
        The child's return code (negative N when killed by signal N)

    Raises:
        LaunchError: If the command cannot be started
    """
    env = dict(os.environ)
    env.update(env_vars)

    log.debug(f"Executing command: {' '.join([command, *args])}")
    try:
        with _interrupts_deferred():
            result = subprocess.run([command, *args], env=env, check=False)
    except OSError as e:
        raise LaunchError(f"Failed to execute command '{command}': {e}") from e

    log.debug(f"Command finished with status: {result.returncode}")
    return result.returncode


def exit_code_for_status(returncode: Optional[int], log: logging.Logger) -> int:
    """
    Translate a child's return code into the wrapper's exit code.

    - Normal exit: the same code
    - Killed by signal N: 128 + N (shell convention)

    Raises:
        AbnormalTermination: If no code or signal is available
    """
    if returncode is None:
        raise AbnormalTermination("Child process terminated abnormally.")

    if returncode >= 0:
        return returncode

    signum = -returncode
    exit_code = 128 + signum
    try:
        signal_name = signal.Signals(signum).name
    except ValueError:
        signal_name = "unknown"
    log.debug(f"Child process terminated by signal {signum} ({signal_name}) (Exiting with code {exit_code})")
    return exit_code


def run_with_secret(
    client: CredentialClient,
    secret_note: str,
    command: str,
    args: List[str],
    file_spec: Optional[FileSpec] = None,
    debug: bool = False,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Run a command with secrets from a credential note.

    Args:
        client: Credential command client
        secret_note: Note identifier to fetch
        command: Child program
        args: Child arguments
        file_spec: File mode target; None selects parsed mode
        debug: Debug mode (adds RBWCHAIN_DEBUG=1 to the child environment)
        log: Run logger

    Returns:
        Exit code for the wrapper. Any staged file is already removed.

    Raises:
        RbwchainError: On any wrapper-level failure
    """
    log = log or logger

    ensure_credential_command(client)
    content = client.fetch(secret_note)

    if file_spec is None:
        env_vars = build_parsed_env(secret_note, content, debug, log)
        returncode = launch_child(command, args, env_vars, log)
    else:
        log.debug(f"Using file mode. Setting environment variable '{file_spec.name}'.")
        env_vars = wrapper_env_vars(secret_note, debug)
        # The file must outlive the child, so launch inside the block
        with staged_secret_file(content, file_spec.suffix, log) as path:
            env_vars[file_spec.name] = path
            log.debug(f"Prepared environment variable: {file_spec.name}={path}")
            returncode = launch_child(command, args, env_vars, log)

    return exit_code_for_status(returncode, log)
