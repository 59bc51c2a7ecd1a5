"""CLI entrypoint for rbwchain."""
import sys
import argparse
from typing import List, Optional

from rbwchain.secrets.domains.config_loader import load_config
from rbwchain.secrets.domains.errors import PrerequisiteMissing, RbwchainError
from rbwchain.secrets.domains.models import VERSION
from rbwchain.secrets.domains.rbw_client import CredentialClient
from rbwchain.secrets.workflows.run_with_secret import (
    ensure_credential_command,
    prerequisite_hint,
    run_with_secret,
)

from .diagnostics import configure_logging
from .validators import parse_file_spec, validate_secret_note


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rbwchain",
        description=(
            "Executes a command with secrets from rbw, either as environment "
            "variables or via a temporary file."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
By default the secret note is parsed as KEY=VALUE lines and each pair is set
as an environment variable for COMMAND. With -f/--file the raw note is written
to a temporary file and NAME is set to its path; a NAME.EXT value gives the
file an .EXT suffix. The file is removed after COMMAND exits.

Exit codes:
  N       - COMMAND exited with code N
  128+N   - COMMAND was killed by signal N
  1       - rbwchain error (rbw missing, fetch failed, bad -f value, launch failed)
  2       - Usage error (invalid arguments)

Variables set for COMMAND:
  RBWCHAIN_VERSION      - rbwchain version
  RBWCHAIN_SECRET_NOTE  - the secret note that was read
  RBWCHAIN_DEBUG        - "1" when --debug is given

Configuration:
  Default location: ~/.config/rbwchain/config.yml (optional)
  Override with --config PATH or the RBWCHAIN_CONFIG environment variable
        """
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"rbwchain {VERSION}"
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Path to a YAML config file"
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging to stderr (secret values are never printed)"
    )
    parser.add_argument(
        "-f", "--file",
        metavar="NAME[.EXT]",
        help="Write the raw secret to a temporary file and set NAME to its path"
    )
    parser.add_argument(
        "secret_note",
        metavar="SECRET_NOTE",
        help="The rbw note to read"
    )
    parser.add_argument(
        "command",
        metavar="COMMAND [ARGS...]",
        nargs=argparse.REMAINDER,
        help="The command to execute and its arguments"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entrypoint.

    Exit codes:
        N - Child exit code (128 + signal when the child was killed)
        1 - Wrapper errors (prerequisite missing, fetch, config, staging, launch)
        2 - Usage errors (invalid arguments)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.error("the following arguments are required: COMMAND")

    command, *command_args = args.command
    log = configure_logging(args.debug)

    try:
        settings = load_config(args.config)
        debug = args.debug or settings.debug
        if debug and not args.debug:
            log = configure_logging(True)

        log.debug("Debug mode enabled.")
        log.debug(f"Parsed arguments: {args}")

        client = CredentialClient(settings.credential_command, log)
        ensure_credential_command(client)

        validate_secret_note(args.secret_note)
        file_spec = parse_file_spec(args.file) if args.file is not None else None

        exit_code = run_with_secret(
            client,
            args.secret_note,
            command,
            command_args,
            file_spec=file_spec,
            debug=debug,
            log=log,
        )
    except PrerequisiteMissing as e:
        log.error(str(e))
        log.error(prerequisite_hint(e.program), extra={"hint": True})
        exit_code = 1
    except RbwchainError as e:
        log.error(str(e))
        exit_code = 1
    except KeyboardInterrupt:
        log.error("Interrupted")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
