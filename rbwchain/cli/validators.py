"""Input validation for CLI arguments."""
from rbwchain.secrets.domains.env_parser import validate_env_name
from rbwchain.secrets.domains.errors import ConfigError
from rbwchain.secrets.domains.models import FileSpec


def validate_secret_note(note: str) -> None:
    """
    Validate the secret note identifier.

    Any text is passed verbatim to the credential command; it only has to be
    non-empty.

    Raises:
        ConfigError: If the note is empty
    """
    if not note:
        raise ConfigError("Secret note cannot be empty")


def parse_file_spec(value: str) -> FileSpec:
    """
    Split a ``-f/--file`` value into a variable name and filename suffix.

    The split is on the last dot, and only when something precedes it:

        TLS_CERT.pem   -> TLS_CERT, ".pem"
        APP.CONF.yaml  -> APP.CONF, ".yaml"
        CREDS          -> CREDS,    ""
        .env           -> .env,     ""
        CREDS.         -> CREDS,    ""

    Raises:
        ConfigError: If the resulting name is empty or not a valid variable name
    """
    if not value:
        raise ConfigError("Specified environment variable name for -f/--file option is empty.")

    name, dot, extension = value.rpartition(".")
    if dot and name:
        suffix = f".{extension}" if extension else ""
    else:
        name, suffix = value, ""

    try:
        validate_env_name(name)
    except ConfigError as e:
        raise ConfigError(f"Invalid -f/--file value '{value}': {e}") from e

    return FileSpec(name=name, suffix=suffix)
