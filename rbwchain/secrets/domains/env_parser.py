"""Parse secret note content into environment variables."""
import logging
from typing import Dict

from .errors import ConfigError


def validate_env_name(name: str) -> None:
    """
    Validate a variable name can be placed in a process environment.

    Raises:
        ConfigError: If the name is empty or contains '=' or a NUL byte
    """
    if not name:
        raise ConfigError("Environment variable name cannot be empty")
    if "=" in name:
        raise ConfigError(f"Invalid environment variable name '{name}': contains '='")
    if "\x00" in name:
        raise ConfigError(f"Invalid environment variable name {name!r}: contains a NUL byte")


def parse_env_vars(content: str, logger: logging.Logger) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines into a mapping.

    Empty lines and ``#`` comments are skipped silently. Lines without ``=``
    or with an empty key are skipped with a warning (visible in debug mode).
    Keys and values are trimmed; a later duplicate key wins. Lines break
    only at '\\n' (a trailing '\\r' is trimmed away), so form feeds or
    Unicode separators inside a value are kept.

    Args:
        content: Secret note text
        logger: Run logger

    Returns:
        Parsed variables

    Raises:
        ConfigError: If a key or value cannot be stored in an environment
    """
    env_vars: Dict[str, str] = {}

    for line_number, line in enumerate(content.split("\n"), start=1):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        key, sep, value = trimmed.partition("=")
        if not sep:
            # Line content may be secret, report position only
            logger.warning(f"Skipping invalid line {line_number} in secret content (no '=')")
            continue

        key = key.strip()
        value = value.strip()
        if not key:
            logger.warning(f"Skipping line {line_number} with empty key")
            continue

        validate_env_name(key)
        if "\x00" in value:
            raise ConfigError(f"Value for '{key}' contains a NUL byte")

        env_vars[key] = value

    return env_vars
