"""Configuration loader for rbwchain."""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .errors import ConfigError
from .models import CredentialCommand, Settings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RBWCHAIN_CONFIG"


def default_config_path() -> Path:
    """Default config location (XDG Base Directory layout)."""
    return Path.home() / ".config" / "rbwchain" / "config.yml"


def _get_config_path(explicit_path: Optional[str] = None) -> Optional[Path]:
    """
    Get config file path.

    Priority order:
    1. Path given on the command line (--config)
    2. RBWCHAIN_CONFIG environment variable
    3. Default location: ~/.config/rbwchain/config.yml (only if it exists)

    Returns:
        Path to the config file, or None when no file applies

    Raises:
        ConfigError: If an explicitly named file doesn't exist
    """
    for source, value in (("--config", explicit_path), (CONFIG_ENV_VAR, os.getenv(CONFIG_ENV_VAR))):
        if value:
            config_path = Path(value).expanduser()
            if not config_path.is_file():
                raise ConfigError(f"Configuration file from {source} not found: {config_path}")
            return config_path

    default_config = default_config_path()
    if default_config.is_file():
        return default_config

    return None


def _parse_credential_command(section: Any, config_path: Path) -> CredentialCommand:
    """Validate the ``credential_command`` section."""
    if not isinstance(section, dict):
        raise ConfigError(
            f"'credential_command' in {config_path} must be a mapping\n"
            f"Required format:\n"
            f"credential_command:\n"
            f"  program: rbw\n"
            f"  args: [get]"
        )

    command = CredentialCommand()

    if 'program' in section:
        program = section['program']
        if not isinstance(program, str) or not program.strip():
            raise ConfigError(f"'credential_command.program' in {config_path} must be a non-empty string")
        command.program = program.strip()

    if 'args' in section:
        args = section['args']
        if args is None:
            args = []
        if not isinstance(args, list) or not all(isinstance(arg, str) for arg in args):
            raise ConfigError(f"'credential_command.args' in {config_path} must be a list of strings")
        command.args = list(args)

    return command


def load_config(explicit_path: Optional[str] = None) -> Settings:
    """
    Load and validate configuration from YAML file.

    Args:
        explicit_path: Config path from the command line, if any

    Returns:
        Settings built from the file, or built-in defaults when no file applies

    Raises:
        ConfigError: If the config file is missing, unreadable, or invalid
    """
    config_path = _get_config_path(explicit_path)
    if config_path is None:
        logger.debug("No config file found, using defaults")
        return Settings()

    # Load YAML
    try:
        with open(config_path, 'r') as f:
            config: Dict[str, Any] = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    # An empty file means "all defaults"
    if config is None:
        return Settings()

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    settings = Settings()

    if 'credential_command' in config:
        settings.credential_command = _parse_credential_command(config['credential_command'], config_path)

    if 'debug' in config:
        if not isinstance(config['debug'], bool):
            raise ConfigError(f"'debug' in {config_path} must be true or false")
        settings.debug = config['debug']

    logger.debug(f"Configuration loaded from {config_path}")
    return settings
