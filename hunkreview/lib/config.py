"""
Configuration loader for hunkreview.

Reads an optional YAML file. Lookup order, first match wins:
  1. --config PATH (must exist)
  2. <repo root>/.hunkreview.yaml
  3. ~/.config/hunkreview/config.yaml
With no file, built-in defaults apply.

Example:
    git_timeout: 30
    remote_timeout: 60
    ssh_command: "ssh -o BatchMode=yes"
    default_range: "main...HEAD"
    log_file: /tmp/hunkreview.log
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

REPO_CONFIG_NAME = ".hunkreview.yaml"
USER_CONFIG_PATH = Path("~/.config/hunkreview/config.yaml")


class ConfigError(Exception):
    """Configuration file is missing or malformed."""
    pass


@dataclass
class ReviewConfig:
    """Settings for diff acquisition and logging."""
    git_timeout: int = 30  # Seconds for local git commands
    remote_timeout: int = 60  # Seconds for git over ssh
    ssh_command: str = "ssh"
    default_range: Optional[str] = None  # Used when no range is given on the command line
    log_file: Optional[str] = None


_INT_KEYS = {"git_timeout", "remote_timeout"}
_STR_KEYS = {"ssh_command", "default_range", "log_file"}


def _config_from_mapping(data: dict, source: Path) -> ReviewConfig:
    """Build ReviewConfig from parsed YAML, checking value types."""
    known = {f.name for f in fields(ReviewConfig)}
    values = {}

    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key '{key}' in {source}")
            continue
        if key in _INT_KEYS and (not isinstance(value, int) or isinstance(value, bool) or value <= 0):
            raise ConfigError(f"{source}: '{key}' must be a positive integer, got {value!r}")
        if key in _STR_KEYS and value is not None and not isinstance(value, str):
            raise ConfigError(f"{source}: '{key}' must be a string, got {value!r}")
        values[key] = value

    return ReviewConfig(**values)


def load_config_file(config_path: Path) -> ReviewConfig:
    """Load one YAML config file.

    Raises:
        ConfigError: if the file is missing, not valid YAML, not a mapping,
            or holds a value of the wrong type.
    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from None

    if data is None:
        return ReviewConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping at top level")

    return _config_from_mapping(data, config_path)


def find_config_file(repo_root: Optional[Path]) -> Optional[Path]:
    """Return the first config file that exists in the default locations."""
    candidates = []
    if repo_root is not None:
        candidates.append(repo_root / REPO_CONFIG_NAME)
    candidates.append(USER_CONFIG_PATH.expanduser())

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(repo_root: Optional[Path] = None, explicit_path: Optional[Path] = None) -> ReviewConfig:
    """Load configuration for a run.

    An explicit path must exist and be valid. A broken file found in a
    default location is logged and skipped in favor of defaults.
    """
    if explicit_path is not None:
        return load_config_file(explicit_path)

    config_path = find_config_file(repo_root)
    if config_path is None:
        return ReviewConfig()

    try:
        config = load_config_file(config_path)
    except ConfigError as e:
        logger.warning(f"{e}; using defaults")
        return ReviewConfig()

    logger.debug(f"Loaded config from {config_path}")
    return config
