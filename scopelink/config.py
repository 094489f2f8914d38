"""
Configuration loading for scopelink with XDG-compliant paths.

Merges built-in defaults, the user configuration file and environment
overrides, and turns the 'remotes' section into remote settings.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from .remote.config import Endpoint, RemoteConfigError
from .remote.errors import ScopeLinkError

logger = logging.getLogger(__name__)

DEFAULTS = {
    "defaults": {
        "tool": "bit",
        "timeout": 60,
        "key": None,
        "strict_host_keys": True,
    },
    "remotes": {},
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "SCOPELINK_TOOL": "defaults.tool",
    "SCOPELINK_TIMEOUT": "defaults.timeout",
    "SCOPELINK_KEY": "defaults.key",
}


class ConfigLoadError(ScopeLinkError):
    """Raised when configuration loading fails."""

    pass


@dataclass
class RemoteSettings:
    """A configured remote with its connection settings."""

    name: str
    endpoint: Endpoint
    key: Optional[str] = None
    timeout: Optional[float] = None
    tool: str = "bit"
    strict_host_keys: bool = True


def get_user_config_path() -> Path:
    """Get the path to the user's scopelink configuration file."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "scopelink" / "config.yaml"
    return Path.home() / ".config" / "scopelink" / "config.yaml"


def _env_config() -> DictConfig:
    """Build a config fragment from SCOPELINK_* environment variables."""
    overrides: Dict[str, Dict[str, str]] = {}
    for var, key in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            section, name = key.split(".")
            overrides.setdefault(section, {})[name] = value
    return OmegaConf.create(overrides)


def load_config(config_file: Optional[str] = None) -> DictConfig:
    """
    Load the merged scopelink configuration.

    Args:
        config_file: Optional path to alternative config file

    Returns:
        Merged configuration (defaults < file < environment)

    Raises:
        ConfigLoadError: If the configuration file cannot be loaded
    """
    if config_file:
        config_path = Path(config_file).expanduser().resolve()
    else:
        config_path = get_user_config_path()

    layers = [OmegaConf.create(DEFAULTS)]

    if config_path.exists():
        try:
            file_config = OmegaConf.load(config_path)
        except (yaml.YAMLError, OmegaConfBaseException, ValueError) as e:
            raise ConfigLoadError(
                f"Invalid YAML in configuration file {config_path}: {e}"
            )
        except IOError as e:
            raise ConfigLoadError(f"Cannot read configuration file {config_path}: {e}")
        if not isinstance(file_config, DictConfig):
            raise ConfigLoadError(
                f"Configuration file must contain a YAML dictionary: {config_path}"
            )
        layers.append(file_config)

    layers.append(_env_config())
    return OmegaConf.merge(*layers)


def _build_remote(
    name: str, data: Dict[str, Any], defaults: Dict[str, Any]
) -> RemoteSettings:
    url = data.get("url")
    if not url:
        raise RemoteConfigError("missing required field: url")

    timeout = data.get("timeout", defaults.get("timeout"))
    try:
        timeout = float(timeout) if timeout is not None else None
    except (TypeError, ValueError):
        raise RemoteConfigError(f"timeout must be a number, got {timeout!r}")

    return RemoteSettings(
        name=name,
        endpoint=Endpoint.from_url(url),
        key=data.get("key", defaults.get("key")),
        timeout=timeout,
        tool=data.get("tool", defaults.get("tool")) or "bit",
        strict_host_keys=bool(
            data.get("strict_host_keys", defaults.get("strict_host_keys"))
        ),
    )


def load_remotes(config_file: Optional[str] = None) -> Dict[str, RemoteSettings]:
    """
    Load remote settings from the configuration.

    Returns:
        Dictionary mapping remote names to RemoteSettings

    Raises:
        ConfigLoadError: If any remote is invalid; all problems are reported together
    """
    config = OmegaConf.to_container(load_config(config_file), resolve=True)
    remotes_data = config.get("remotes") or {}
    defaults = config.get("defaults") or {}

    if not isinstance(remotes_data, dict):
        raise ConfigLoadError("'remotes' section must be a dictionary")

    remotes = {}
    errors = []
    for name, remote_data in remotes_data.items():
        if not isinstance(remote_data, dict):
            errors.append(f"Remote '{name}' configuration must be a dictionary")
            continue
        try:
            remotes[name] = _build_remote(name, remote_data, defaults)
        except RemoteConfigError as e:
            errors.append(f"Remote '{name}': {e}")

    if errors:
        error_msg = "Configuration errors found:\n" + "\n".join(
            f"  - {error}" for error in errors
        )
        raise ConfigLoadError(error_msg)

    logger.info(f"Loaded {len(remotes)} remote configurations: {', '.join(remotes)}")
    return remotes


def get_remote(remote: str, config_file: Optional[str] = None) -> RemoteSettings:
    """
    Resolve a remote by configured name, or from an SSH address.

    Args:
        remote: Name of a configured remote, or an SSH URL / scp-style address

    Raises:
        ConfigLoadError: If the remote is neither configured nor a valid address
    """
    remotes = load_remotes(config_file)
    if remote in remotes:
        return remotes[remote]

    if "://" in remote or ":" in remote:
        config = load_config(config_file)
        defaults = OmegaConf.to_container(config.defaults, resolve=True)
        try:
            return _build_remote(remote, {"url": remote}, defaults)
        except RemoteConfigError as e:
            raise ConfigLoadError(f"Invalid remote address '{remote}': {e}")

    available = list(remotes)
    if available:
        raise ConfigLoadError(
            f"Remote '{remote}' not found. Available remotes: {', '.join(available)}"
        )
    raise ConfigLoadError(
        f"Remote '{remote}' not found. No remotes configured in {get_user_config_path()}"
    )


def setup_logging(verbosity: int = 0) -> None:
    """Configure the root logger from a -v count."""
    root_logger = logging.getLogger()

    # Remove existing handlers to avoid conflicts
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if verbosity == 1:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"
    elif verbosity == 2:
        level = logging.INFO
        format_str = "%(levelname)s: %(message)s"
    elif verbosity >= 3:
        level = logging.DEBUG
        format_str = "%(levelname)s:%(name)s: %(message)s"
    else:
        level = logging.ERROR
        format_str = "%(levelname)s: %(message)s"

    root_logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_str))
    root_logger.addHandler(handler)
