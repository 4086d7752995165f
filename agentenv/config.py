#!/usr/bin/env python3
"""
agent-environment Configuration Management
Defaults, optional config.yml, AGENTS_* environment variables, CLI options
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from agentenv.errors import ConfigError

# Field -> environment variable
ENV_VARS = {
    'home': 'AGENTS_HOME',
    'uv_version': 'AGENTS_UV_VERSION',
    'python_version': 'AGENTS_PYTHON_VERSION',
    'fnm_version': 'AGENTS_FNM_VERSION',
    'node_version': 'AGENTS_NODE_VERSION',
    'download_timeout': 'AGENTS_DOWNLOAD_TIMEOUT',
}
NO_MODIFY_PATH_ENV = 'AGENTS_NO_MODIFY_PATH'

_TRUTHY = {'1', 'true', 'yes', 'on'}


def default_home() -> Path:
    return Path.home() / '.agents'


@dataclass
class AgentEnvConfig:
    """agent-environment configuration structure"""

    home: Path = field(default_factory=default_home)

    # 'latest' or an explicit release tag; explicit tags are trusted
    uv_version: str = 'latest'
    fnm_version: str = 'latest'

    python_version: str = '3.12'
    node_version: str = '20'  # major

    patch_profile: bool = True

    download_timeout: float = 60.0
    download_retries: int = 3

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional['AgentEnvConfig'] = None) -> 'AgentEnvConfig':
        """Create config from a config.yml mapping layered over base (or defaults)"""
        config = replace(base) if base is not None else cls()

        if 'home' in data and data['home']:
            config.home = Path(str(data['home'])).expanduser()

        versions = _section(data, 'versions')
        config.uv_version = _as_version(versions, 'uv', config.uv_version)
        config.python_version = _as_version(versions, 'python', config.python_version)
        config.fnm_version = _as_version(versions, 'fnm', config.fnm_version)
        config.node_version = _as_version(versions, 'node', config.node_version)

        profile = _section(data, 'profile')
        config.patch_profile = _as_bool(profile.get('patch', config.patch_profile), 'profile.patch')

        download = _section(data, 'download')
        config.download_timeout = _as_timeout(download.get('timeout', config.download_timeout))
        config.download_retries = _as_retries(download.get('retries', config.download_retries))

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for YAML export"""
        return {
            'home': str(self.home),
            'versions': {
                'uv': self.uv_version,
                'python': self.python_version,
                'fnm': self.fnm_version,
                'node': self.node_version,
            },
            'profile': {
                'patch': self.patch_profile,
            },
            'download': {
                'timeout': self.download_timeout,
                'retries': self.download_retries,
            },
        }

    def apply_env(self, environ: Mapping[str, str]) -> 'AgentEnvConfig':
        """Return a copy with AGENTS_* variables applied; blank values are ignored"""
        config = replace(self)
        for name, var in ENV_VARS.items():
            value = environ.get(var, '').strip()
            if not value:
                continue
            if name == 'home':
                config.home = Path(value).expanduser()
            elif name == 'download_timeout':
                config.download_timeout = _as_timeout(value)
            else:
                setattr(config, name, value)

        if environ.get(NO_MODIFY_PATH_ENV, '').strip().lower() in _TRUTHY:
            config.patch_profile = False
        return config

    def with_overrides(self, **overrides) -> 'AgentEnvConfig':
        """Return a copy with non-None overrides applied (CLI options)"""
        values = {key: value for key, value in overrides.items() if value is not None}
        if 'home' in values:
            values['home'] = Path(values['home']).expanduser()
        return replace(self, **values)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{key}' must be a mapping, got {section!r}")
    return section


def _as_version(versions: Dict[str, Any], key: str, default: str) -> str:
    value = versions.get(key, default)
    # YAML reads 3.10 as the float 3.1
    if isinstance(value, (bool, float)):
        raise ConfigError(f"versions.{key} must be a string, got {value!r}; quote it, e.g. \"3.10\"")
    if not isinstance(value, (str, int)):
        raise ConfigError(f"Invalid versions.{key}: {value!r}")
    return str(value)


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def _as_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid download timeout: {value!r}")
    if timeout <= 0:
        raise ConfigError(f"Download timeout must be positive, got {value!r}")
    return timeout


def _as_retries(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid download retry count: {value!r}")


class ConfigManager:
    """Locate, load and save agent-environment configuration"""

    DEFAULT_CONFIG_NAME = 'config.yml'
    CONFIG_ENV = 'AGENTS_CONFIG'

    @staticmethod
    def find_config(config_path: Optional[Path] = None,
                    environ: Optional[Mapping[str, str]] = None,
                    home: Optional[Path] = None) -> Optional[Path]:
        """
        Find the config file to use

        Order: explicit path, $AGENTS_CONFIG, then <home>/config.yml if present,
        where <home> is the --home option, else $AGENTS_HOME, else ~/.agents.

        Raises:
            ConfigError: an explicitly requested file does not exist
        """
        environ = os.environ if environ is None else environ

        explicit = config_path or environ.get(ConfigManager.CONFIG_ENV, '').strip() or None
        if explicit:
            path = Path(explicit).expanduser()
            if not path.is_file():
                raise ConfigError(f"Config file not found: {path}")
            return path

        if home is not None:
            home_path = Path(home).expanduser()
        else:
            env_home = environ.get(ENV_VARS['home'], '').strip()
            home_path = Path(env_home).expanduser() if env_home else default_home()
        candidate = home_path / ConfigManager.DEFAULT_CONFIG_NAME
        return candidate if candidate.is_file() else None

    @staticmethod
    def load_config(config_path: Optional[Path] = None,
                    environ: Optional[Mapping[str, str]] = None,
                    home: Optional[Path] = None) -> AgentEnvConfig:
        """
        Build the effective configuration (defaults < file < environment)

        Args:
            config_path: Explicit config file (default: search)
            environ: Environment mapping (default: os.environ)
            home: Install root from the command line; selects <home>/config.yml

        Returns:
            AgentEnvConfig

        Raises:
            ConfigError: unreadable or malformed config file, or invalid values
        """
        environ = os.environ if environ is None else environ
        config = AgentEnvConfig()

        path = ConfigManager.find_config(config_path, environ, home)
        if path is not None:
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to load config from {path}: {e}") from e

            if data is not None:
                if not isinstance(data, dict):
                    raise ConfigError(f"Config file {path} must contain a mapping")
                config = AgentEnvConfig.from_dict(data, base=config)

        return config.apply_env(environ)

    @staticmethod
    def save_config(config: AgentEnvConfig, config_path: Path) -> Path:
        """Save configuration as YAML"""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(
                config.to_dict(),
                f,
                default_flow_style=False,
                sort_keys=False,
                indent=2
            )
        return config_path
