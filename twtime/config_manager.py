"""
Configuration management for the Teamwork timesheet client
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Union

from .models import Config, ProjectAlias, TimeOff

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".teamwork"

PathLike = Union[str, Path]


class ConfigurationError(Exception):
    """Raised when there's an issue with configuration"""
    pass


class NoConfigError(ConfigurationError):
    """Raised when a command needs a configuration file that does not exist yet"""

    def __init__(self, path: PathLike = DEFAULT_CONFIG_PATH):
        super().__init__(f"no config file {path}")


def validate_config_data(config_data: dict) -> None:
    """Validate configuration data structure and values"""
    if not isinstance(config_data, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    required_fields = ['company_id', 'token']
    for field in required_fields:
        if not config_data.get(field):
            raise ConfigurationError(f"Missing required field: {field}")

    for field in ['project_aliases', 'times_off', 'starred_tasks']:
        if not isinstance(config_data.get(field, []), list):
            raise ConfigurationError(f"Field {field} must be a list")


def config_from_dict(config_data: dict) -> Config:
    validate_config_data(config_data)

    try:
        return Config(
            company_id=str(config_data['company_id']),
            token=config_data['token'],
            project_aliases=tuple(
                ProjectAlias(project_id=str(a['project_id']), alias=a['alias'])
                for a in config_data.get('project_aliases', [])
            ),
            times_off=tuple(
                TimeOff(date=t['date'], hours=int(t['hours']))
                for t in config_data.get('times_off', [])
            ),
            starred_tasks=tuple(str(t) for t in config_data.get('starred_tasks', [])),
            api_host=config_data.get('api_host', 'eu.teamwork.com'),
            log_level=config_data.get('log_level', 'INFO'),
            log_file=config_data.get('log_file'),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration entry: {e!r}")


def config_to_dict(config: Config) -> dict:
    data = asdict(config)
    # Tuples come out of asdict as tuples, the file stores lists
    for field in ['project_aliases', 'times_off', 'starred_tasks']:
        data[field] = list(data[field])
    if data['log_file'] is None:
        del data['log_file']
    return data


def load_config(config_file: PathLike = DEFAULT_CONFIG_PATH) -> Optional[Config]:
    """Load the configuration file, or None when it does not exist yet"""
    path = Path(config_file)
    if not path.exists():
        return None

    try:
        with open(path, 'r') as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading config: {e}")

    return config_from_dict(config_data)


def require_config(config_file: PathLike = DEFAULT_CONFIG_PATH) -> Config:
    config = load_config(config_file)
    if config is None:
        raise NoConfigError(config_file)
    return config


def save_config(config: Config, config_file: PathLike = DEFAULT_CONFIG_PATH) -> None:
    """Write the whole configuration back to disk"""
    path = Path(config_file)
    try:
        with open(path, 'w') as f:
            json.dump(config_to_dict(config), f, indent=2)
    except OSError as e:
        raise ConfigurationError(f"Unable to write config file {path}: {e}")
    logger.debug(f"Saved configuration to {path}")


def save_token_and_company(company_id: str, token: str,
                           config_file: PathLike = DEFAULT_CONFIG_PATH) -> Config:
    try:
        config = Config(company_id=company_id, token=token)
    except ValueError as e:
        raise ConfigurationError(str(e))
    save_config(config, config_file)
    return config


def save_alias(project_id: str, alias: str, config_file: PathLike = DEFAULT_CONFIG_PATH) -> Config:
    config = require_config(config_file).with_alias(project_id, alias)
    save_config(config, config_file)
    return config


def save_time_off(day: str, hours: int, config_file: PathLike = DEFAULT_CONFIG_PATH) -> Config:
    config = require_config(config_file).with_time_off(day, hours)
    save_config(config, config_file)
    return config


def setup_logging(config: Optional[Config] = None, level: Optional[str] = None) -> None:
    """Setup logging for the package logger

    ``level`` overrides the level stored in the configuration.
    """
    package_logger = logging.getLogger(__name__.split('.')[0])

    # Clear existing handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    level_name = level or (config.log_level if config else 'INFO')
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    # File handler
    if config and config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
