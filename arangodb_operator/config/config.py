"""
This module loads the library config at import time, validates it and does the
initial log configuration
"""

# Standard
import os

# First Party
import aconfig
import alog

# Local
from ..exceptions import ConfigError
from .validation import get_invalid_params

_CONFIG_DIR = os.path.dirname(__file__)


def _load_yaml(file_name: str, override_env_vars: bool) -> aconfig.Config:
    return aconfig.Config.from_yaml(
        os.path.join(_CONFIG_DIR, file_name),
        override_env_vars=override_env_vars,
    )


# Parse the validation file, not allowing env overrides
validation_config = _load_yaml("config_validation.yaml", override_env_vars=False)


def load_library_config() -> aconfig.Config:
    """Read the library config, allowing env overrides, and validate it

    Returns:
        library_config:  aconfig.Config
            The validated library config

    Raises:
        ConfigError: Naming every key that holds an invalid value
    """
    loaded_config = _load_yaml("config.yaml", override_env_vars=True)
    invalid_params = get_invalid_params(loaded_config, validation_config)
    if invalid_params:
        raise ConfigError(
            f"Invalid library config values: {', '.join(sorted(invalid_params))}"
        )
    return loaded_config


def configure_logging(config: aconfig.Config):
    """Configure alog from the log settings of the given config"""
    alog.configure(
        default_level=config.log_level,
        filters=config.log_filters,
        formatter="json" if config.log_json else "pretty",
        thread_id=config.log_thread_id,
    )


library_config = load_library_config()
configure_logging(library_config)
