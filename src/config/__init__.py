"""Configuration loading for the platform app client.

Configuration is loaded from a single config/config.yaml file.

Main Functions
--------------

    - load_config(): Load client configuration from YAML
    - get_config(): Get or load singleton config instance
    - set_config(): Replace singleton config instance
    - reset_config(): Reset singleton config instance

Usage Examples
--------------

    >>> from config import get_config
    >>>
    >>> config = get_config()
    >>> config.state_path
    PosixPath('/home/user/.platform-apps/platform-app-assets.json')

Validate from the command line:

    $ python -m config.config --validate --show
"""

from config.config import (
    DEFAULT_CONFIG_FILE,
    ClientConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ClientConfig",
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
]
