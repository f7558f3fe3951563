"""Client configuration from YAML file.

Loads from config/config.yaml with all settings in one place:
- Asset storage layout and download tuning
- HTTP session timeouts and connection pools
- Platform token refresh endpoint
- Logging output

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files.
"""

import hashlib
import json
import logging
import os
import re
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Configure module logger
logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# Default config file: config/config.yaml in src/ directory
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


@dataclass
class ClientConfig:
    """Platform app client configuration.

    Configuration structure:
        assets:
          user_data_dir: ...          # Host user data root
          media_apps_subpath: [...]   # Segments below user_data_dir
          state_file: ...             # Checksum table, relative to user_data_dir
          download_chunk_size: ...
          checksum_algorithm: ...
        http:
          timeout_total_seconds / timeout_connect_seconds / timeout_sock_read_seconds
          max_connections / max_connections_per_host
          api_timeout_seconds
        auth:
          refresh_url: ...
        logging:
          log_dir / json_format / console_level / log_to_stdout

    Timing values are in seconds.
    """

    # =========================================================================
    # ASSETS
    # =========================================================================
    user_data_dir: str = ""
    media_apps_subpath: List[str] = field(default_factory=lambda: ["Media", "Apps"])
    state_file: str = "platform-app-assets.json"
    download_chunk_size: int = 65536
    checksum_algorithm: str = "md5"

    # =========================================================================
    # HTTP
    # =========================================================================
    http_timeout_total_seconds: Optional[float] = None
    http_timeout_connect_seconds: Optional[float] = 30
    http_timeout_sock_read_seconds: Optional[float] = None
    http_max_connections: int = 100
    http_max_connections_per_host: int = 10
    api_timeout_seconds: int = 30

    # =========================================================================
    # AUTH
    # =========================================================================
    auth_refresh_url: str = ""

    # =========================================================================
    # LOGGING
    # =========================================================================
    log_dir: str = "logs"
    log_json_format: bool = True
    log_console_level: str = "INFO"
    log_to_stdout: bool = False

    @property
    def state_path(self) -> Path:
        """Absolute location of the persisted checksum table."""
        return Path(self.user_data_dir) / self.state_file

    def validate(self) -> None:
        """Validate configuration for correctness and constraints."""
        if not self.user_data_dir:
            raise ValueError("user_data_dir is required in assets section")

        if not self.media_apps_subpath or not all(
            isinstance(part, str) and part for part in self.media_apps_subpath
        ):
            raise ValueError(
                f"assets: media_apps_subpath must be a non-empty list of names, "
                f"got {self.media_apps_subpath!r}"
            )

        if not self.state_file:
            raise ValueError("assets: state_file must not be empty")

        if self.checksum_algorithm not in hashlib.algorithms_available:
            raise ValueError(
                f"assets: checksum_algorithm '{self.checksum_algorithm}' is not available"
            )

        self._validate_min("download_chunk_size", self.download_chunk_size, 1, "assets")
        self._validate_min("max_connections", self.http_max_connections, 1, "http")
        self._validate_min(
            "max_connections_per_host", self.http_max_connections_per_host, 1, "http"
        )
        self._validate_min("api_timeout_seconds", self.api_timeout_seconds, 1, "http")

        for name in (
            "http_timeout_total_seconds",
            "http_timeout_connect_seconds",
            "http_timeout_sock_read_seconds",
        ):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"http: {name} must be > 0 or null, got {value}")

        if self.auth_refresh_url and not self.auth_refresh_url.startswith(
            ("http://", "https://")
        ):
            raise ValueError(
                f"auth: refresh_url must start with http:// or https://, "
                f"got '{self.auth_refresh_url}'"
            )

        if self.log_console_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"logging: console_level must be one of {VALID_LOG_LEVELS}, "
                f"got '{self.log_console_level}'"
            )

    @staticmethod
    def _validate_min(key: str, value: Any, min_value: int, context: str) -> None:
        """Validate that a setting's value meets a minimum threshold."""
        if not isinstance(value, int) or value < min_value:
            raise ValueError(f"{context}: {key} must be >= {min_value}, got {value!r}")


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ClientConfig:
    """Load client configuration from config.yaml file.

    Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n" f"Expected file: config/config.yaml"
        )

    logger.info(f"Loading configuration from file: {config_path}")
    yaml_data = load_yaml(config_path)
    yaml_data = _expand_env_vars(yaml_data)

    if "assets" not in yaml_data:
        raise ValueError("Invalid config file: missing 'assets:' section")

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        yaml_data = _deep_merge(yaml_data, overrides)

    assets = yaml_data.get("assets") or {}
    http = yaml_data.get("http") or {}
    auth = yaml_data.get("auth") or {}
    log_settings = yaml_data.get("logging") or {}

    user_data_dir = os.getenv("PLATFORM_APPS_USER_DATA_DIR") or assets.get("user_data_dir", "")

    config = ClientConfig(
        user_data_dir=str(Path(user_data_dir).expanduser()) if user_data_dir else "",
        media_apps_subpath=list(assets.get("media_apps_subpath", ["Media", "Apps"])),
        state_file=assets.get("state_file", "platform-app-assets.json"),
        download_chunk_size=int(assets.get("download_chunk_size", 65536)),
        checksum_algorithm=str(assets.get("checksum_algorithm", "md5")).lower(),
        http_timeout_total_seconds=_optional_float(http.get("timeout_total_seconds")),
        http_timeout_connect_seconds=_optional_float(http.get("timeout_connect_seconds", 30)),
        http_timeout_sock_read_seconds=_optional_float(http.get("timeout_sock_read_seconds")),
        http_max_connections=int(http.get("max_connections", 100)),
        http_max_connections_per_host=int(http.get("max_connections_per_host", 10)),
        api_timeout_seconds=int(http.get("api_timeout_seconds", 30)),
        auth_refresh_url=os.getenv("PLATFORM_AUTH_REFRESH_URL") or auth.get("refresh_url", ""),
        log_dir=log_settings.get("log_dir", "logs"),
        log_json_format=_as_bool(log_settings.get("json_format", True)),
        log_console_level=str(log_settings.get("console_level", "INFO")).upper(),
        log_to_stdout=_as_bool(log_settings.get("log_to_stdout", False)),
    )

    if not config.auth_refresh_url:
        logger.warning("Platform token refresh URL not configured")

    logger.debug("Configuration loaded successfully:")
    logger.debug(f"  - User data dir: {config.user_data_dir}")
    logger.debug(f"  - Checksum algorithm: {config.checksum_algorithm}")

    logger.debug("Validating configuration...")
    config.validate()
    logger.debug("Configuration validation passed")

    return config


_client_config: Optional[ClientConfig] = None


def get_config() -> ClientConfig:
    """Get or load the singleton client config instance."""
    global _client_config
    if _client_config is None:
        _client_config = load_config()
    return _client_config


def set_config(config: ClientConfig) -> None:
    """Set the singleton client config instance (useful for testing)."""
    global _client_config
    _client_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _client_config
    _client_config = None


def _cli_main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for config validation and debugging."""
    import argparse

    from dotenv import load_dotenv

    parser = argparse.ArgumentParser(
        description="Platform App Client Configuration Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate configuration
  python -m config.config --validate

  # Show resolved configuration
  python -m config.config --show

  # JSON output for automation
  python -m config.config --validate --show --json
        """,
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration structure and values",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the resolved configuration",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.yaml file (default: src/config/config.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format instead of human-readable",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.validate and not args.show:
        parser.print_help()
        return 0

    try:
        config = load_config(config_path=args.config)
        output: Dict[str, Any] = {}

        if args.validate:
            # Validation happens during load_config(), if we got here it passed
            if args.json:
                output["validation"] = {"passed": True, "errors": []}
            else:
                print("✓ Configuration validation passed")
                print(f"  - Assets directory: {config.user_data_dir}")
                print(f"  - State file: {config.state_path}")

        if args.show:
            if args.json:
                output["config"] = asdict(config)
            else:
                print("\nConfiguration:")
                print("=" * 80)
                print(yaml.dump(asdict(config), default_flow_style=False, sort_keys=False))
                print("=" * 80)

        if args.json:
            print(json.dumps(output, indent=2))

        return 0

    except FileNotFoundError as e:
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"✗ Validation error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(_cli_main())
