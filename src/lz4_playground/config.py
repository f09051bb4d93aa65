import os
import pathlib
import sys
import yaml
from typing import Any, Dict, Optional, Tuple

from .constants import DEFAULT_CODEC_VERSION, DEFAULT_REGISTRY_URL, FALLBACK_CODEC_VERSION

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "data_path": "~/.local/share/lz4_playground",  # History and last metrics live here.
    "default_codec_version": DEFAULT_CODEC_VERSION,
    "fallback_codec_version": FALLBACK_CODEC_VERSION,
    "registry_url": DEFAULT_REGISTRY_URL,
    "codec_url_template": "",  # Empty disables remote codec modules.
    "history_page_size": 10,
    "verbose": False,
    "log_file": "",  # Empty means no file logging.
}

# Configuration file paths
USER_CONFIG_DIR = pathlib.Path("~/.config/lz4_playground").expanduser()
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yaml"
LOCAL_CONFIG_PATH = pathlib.Path(".lz4playground.yaml")

# Source descriptions
SOURCE_DEFAULT = "application default"
SOURCE_USER_CONFIG = f"user global config file ({USER_CONFIG_PATH})"
SOURCE_LOCAL_CONFIG = f"local project config file ({LOCAL_CONFIG_PATH})"
SOURCE_ENV_VAR = "environment variable"
SOURCE_OVERRIDE = "runtime override"
SOURCE_CLI = "command-line argument"

ENV_VAR_PREFIX = "LZ4_PLAYGROUND_"


def _coerce(key: str, value: Any) -> Any:
    """Convert ``value`` to the type of ``DEFAULT_CONFIG[key]`` or raise ValueError."""
    expected = type(DEFAULT_CONFIG[key])
    if isinstance(value, expected) and not (expected is int and isinstance(value, bool)):
        return value
    if isinstance(value, str):
        if expected is bool:
            return value.lower() in ("true", "1", "yes", "on")
        if expected is int:
            return int(value)
        if expected is float:
            return float(value)
    if expected is str and value is not None:
        return str(value)
    raise ValueError(f"Expected {expected.__name__} for '{key}', got {type(value).__name__}")


def _read_mapping(path: pathlib.Path) -> Dict[str, Any]:
    """Return the YAML mapping stored at ``path``; empty when missing or unreadable."""
    if not path.exists():
        return {}
    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading config '{path}': {e}", file=sys.stderr)
        return {}
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        print(f"Warning: config file '{path}' does not contain a mapping.", file=sys.stderr)
        return {}
    return loaded


class Config:
    def __init__(self):
        self._config: Dict[str, Any] = {}
        self._sources: Dict[str, str] = {}

        self._load_defaults()
        self._load_file(USER_CONFIG_PATH, SOURCE_USER_CONFIG)
        self._load_file(LOCAL_CONFIG_PATH, SOURCE_LOCAL_CONFIG)
        self._load_env_vars()
        # CLI overrides are applied afterwards via update_from_cli.

    def _load_defaults(self):
        for key, value in DEFAULT_CONFIG.items():
            self._config[key] = value
            self._sources[key] = SOURCE_DEFAULT

    def _load_file(self, path: pathlib.Path, source: str):
        for key, value in _read_mapping(path).items():
            if key not in DEFAULT_CONFIG:
                continue
            try:
                self._config[key] = _coerce(key, value)
                self._sources[key] = source
            except ValueError as e:
                print(f"Warning: ignoring '{key}' from '{path}': {e}", file=sys.stderr)

    def _load_env_vars(self):
        for key in DEFAULT_CONFIG.keys():
            env_var_name = ENV_VAR_PREFIX + key.upper()
            env_var_value_str = os.getenv(env_var_name)
            if env_var_value_str is None:
                continue
            try:
                self._config[key] = _coerce(key, env_var_value_str)
            except ValueError:
                print(
                    f"Warning: Could not cast env var {env_var_name} value '{env_var_value_str}' to type {type(DEFAULT_CONFIG[key]).__name__}. Ignoring it.",
                    file=sys.stderr,
                )
                continue
            self._sources[key] = f"{SOURCE_ENV_VAR} ({env_var_name})"

    def get(self, key: str, default: Any = None) -> Any:
        value = self._config.get(key, default)
        if key == "data_path" and isinstance(value, str) and value:
            return str(pathlib.Path(value).expanduser())
        return value

    def get_default(self, key: str) -> Any:
        return DEFAULT_CONFIG.get(key)

    def get_all_keys(self):
        return list(DEFAULT_CONFIG.keys())

    def set(self, key: str, value: Any, source: str = SOURCE_OVERRIDE) -> bool:
        """Validate ``value`` and persist it to the user config file."""
        if key not in DEFAULT_CONFIG:
            print(
                f"Error: Configuration key '{key}' is not a recognized setting. Allowed keys are: {', '.join(DEFAULT_CONFIG.keys())}",
                file=sys.stderr,
            )
            return False
        try:
            value = _coerce(key, value)
        except ValueError as e:
            print(f"Error: Invalid value for '{key}': {e}", file=sys.stderr)
            return False

        self._config[key] = value
        self._sources[key] = source

        user_config_data = _read_mapping(USER_CONFIG_PATH)
        user_config_data[key] = value

        try:
            USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "w") as f:
                yaml.safe_dump(user_config_data, f)
            return True
        except OSError as e:
            print(f"Error writing to user config: {e}", file=sys.stderr)
            return False

    def get_with_source(self, key: str) -> Optional[Tuple[Any, str]]:
        if key in self._config:
            return self._config[key], self._sources.get(key, "Unknown")
        elif key in DEFAULT_CONFIG:
            return DEFAULT_CONFIG[key], SOURCE_DEFAULT
        return None

    def get_all_with_sources(self) -> Dict[str, Tuple[Any, str]]:
        all_data = {}
        for key in DEFAULT_CONFIG.keys():
            all_data[key] = (
                self._config.get(key, DEFAULT_CONFIG[key]),
                self._sources.get(key, SOURCE_DEFAULT),
            )
        return all_data

    def update_from_cli(self, key: str, value: Any):
        if value is None:
            return
        if key in DEFAULT_CONFIG:
            try:
                value = _coerce(key, value)
            except ValueError:
                print(
                    f"Warning: CLI value for '{key}' ('{value}') could not be cast to {type(DEFAULT_CONFIG[key])}. Using as is.",
                    file=sys.stderr,
                )
        self._config[key] = value
        self._sources[key] = SOURCE_CLI
