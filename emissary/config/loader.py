"""Layered TOML configuration.

``config/default.toml`` is always read; ``config/{EMISSARY_ENV}.toml`` is
deep-merged over it when present. Environment variables are applied later
by the settings model itself.
"""

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "EMISSARY_CONFIG_DIR"
ENVIRONMENT_ENV = "EMISSARY_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"

_SEARCH_DEPTH = 5


def _search_roots() -> Iterator[Path]:
    current = Path.cwd()
    for _ in range(_SEARCH_DEPTH):
        yield current
        current = current.parent
    # Repository checkout next to the package
    yield Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Directory holding the TOML layers.

    ``EMISSARY_CONFIG_DIR`` wins and must exist. Otherwise the first
    ``config/`` with a ``default.toml`` found walking up from the working
    directory, falling back to the one beside the package.
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    for root in _search_roots():
        candidate = root / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate
    return Path(__file__).resolve().parents[2] / "config"


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: The file does not exist
        tomllib.TOMLDecodeError: The file is not valid TOML
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """New dict with ``override`` merged into ``base``; tables merge, scalars replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Read the default layer and the current environment's layer, if any."""
    config_dir = get_config_dir()

    default_path = config_dir / DEFAULT_FILE
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/{DEFAULT_FILE} or set {CONFIG_DIR_ENV}."
        )
    layers = [default_path]

    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.is_file():
        layers.append(env_path)

    config: dict[str, Any] = {}
    for layer in layers:
        config = deep_merge(config, load_toml(layer))
    return config
