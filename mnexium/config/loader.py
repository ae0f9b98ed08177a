"""Locate and merge the TOML configuration layers.

Two layers are read from the config directory, later wins:

    default.toml          shared defaults
    {MNEXIUM_ENV}.toml    per-environment overlay

Both are optional. The client library is usable with no config directory
at all, in which case only code defaults and environment variables apply.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from mnexium.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_VAR = "MNEXIUM_CONFIG_DIR"
ENVIRONMENT_VAR = "MNEXIUM_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"

# How many directories above the working directory are searched
SEARCH_DEPTH = 5


def find_config_dir(start: Path | None = None) -> Path | None:
    """Return the config directory, or None when there is none.

    MNEXIUM_CONFIG_DIR is used as given, even if it does not exist.
    Otherwise the nearest `config/` holding a default.toml, walking up
    from `start` (the working directory by default).
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        return Path(explicit)

    here = (start or Path.cwd()).resolve()
    for directory in [here, *here.parents][:SEARCH_DEPTH]:
        candidate = directory / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate
    return None


def current_environment() -> str:
    """Name of the environment overlay to apply."""
    return os.environ.get(ENVIRONMENT_VAR) or DEFAULT_ENVIRONMENT


def read_layer(path: Path) -> dict[str, Any] | None:
    """Parse one TOML layer; None if the file is absent.

    Raises:
        tomllib.TOMLDecodeError: If the file exists but is not valid TOML
    """
    if not path.is_file():
        return None
    with path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` onto `base` without mutating either.

    Tables merge key by key; any other value, lists included, replaces.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Read default.toml and the environment overlay into one dict.

    Args:
        config_dir: Directory to read; located with find_config_dir if omitted
        environment: Overlay name; MNEXIUM_ENV (or development) if omitted

    Returns:
        The merged tables, {} when neither layer exists
    """
    directory = config_dir or find_config_dir()
    environment = environment or current_environment()

    if directory is None:
        logger.warning("config_file_not_found", msg="No config directory, using defaults")
        return {}

    default_path = directory / DEFAULT_FILE
    config = read_layer(default_path)
    if config is None:
        logger.warning("config_file_not_found", path=str(default_path))
        config = {}

    overlay = read_layer(directory / f"{environment}.toml")
    if overlay is not None:
        config = deep_merge(config, overlay)

    logger.debug(
        "config_loaded",
        config_dir=str(directory),
        environment=environment,
        overlay=overlay is not None,
    )
    return config
