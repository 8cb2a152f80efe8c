"""
Configuration loader — reads preflight.yml into a BuildConfiguration.

It reads YAML, validates against the Pydantic model, and resolves
relative directories against the config file's location.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from buildpreflight.core.models.config import BuildConfiguration

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "preflight.yml"


class ConfigError(Exception):
    """Raised when the build configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for preflight.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to preflight.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> BuildConfiguration:
    """Load and validate the build configuration.

    Args:
        path: Explicit path to preflight.yml. If None, searches upward.

    Returns:
        Validated BuildConfiguration.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading build config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # src_dir is relative to the config file, out_dir to src_dir
    base = path.parent.resolve()
    data["src_dir"] = base / (data.get("src_dir") or ".")
    if data.get("out_dir") is not None:
        data["out_dir"] = data["src_dir"] / data["out_dir"]

    try:
        config = BuildConfiguration.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid build configuration: {e}") from e

    logger.info(
        "Loaded build config: build=%s, %d hosts, %d targets",
        config.build, len(config.hosts), len(config.targets),
    )
    return config
