"""
Configuration loading utilities.

Supports environment variable interpolation and layering over defaults.
A source tree needs no config file at all; `packagedb.yaml` at the root
is picked up when present.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from packagedb.config.settings import BuildConfig

DEFAULT_CONFIG_NAME = "packagedb.yaml"


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping at the top level"
        raise ValueError(msg)
    return _process_config_values(data)


def load_config(
    config_path: Path | None = None,
    root: Path | None = None,
) -> BuildConfig:
    """
    Load compiler configuration.

    Resolution order (later wins):
        1. Built-in defaults
        2. The config file (explicit path, or packagedb.yaml under root)
        3. An explicit root argument

    Args:
        config_path: Optional path to a YAML config file.
        root: Optional source root overriding `source.root`.

    Returns:
        Fully validated BuildConfig instance.

    Raises:
        FileNotFoundError: If an explicit config file does not exist.
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)
        data = load_yaml(config_path)
        # A relative root in a config file is relative to that file
        source = data.get("source", {})
        if "root" in source and not Path(source["root"]).is_absolute():
            data = _deep_merge(
                data, {"source": {"root": str(config_path.parent / source["root"])}}
            )
        elif "root" not in source and root is None:
            data = _deep_merge(data, {"source": {"root": str(config_path.parent)}})
    else:
        potential = (root or Path(".")) / DEFAULT_CONFIG_NAME
        if potential.exists():
            return load_config(potential, root=root)

    if root is not None:
        data = _deep_merge(data, {"source": {"root": str(root)}})

    return BuildConfig.model_validate(data)
