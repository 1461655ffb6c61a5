"""3-layer configuration system for cmmc-audit.

Loads and merges configuration from:
1. Default settings (built-in)
2. Config file (--config, or cmmc-audit.yaml in the working directory)
3. CLI parameters (override)

Compliance thresholds live in core/checks.py and are not configurable.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_FILENAME = "cmmc-audit.yaml"

DEFAULT_CONFIG: dict = {
    "report": {
        "format": "HTML",
        "title": "CMMC 2.0 Compliance Report",
    },
    "probe": {
        "type": "windows",
        "snapshot": None,
        "command_timeout": 30,
        "powershell": "powershell.exe",
        "guest_account": "Guest",
        "security_log": "Security",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Path) -> dict:
    """Load a YAML config file. Missing, empty or invalid files yield {}."""
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_effective_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
    search_dir: Optional[Path] = None,
) -> dict:
    """Get the fully resolved configuration for an audit run."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = (search_dir or Path.cwd()) / DEFAULT_CONFIG_FILENAME

    file_config = load_config_file(Path(config_path))
    if file_config:
        config = deep_merge(config, file_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_config_path"] = str(config_path) if file_config else None

    return config
