"""
Plugin configuration loader.

Reads the YAML plugin configuration named by the ``AUTOTRANSLATE_CONFIG``
environment setting (or an explicit path) into an ``AutoTranslateConfig``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from autotranslate.config import Settings, get_settings
from autotranslate.errors import ConfigurationError
from autotranslate.plugin_config import AutoTranslateConfig


def load_plugin_config(
    path: Path | str | None = None,
    settings: Settings | None = None,
) -> AutoTranslateConfig:
    """
    Load the plugin configuration.

    Args:
        path: YAML file; defaults to the AUTOTRANSLATE_CONFIG setting
        settings: Environment settings (default: cached settings)

    Returns:
        Parsed configuration; built-in defaults when no file is configured
    """
    settings = settings or get_settings()
    path = path or settings.autotranslate_config

    data: dict[str, Any] = {}
    if path:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Plugin config not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    config = AutoTranslateConfig.from_dict(data)
    if settings.debug:
        config.debugging = True
    return config
