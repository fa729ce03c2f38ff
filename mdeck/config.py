"""
User configuration.

Deck-wide defaults used when a document's frontmatter leaves a setting
unset. Loaded from YAML::

    defaults:
      theme: dark
      transition: fade
      aspect: "16:10"

The file is looked up in this order: explicit path, ``MDECK_CONFIG``
environment variable, ``~/.config/mdeck/config.yaml``.
"""
import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import PresentationMeta

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDECK_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/mdeck/config.yaml")


@dataclass
class DeckConfig:
    """Fallback presentation settings."""
    theme: str = "light"
    transition: str = "slide"
    aspect: str = "16:9"
    code_theme: Optional[str] = None

    def apply(self, meta: PresentationMeta) -> PresentationMeta:
        """Return *meta* with unset theme/transition/aspect/code theme filled in."""
        return dataclasses.replace(
            meta,
            theme=meta.theme or self.theme,
            transition=meta.transition or self.transition,
            aspect=meta.aspect or self.aspect,
            code_theme=meta.code_theme or self.code_theme,
        )


def find_config_file() -> Optional[Path]:
    """Locate the config file, or ``None`` if there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def load_config(config_path: Optional[Path] = None) -> DeckConfig:
    """
    Load the user configuration.

    A missing file gives the built-in defaults; an unreadable or malformed
    one is logged and also gives the defaults.

    Args:
        config_path: Path to config file (auto-detected if None)

    Returns:
        DeckConfig instance
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not Path(config_path).exists():
        logger.info("No config file found, using defaults")
        return DeckConfig()

    logger.info(f"Loading config from: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config: {e}, using defaults")
        return DeckConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config file {config_path} is not a mapping, using defaults")
        return DeckConfig()
    return _parse_config_dict(data)


def _parse_config_dict(data: Dict[str, Any]) -> DeckConfig:
    config = DeckConfig()
    defaults = data.get("defaults")
    if not isinstance(defaults, dict):
        return config

    values = {}
    for f in dataclasses.fields(DeckConfig):
        key = f.name.replace("_", "-")
        value = defaults.get(f.name, defaults.get(key))
        if value is not None:
            values[f.name] = str(value)
    return dataclasses.replace(config, **values)
