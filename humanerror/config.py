"""
Runtime settings for the engine.

Settings are built from in-code defaults merged with an optional YAML file
(`configs/humanerror.yaml` or HUMANERROR_CONFIG_PATH). Later sources override
earlier ones, so a config file only needs the keys it changes.

Examples:
    >>> settings = load_settings()
    >>> settings.reveal.tick_interval_ms
    30
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
CONFIG_PATH = os.getenv("HUMANERROR_CONFIG_PATH")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "matching": {
        # Minimum fuzzy similarity for a candidate to be accepted
        "threshold": 0.6,
    },
    "classifier": {
        "enabled": False,
        "provider": os.getenv("LLM_PROVIDER", "openai"),
        "model": None,
        "timeout_s": 5.0,
    },
    "reveal": {
        "tick_interval_ms": 30,
        "secondary_delay_ms": 300,
    },
    "session": {
        # None keeps sessions in memory only
        "store_path": None,
    },
}


def load_settings(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> DictConfig:
    """
    Load engine settings.

    Args:
        config_path: Optional YAML file (defaults to HUMANERROR_CONFIG_PATH, if set)
        overrides: Optional nested dict applied last (e.g., from CLI flags)

    Returns:
        Read-only DictConfig with matching, classifier, reveal and session sections

    Raises:
        FileNotFoundError: If an explicit config path does not exist
    """
    layers = [OmegaConf.create(DEFAULT_SETTINGS)]

    if config_path is None and CONFIG_PATH:
        config_path = Path(CONFIG_PATH)

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        layers.append(OmegaConf.load(config_path))

    if overrides:
        layers.append(OmegaConf.create(overrides))

    settings = OmegaConf.merge(*layers)
    OmegaConf.set_readonly(settings, True)
    return settings
