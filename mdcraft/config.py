import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / '.mdcraft' / 'config.json'
ENV_PREFIX = 'MDCRAFT_'

DEFAULT_CONFIG: Dict[str, Any] = {
    'history_limit': 50,
    'enable_experimental': False,
    'toc_align_center': True,
    'log_dir': None,
    'debug': False,
}

TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _coerce(key: str, raw: str) -> Any:
    """Convert an environment string to the type of the default value."""
    default = DEFAULT_CONFIG.get(key)
    if isinstance(default, bool):
        return raw.strip().lower() in TRUE_VALUES
    if isinstance(default, int):
        return int(raw)
    return raw


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Defaults, overlaid with the JSON config file, overlaid with MDCRAFT_* environment variables.
    A config file that cannot be read is logged and skipped.
    """
    config = dict(DEFAULT_CONFIG)
    config_file = Path(path) if path else CONFIG_FILE

    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level JSON value must be an object")
            unknown = set(data) - set(DEFAULT_CONFIG)
            if unknown:
                logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
            config.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG})
            logger.debug(f"Loaded config from {config_file}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config {config_file}: {e}")
    elif path:
        logger.warning(f"Config file not found: {config_file}")

    for key in DEFAULT_CONFIG:
        env_key = ENV_PREFIX + key.upper()
        if env_key in os.environ:
            try:
                config[key] = _coerce(key, os.environ[env_key])
            except ValueError as e:
                logger.error(f"Invalid value for {env_key}: {e}")

    return config


def save_config(config: Dict[str, Any], path: Optional[Path] = None):
    """Save configuration as JSON."""
    config_file = Path(path) if path else CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)
    logger.info(f"Configuration saved to {config_file}")
