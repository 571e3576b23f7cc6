from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = 'XML_FIELD_ANALYZER_SETTINGS'

DEFAULT_SETTINGS: Dict[str, Any] = {
    'analysis': {
        'text_sample_length': 100,
        'tree_text_sample_length': 50,
    },
    'loading': {
        'max_workers': 4,
    },
    'logging': {
        'level': 'INFO',
    },
    'display': {
        'namespace_prefix': '',
    },
}


def _merge_settings(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Load settings from a JSON file layered over the defaults.

    The path defaults to the XML_FIELD_ANALYZER_SETTINGS environment variable.
    A missing or unreadable file falls back to the defaults.
    """
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return deepcopy(DEFAULT_SETTINGS)

    if not os.path.exists(path):
        logger.warning("Settings file not found at %s. Using defaults.", path)
        return deepcopy(DEFAULT_SETTINGS)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            overrides = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to load settings from %s: %s", path, e)
        return deepcopy(DEFAULT_SETTINGS)

    if not isinstance(overrides, dict):
        logger.warning("Settings file %s does not hold an object. Using defaults.", path)
        return deepcopy(DEFAULT_SETTINGS)
    return _merge_settings(DEFAULT_SETTINGS, overrides)


SETTINGS = load_settings()


def get_setting(key_path: str, default: Optional[Any] = None, settings: Optional[Dict[str, Any]] = None) -> Any:
    """Look up a dotted key such as 'analysis.text_sample_length'."""
    value: Any = SETTINGS if settings is None else settings
    for key in key_path.split('.'):
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
    return value if value is not None else default
