from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Union

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


def _to_level(level: Union[str, int], fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logging(
    general_level: Union[str, int] = 'INFO',
    module_levels: Optional[Dict[str, Union[str, int]]] = None,
    silenced_loggers: Optional[Dict[str, Union[str, int]]] = None,
) -> logging.Logger:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))

    return root_logger
