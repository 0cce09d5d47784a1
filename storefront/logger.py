"""
Logging utilities for the storefront service.

Provides a single ``setup_logging`` entry point used by the app factory.
Modules obtain their logger with ``logging.getLogger(__name__)``.
"""

import copy
import logging
import logging.config
from typing import Optional

DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'DEBUG',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
    'loggers': {
        'storefront': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        }
    }
}


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Setup logging configuration

    Args:
        log_level: Override log level (e.g. 'DEBUG', 'info')
        log_format: Override log format ('default', 'detailed')
    """
    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    if log_format:
        if log_format not in config['formatters']:
            raise ValueError(f"Unknown log format: {log_format}")
        config['handlers']['console']['formatter'] = log_format

    if log_level:
        level = log_level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {log_level}")
        config['root']['level'] = level
        config['loggers']['storefront']['level'] = level

    logging.config.dictConfig(config)
