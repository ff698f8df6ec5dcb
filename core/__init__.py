"""
=========================================
Core infrastructure package for typegen.
=========================================

Configuration records and logging setup shared by the CLI, the
introspector and the generator.

Modules:
    config: JSON/env configuration loading and validation
    logger: Centralized logging configuration

Example:
    >>> from core.config import load_config
    >>> from core.logger import setup_logging
    >>>
    >>> setup_logging(log_level='INFO')
    >>> config = load_config('typegen.config.json')
"""

__version__ = "0.1.0"
__all__ = [
    'ConfigError',
    'ConnectionConfig',
    'GeneratorConfig',
    'IntrospectionConfig',
    'load_config',
    'load_connection_from_env',
    'merge_config',
    'validate_config',
    'get_logger',
    'setup_logging',
]

from core.config import (
    ConfigError,
    ConnectionConfig,
    GeneratorConfig,
    IntrospectionConfig,
    load_config,
    load_connection_from_env,
    merge_config,
    validate_config,
)
from core.logger import get_logger, setup_logging
