"""
==========================
Utility Functions Package.
==========================

Snowflake connectivity used by the introspector and the query layer.

Modules:
    database_utils: Engine creation, query executor and connection errors
"""

__version__ = "0.1.0"
__all__ = [
    'QueryExecutionError',
    'SnowflakeConnectionError',
    'SnowflakeExecutor',
    'build_connection_url',
    'create_snowflake_engine',
    'describe_connection_error',
]

from .database_utils import (
    QueryExecutionError,
    SnowflakeConnectionError,
    SnowflakeExecutor,
    build_connection_url,
    create_snowflake_engine,
    describe_connection_error,
)
