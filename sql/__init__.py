"""
=====================================
SQL utilities package for Snowflake.
=====================================

This package provides SQL construction and checking for the type generator
and for application queries:
    - query_builder.py: INFORMATION_SCHEMA queries and identifier casing
    - template.py: Templated SQL compilation (segments + values -> ? params)
    - validator.py: Structural sanity checks over SQL text

All functions here are pure (no I/O); execution goes through an executor
such as utils.database_utils.SnowflakeExecutor.

Example:
    >>> from sql import sql, validate_sql
    >>>
    >>> query = sql(["SELECT email FROM users WHERE revenue > ", ""], 1000)
    >>> query.to_sql().params
    (1000,)
    >>> validate_sql("SELECT (1").valid
    False
"""

__version__ = "0.1.0"
__all__ = [
    # Metadata queries
    'resolve_identifier_case', 'get_tables_sql', 'get_columns_sql',
    'connection_test_sql',
    # Templated SQL
    'InvalidSqlError', 'ParsedQuery', 'QueryMetadata', 'SqlQuery',
    'execute_query', 'parse_sql_template', 'sql',
    # Validation
    'ValidationResult', 'validate_sql',
]

from .query_builder import (
    connection_test_sql,
    get_columns_sql,
    get_tables_sql,
    resolve_identifier_case,
)
from .template import (
    InvalidSqlError,
    ParsedQuery,
    QueryMetadata,
    SqlQuery,
    execute_query,
    parse_sql_template,
    sql,
)
from .validator import ValidationResult, validate_sql
