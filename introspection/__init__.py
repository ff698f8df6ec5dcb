"""
===============================
Schema introspection package.
===============================

Modules:
    introspector: Table/column metadata from INFORMATION_SCHEMA
"""

__all__ = [
    'QueryExecutor',
    'SchemaIntrospector',
    'filter_tables',
    'match_pattern',
]

from .introspector import QueryExecutor, SchemaIntrospector, filter_tables, match_pattern
