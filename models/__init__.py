"""
=======================================
Records package for the type generator.
=======================================

Immutable records shared by the introspector and the type generator.

Models:
    TableInfo, ColumnInfo: INFORMATION_SCHEMA rows
    GeneratedInterface, GeneratedProperty: generated TypeScript declarations
"""

__all__ = [
    'BASE_TABLE',
    'VIEW',
    'TableInfo',
    'ColumnInfo',
    'GeneratedProperty',
    'GeneratedInterface',
]

from .schema_models import (
    BASE_TABLE,
    VIEW,
    ColumnInfo,
    GeneratedInterface,
    GeneratedProperty,
    TableInfo,
)
