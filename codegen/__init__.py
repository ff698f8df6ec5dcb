"""
===================================
TypeScript code generation package.
===================================

Modules:
    type_mapper: Snowflake type -> TypeScript type lookup
    type_generator: Interfaces and the generated .ts file
"""

__all__ = [
    'DEFAULT_TYPE_MAPPINGS',
    'UNKNOWN_TYPE',
    'TypeMapper',
    'TypeGenerator',
    'to_camel_case',
    'to_pascal_case',
]

from .type_generator import TypeGenerator, to_camel_case, to_pascal_case
from .type_mapper import DEFAULT_TYPE_MAPPINGS, UNKNOWN_TYPE, TypeMapper
