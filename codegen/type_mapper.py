"""
=====================================
Snowflake to TypeScript type mapping.
=====================================

Maps a Snowflake column type to the TypeScript type used in generated
declarations. Parameter suffixes are ignored, so ``NUMBER(38,2)`` and
``NUMBER`` map the same way. Caller overrides are layered on top of the
defaults; unknown types map to ``unknown``.

Usage:
    from codegen.type_mapper import TypeMapper

    mapper = TypeMapper({'NUMBER': 'bigint'})
    mapper.map_type('number(38,0)')   # 'bigint'
    mapper.map_type('VARIANT')        # 'JsonValue'
    mapper.map_type('VECTOR(FLOAT, 3)')  # 'unknown'
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

UNKNOWN_TYPE = 'unknown'

NUMBER_TYPE = 'number'
STRING_TYPE = 'string'
BOOLEAN_TYPE = 'boolean'
DATE_TYPE = 'Date'
JSON_VALUE_TYPE = 'JsonValue'
JSON_ARRAY_TYPE = 'JsonArray'
JSON_OBJECT_TYPE = 'JsonObject'

DEFAULT_TYPE_MAPPINGS: Mapping[str, str] = MappingProxyType({
    # Numeric types
    'NUMBER': NUMBER_TYPE,
    'DECIMAL': NUMBER_TYPE,
    'NUMERIC': NUMBER_TYPE,
    'INT': NUMBER_TYPE,
    'INTEGER': NUMBER_TYPE,
    'BIGINT': NUMBER_TYPE,
    'SMALLINT': NUMBER_TYPE,
    'TINYINT': NUMBER_TYPE,
    'BYTEINT': NUMBER_TYPE,
    'FLOAT': NUMBER_TYPE,
    'FLOAT4': NUMBER_TYPE,
    'FLOAT8': NUMBER_TYPE,
    'DOUBLE': NUMBER_TYPE,
    'DOUBLE PRECISION': NUMBER_TYPE,
    'REAL': NUMBER_TYPE,

    # String types
    'VARCHAR': STRING_TYPE,
    'CHAR': STRING_TYPE,
    'CHARACTER': STRING_TYPE,
    'NCHAR': STRING_TYPE,
    'NVARCHAR': STRING_TYPE,
    'STRING': STRING_TYPE,
    'TEXT': STRING_TYPE,
    'BINARY': STRING_TYPE,
    'VARBINARY': STRING_TYPE,

    # Boolean
    'BOOLEAN': BOOLEAN_TYPE,

    # Date/Time types
    'DATE': DATE_TYPE,
    'DATETIME': DATE_TYPE,
    'TIME': DATE_TYPE,
    'TIMESTAMP': DATE_TYPE,
    'TIMESTAMP_LTZ': DATE_TYPE,
    'TIMESTAMP_NTZ': DATE_TYPE,
    'TIMESTAMP_TZ': DATE_TYPE,

    # Semi-structured types
    'VARIANT': JSON_VALUE_TYPE,
    'OBJECT': JSON_OBJECT_TYPE,
    'ARRAY': JSON_ARRAY_TYPE,

    # Geospatial
    'GEOGRAPHY': STRING_TYPE,
    'GEOMETRY': STRING_TYPE,
})


def base_type_name(raw_type: str) -> str:
    """Upper-case a vendor type and drop its parameter suffix: 'number(38,2)' -> 'NUMBER'."""
    return raw_type.upper().split('(', 1)[0].strip()


class TypeMapper:
    """
    Vendor type to TypeScript type lookup.

    Attributes:
        type_mapping: Read-only merged mapping (defaults + overrides)
    """

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        """
        Args:
            overrides: Extra or replacement entries; keys are upper-cased
        """
        merged = dict(DEFAULT_TYPE_MAPPINGS)
        for key, value in (overrides or {}).items():
            merged[base_type_name(key)] = value
        self.type_mapping: Mapping[str, str] = MappingProxyType(merged)

    def map_type(self, raw_type: str) -> str:
        """Return the TypeScript type for ``raw_type``, or ``unknown``."""
        return self.type_mapping.get(base_type_name(raw_type), UNKNOWN_TYPE)
