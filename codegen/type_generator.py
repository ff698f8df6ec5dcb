"""
=========================================
TypeScript declaration generation module.
=========================================

Turns introspected tables and columns into TypeScript interfaces and renders
them as a single self-contained ``.ts`` file.

File layout:
    1. Header comment
    2. JSON helper types (JsonPrimitive, JsonArray, JsonObject, JsonValue)
    3. One ``export namespace`` per schema, in first-seen order
    4. ``export interface Database`` mapping each schema to its namespace

Nullable columns:
    A nullable column is rendered ``name: type | null`` and never
    ``name?: type``. Snowflake always returns every selected column; only
    its value may be NULL, so the key is never absent.

Example:
    >>> from codegen.type_generator import TypeGenerator
    >>>
    >>> generator = TypeGenerator(type_overrides={'NUMBER': 'bigint'})
    >>> interfaces = generator.generate_types(tables, columns)
    >>> code = generator.generate_file(interfaces)
"""

import json
import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from codegen.type_mapper import TypeMapper
from models.schema_models import ColumnInfo, GeneratedInterface, GeneratedProperty, TableInfo

logger = logging.getLogger(__name__)

INDENT = '  '

FILE_HEADER = """/**
 * Generated types from Snowflake schema
 * Do not edit manually - regenerate using: python main.py --generate
 */
"""

JSON_PREAMBLE = """// JSON types for VARIANT columns
export type JsonPrimitive = string | number | boolean | null;
export type JsonArray = JsonValue[];
export type JsonObject = { [key: string]: JsonValue };
export type JsonValue = JsonPrimitive | JsonArray | JsonObject;
"""

_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


def to_camel_case(name: str) -> str:
    """snake_case / UPPER_SNAKE to camelCase: 'USER_ID' -> 'userId', '_ID' -> 'Id'."""
    segments = [segment.lower() for segment in name.split('_')]
    return segments[0] + ''.join(s[:1].upper() + s[1:] for s in segments[1:])


def to_pascal_case(name: str) -> str:
    """snake_case / UPPER_SNAKE to PascalCase: 'ORDER_ITEMS' -> 'OrderItems'."""
    camel = to_camel_case(name)
    return camel[:1].upper() + camel[1:]


def _property_key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def _escape_comment(text: str) -> str:
    return text.replace('*/', '*\\/')


def _doc_block(comment: str) -> List[str]:
    lines = ['/**']
    lines.extend(f' * {line}'.rstrip() for line in _escape_comment(comment).splitlines())
    lines.append(' */')
    return lines


class TypeGenerator:
    """
    Generate TypeScript declarations from Snowflake metadata.

    Attributes:
        type_mapper: TypeMapper holding defaults plus overrides
    """

    def __init__(self, type_overrides: Optional[Dict[str, str]] = None):
        self.type_mapper = TypeMapper(type_overrides)

    def map_type(self, raw_type: str) -> str:
        """Map a Snowflake type to its TypeScript type."""
        return self.type_mapper.map_type(raw_type)

    def generate_interface(self, table: TableInfo, columns: Iterable[ColumnInfo]) -> GeneratedInterface:
        """
        Build the interface for one table.

        Args:
            table: Source table
            columns: Its columns, in any order (sorted by ordinal position here)

        Returns:
            GeneratedInterface with one property per column
        """
        ordered = sorted(columns, key=lambda column: column.ordinal_position)
        properties = tuple(
            GeneratedProperty(
                name=to_camel_case(column.column_name),
                type=self.map_type(column.data_type),
                nullable=column.is_nullable,
                comment=column.comment or None,
            )
            for column in ordered
        )
        return GeneratedInterface(
            name=to_pascal_case(table.table_name),
            table_name=table.table_name,
            schema=table.table_schema,
            properties=properties,
            comment=table.comment or None,
        )

    def generate_types(
        self,
        tables: List[TableInfo],
        columns: List[ColumnInfo]
    ) -> List[GeneratedInterface]:
        """Build one interface per table, matching columns by (schema, table)."""
        by_table: Dict[Tuple[str, str], List[ColumnInfo]] = {}
        for column in columns:
            by_table.setdefault(column.table_key, []).append(column)

        interfaces = []
        for table in tables:
            table_columns = by_table.get(table.key, [])
            if not table_columns:
                logger.warning(
                    f"No columns found for {table.table_schema}.{table.table_name}; "
                    "check identifier casing"
                )
            interfaces.append(self.generate_interface(table, table_columns))
        return interfaces

    def generate_interface_code(self, interface: GeneratedInterface) -> str:
        """Render one interface declaration (unindented, trailing newline)."""
        lines = []
        if interface.comment:
            lines.extend(_doc_block(interface.comment))

        lines.append(f'export interface {interface.name} {{')
        for prop in interface.properties:
            if prop.comment:
                comment = ' '.join(_escape_comment(prop.comment).split())
                lines.append(f'{INDENT}/** {comment} */')
            null_type = ' | null' if prop.nullable else ''
            lines.append(f'{INDENT}{_property_key(prop.name)}: {prop.type}{null_type};')
        lines.append('}')

        return '\n'.join(lines) + '\n'

    def generate_file(self, interfaces: List[GeneratedInterface]) -> str:
        """
        Render the complete TypeScript file.

        Args:
            interfaces: Interfaces in output order; schema blocks follow the
                order in which each schema is first seen

        Returns:
            File content
        """
        by_schema: Dict[str, List[GeneratedInterface]] = {}
        for interface in interfaces:
            by_schema.setdefault(interface.schema, []).append(interface)

        sections = [FILE_HEADER, JSON_PREAMBLE]

        for schema, schema_interfaces in by_schema.items():
            blocks = []
            for interface in schema_interfaces:
                code = self.generate_interface_code(interface)
                blocks.append('\n'.join(
                    f'{INDENT}{line}' if line else '' for line in code.rstrip('\n').split('\n')
                ))
            sections.append(
                f'// Schema: {schema}\n'
                f'export namespace {to_pascal_case(schema)} {{\n'
                + '\n\n'.join(blocks)
                + '\n}\n'
            )

        database_lines = ['// Database structure', 'export interface Database {']
        for schema in by_schema:
            database_lines.append(
                f'{INDENT}{_property_key(to_camel_case(schema))}: typeof {to_pascal_case(schema)};'
            )
        database_lines.append('}')
        sections.append('\n'.join(database_lines) + '\n')

        return '\n'.join(sections)
