"""
===========================================================
Records for Schema Introspection and Type Generation
===========================================================

Plain, immutable records describing what the introspector reads from
Snowflake's INFORMATION_SCHEMA and what the type generator produces from it.

Models:
    TableInfo: One row of INFORMATION_SCHEMA.TABLES
    ColumnInfo: One row of INFORMATION_SCHEMA.COLUMNS
    GeneratedProperty: One property of a generated TypeScript interface
    GeneratedInterface: One generated TypeScript interface (one per table)

Architecture:
    - Introspector builds TableInfo/ColumnInfo from executor rows (from_row)
    - TypeGenerator turns them into GeneratedInterface/GeneratedProperty
    - Nothing mutates a record after construction

Example:
    >>> from models.schema_models import TableInfo
    >>>
    >>> table = TableInfo.from_row({
    ...     'TABLE_CATALOG': 'ANALYTICS', 'TABLE_SCHEMA': 'CORE',
    ...     'TABLE_NAME': 'USERS', 'TABLE_TYPE': 'BASE TABLE', 'COMMENT': None,
    ... })
    >>> table.key
    ('CORE', 'USERS')
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

BASE_TABLE = 'BASE TABLE'
VIEW = 'VIEW'
TABLE_TYPES = (BASE_TABLE, VIEW)


def _lower_keys(row: Mapping[str, Any]) -> dict:
    """Snowflake returns upper-case result column names; accept either case."""
    return {str(key).lower(): value for key, value in row.items()}


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _as_nullable(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().upper() in ('YES', 'Y', 'TRUE')


@dataclass(frozen=True)
class TableInfo:
    """Table or view found in INFORMATION_SCHEMA.TABLES.

    Attributes:
        table_catalog: Database name
        table_schema: Schema name
        table_name: Table name
        table_type: 'BASE TABLE' or 'VIEW'
        comment: Table comment, if any
    """

    table_catalog: str
    table_schema: str
    table_name: str
    table_type: str = BASE_TABLE
    comment: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        """Identity of the table: (schema, name)."""
        return (self.table_schema, self.table_name)

    @property
    def is_view(self) -> bool:
        return self.table_type == VIEW

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'TableInfo':
        """Build a TableInfo from a metadata query row."""
        data = _lower_keys(row)
        return cls(
            table_catalog=data.get('table_catalog'),
            table_schema=data['table_schema'],
            table_name=data['table_name'],
            table_type=data.get('table_type') or BASE_TABLE,
            comment=data.get('comment') or None,
        )


@dataclass(frozen=True)
class ColumnInfo:
    """Column found in INFORMATION_SCHEMA.COLUMNS.

    Attributes:
        table_catalog: Database name
        table_schema: Schema name
        table_name: Owning table name
        column_name: Column name
        ordinal_position: 1-based position within the table
        column_default: Default expression, if any
        is_nullable: True when the column accepts NULL
        data_type: Raw vendor type, possibly parameterized (NUMBER(38,2))
        character_maximum_length: Max length for character types
        numeric_precision: Precision for numeric types
        numeric_scale: Scale for numeric types
        comment: Column comment, if any
    """

    table_catalog: str
    table_schema: str
    table_name: str
    column_name: str
    ordinal_position: int
    data_type: str
    is_nullable: bool = True
    column_default: Optional[str] = None
    character_maximum_length: Optional[int] = None
    numeric_precision: Optional[int] = None
    numeric_scale: Optional[int] = None
    comment: Optional[str] = None

    @property
    def table_key(self) -> Tuple[str, str]:
        """Identity of the owning table: (schema, name)."""
        return (self.table_schema, self.table_name)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'ColumnInfo':
        """Build a ColumnInfo from a metadata query row.

        ``is_nullable`` may be given as 'YES'/'NO' (catalog form) or a bool.
        """
        data = _lower_keys(row)
        return cls(
            table_catalog=data.get('table_catalog'),
            table_schema=data['table_schema'],
            table_name=data['table_name'],
            column_name=data['column_name'],
            ordinal_position=int(data['ordinal_position']),
            data_type=data['data_type'],
            is_nullable=_as_nullable(data.get('is_nullable', True)),
            column_default=data.get('column_default'),
            character_maximum_length=_optional_int(data.get('character_maximum_length')),
            numeric_precision=_optional_int(data.get('numeric_precision')),
            numeric_scale=_optional_int(data.get('numeric_scale')),
            comment=data.get('comment') or None,
        )


@dataclass(frozen=True)
class GeneratedProperty:
    """Property of a generated interface.

    Attributes:
        name: camelCase property name
        type: TypeScript type name (without the null union)
        nullable: Whether ``| null`` is added to the type
        comment: Doc comment, if any
    """

    name: str
    type: str
    nullable: bool = False
    comment: Optional[str] = None


@dataclass(frozen=True)
class GeneratedInterface:
    """Interface generated for one table.

    Attributes:
        name: PascalCase interface name
        table_name: Source table name
        schema: Source schema name
        properties: Properties in column ordinal order
        comment: Doc comment, if any
    """

    name: str
    table_name: str
    schema: str
    properties: Tuple[GeneratedProperty, ...] = field(default_factory=tuple)
    comment: Optional[str] = None
