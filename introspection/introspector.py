"""
======================================
Snowflake schema introspection module.
======================================

Reads table and column metadata from a database's INFORMATION_SCHEMA through
an injected query executor.

Key Features:
    - Tables and views of several schemas in one query
    - Include/exclude wildcard filtering on bare table names
    - Column lookups batched per schema (S queries for S schemas, not one
      per table)
    - Connection test that reports only success or failure

Wildcards:
    ``*`` matches any run of characters (including none), ``?`` exactly one.
    Matching is case-insensitive and covers the whole name: ``EVENTS*``
    matches ``EVENTS_RAW`` but not ``USER_EVENTS``.

Errors raised by the executor propagate unchanged. A schema or table whose
casing was resolved wrongly (see sql.query_builder) is not an error; it just
yields no rows.

Example:
    >>> from core.config import IntrospectionConfig
    >>> from introspection.introspector import SchemaIntrospector
    >>>
    >>> introspector = SchemaIntrospector(executor)
    >>> config = IntrospectionConfig(database='ANALYTICS', schemas=['CORE'],
    ...                              exclude_tables=['*_TEMP'])
    >>> tables, columns = introspector.introspect(config)
"""

import logging
import re
from typing import Any, Dict, List, Optional, Pattern, Protocol, Sequence, Tuple

from core.config import IntrospectionConfig
from models.schema_models import ColumnInfo, TableInfo
from sql.query_builder import connection_test_sql, get_columns_sql, get_tables_sql

logger = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    """Anything that can run SQL and return rows as dicts."""

    def execute(self, sql_text: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        ...


def wildcard_to_regex(pattern: str) -> Pattern:
    """Compile a ``*``/``?`` wildcard pattern into an anchored, case-insensitive regex."""
    parts = []
    for char in pattern:
        if char == '*':
            parts.append('.*')
        elif char == '?':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return re.compile('^' + ''.join(parts) + '$', re.IGNORECASE | re.DOTALL)


def match_pattern(value: str, pattern: str) -> bool:
    """Return True when the whole of ``value`` matches the wildcard ``pattern``."""
    return wildcard_to_regex(pattern).match(value) is not None


def filter_tables(
    tables: List[TableInfo],
    include_patterns: Optional[List[str]] = None,
    exclude_patterns: Optional[List[str]] = None
) -> List[TableInfo]:
    """
    Apply include then exclude patterns to table names.

    Args:
        tables: Tables in catalog order
        include_patterns: Keep a table if any pattern matches (all kept if empty)
        exclude_patterns: Drop a table if any pattern matches

    Returns:
        Filtered tables, order preserved
    """
    if include_patterns:
        tables = [
            t for t in tables
            if any(match_pattern(t.table_name, p) for p in include_patterns)
        ]
    if exclude_patterns:
        tables = [
            t for t in tables
            if not any(match_pattern(t.table_name, p) for p in exclude_patterns)
        ]
    return tables


def group_tables_by_schema(tables: List[TableInfo]) -> Dict[str, List[str]]:
    """Group table names by schema, keeping first-encountered schema order."""
    grouped: Dict[str, List[str]] = {}
    for table in tables:
        grouped.setdefault(table.table_schema, []).append(table.table_name)
    return grouped


class SchemaIntrospector:
    """
    Introspect Snowflake tables and columns.

    Attributes:
        executor: Query executor used for every metadata query

    Example:
        >>> introspector = SchemaIntrospector(SnowflakeExecutor(config.connection))
        >>> if introspector.test_connection():
        ...     tables = introspector.list_tables(config.to_introspection_config())
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def list_tables(self, config: IntrospectionConfig) -> List[TableInfo]:
        """
        List the base tables and views of the configured schemas.

        Args:
            config: Database, schemas and include/exclude patterns

        Returns:
            Filtered tables ordered by (schema, name)
        """
        query = get_tables_sql(config.database, config.schemas, config.quoted_identifiers)
        rows = self.executor.execute(query)
        tables = [TableInfo.from_row(row) for row in rows]

        filtered = filter_tables(tables, config.include_tables, config.exclude_tables)
        views = sum(1 for table in filtered if table.is_view)
        logger.debug(
            f"Found {len(tables)} tables in {config.database} "
            f"({', '.join(config.schemas)}), {len(filtered)} after filtering "
            f"({views} views)"
        )
        return filtered

    def list_columns(
        self,
        database: str,
        schema: str,
        table_names: List[str],
        quoted_identifiers: Optional[Dict[str, bool]] = None
    ) -> List[ColumnInfo]:
        """
        List the columns of several tables of one schema in a single query.

        Args:
            database: Database name
            schema: Schema name
            table_names: Tables whose columns are wanted
            quoted_identifiers: Optional explicit quoting flags per identifier

        Returns:
            Columns ordered by (table name, ordinal position)
        """
        if not table_names:
            return []
        query = get_columns_sql(database, schema, table_names, quoted_identifiers)
        rows = self.executor.execute(query)
        return [ColumnInfo.from_row(row) for row in rows]

    def _columns_for(self, config: IntrospectionConfig, tables: List[TableInfo]) -> List[ColumnInfo]:
        columns: List[ColumnInfo] = []
        for schema, table_names in group_tables_by_schema(tables).items():
            logger.debug(f"Fetching columns for {len(table_names)} tables in {schema}")
            columns.extend(
                self.list_columns(config.database, schema, table_names, config.quoted_identifiers)
            )
        return columns

    def list_all_columns(self, config: IntrospectionConfig) -> List[ColumnInfo]:
        """
        List the columns of every table selected by ``config``.

        Issues one column query per distinct schema.

        Returns:
            Columns grouped by schema (first-seen order), query order kept
        """
        return self._columns_for(config, self.list_tables(config))

    def introspect(self, config: IntrospectionConfig) -> Tuple[List[TableInfo], List[ColumnInfo]]:
        """
        List tables and their columns with a single table query.

        Returns:
            (tables, columns) as list_tables() and list_all_columns() return them
        """
        tables = self.list_tables(config)
        return tables, self._columns_for(config, tables)

    def test_connection(self) -> bool:
        """Run a no-op query; return True on success, False on any failure."""
        try:
            self.executor.execute(connection_test_sql())
            return True
        except Exception as e:
            logger.debug(f"Connection test failed: {e}")
            return False
