"""
===================================
Snowflake Metadata Query Builders.
===================================

Builds the INFORMATION_SCHEMA queries used by the schema introspector, and
decides how schema/table identifiers are cased before they are embedded in
those queries.

Identifier casing:
- resolve_identifier_case: upper-case unquoted identifiers, keep quoted ones

Metadata Query Functions:
- get_tables_sql: Tables and views of a set of schemas
- get_columns_sql: Columns of a set of tables in one schema
- connection_test_sql: Trivial no-op query

Casing heuristic:
    Snowflake stores unquoted identifiers upper-cased. An identifier that
    contains a lowercase character is assumed to have been created quoted
    and is passed through unchanged; anything else is upper-cased. An
    identifier created unquoted but configured lower-case is therefore
    treated as quoted, and the lookup simply returns no rows. Pass an
    explicit ``quoted`` flag to bypass the heuristic.

Usage:
    from sql.query_builder import get_tables_sql, resolve_identifier_case

    resolve_identifier_case('core')         # 'core' (quoted)
    resolve_identifier_case('Core_2')       # 'Core_2' (quoted)
    resolve_identifier_case('CORE')         # 'CORE'
    resolve_identifier_case('core', False)  # 'CORE'

    query = get_tables_sql('ANALYTICS', ['CORE', 'STAGING'])
"""

from typing import Dict, Iterable, List, Optional

from models.schema_models import TABLE_TYPES


def resolve_identifier_case(identifier: str, quoted: Optional[bool] = None) -> str:
    """
    Return the form of an identifier as stored in the catalog.

    Args:
        identifier: Schema or table name as configured
        quoted: True if the identifier was created quoted (case-sensitive),
            False if unquoted; None applies the lowercase-detection heuristic

    Returns:
        The identifier unchanged if quoted, otherwise upper-cased
    """
    if quoted is None:
        quoted = any(ch.islower() for ch in identifier)
    return identifier if quoted else identifier.upper()


def quote_literal(value: str) -> str:
    """Render a value as a single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _literal_list(
    identifiers: Iterable[str],
    quoted_identifiers: Optional[Dict[str, bool]] = None
) -> str:
    flags = quoted_identifiers or {}
    return ", ".join(
        quote_literal(resolve_identifier_case(name, flags.get(name)))
        for name in identifiers
    )


def get_tables_sql(
    database: str,
    schemas: List[str],
    quoted_identifiers: Optional[Dict[str, bool]] = None
) -> str:
    """
    Generate SQL listing the tables and views of the given schemas.

    Args:
        database: Database whose INFORMATION_SCHEMA is queried
        schemas: Schema names (cased through resolve_identifier_case)
        quoted_identifiers: Optional explicit quoting flags per identifier

    Returns:
        SQL query ordered by schema and table name
    """
    schemas_in = _literal_list(schemas, quoted_identifiers)
    types_in = ", ".join(quote_literal(t) for t in TABLE_TYPES)

    return f"""SELECT
    table_catalog,
    table_schema,
    table_name,
    table_type,
    comment
FROM {database}.INFORMATION_SCHEMA.TABLES
WHERE table_schema IN ({schemas_in})
  AND table_type IN ({types_in})
ORDER BY table_schema, table_name"""


def get_columns_sql(
    database: str,
    schema: str,
    table_names: List[str],
    quoted_identifiers: Optional[Dict[str, bool]] = None
) -> str:
    """
    Generate SQL listing the columns of several tables in one schema.

    Args:
        database: Database whose INFORMATION_SCHEMA is queried
        schema: Schema name (cased through resolve_identifier_case)
        table_names: Table names (cased through resolve_identifier_case)
        quoted_identifiers: Optional explicit quoting flags per identifier

    Returns:
        SQL query ordered by table name and ordinal position
    """
    flags = quoted_identifiers or {}
    schema_literal = quote_literal(resolve_identifier_case(schema, flags.get(schema)))
    tables_in = _literal_list(table_names, quoted_identifiers)

    return f"""SELECT
    table_catalog,
    table_schema,
    table_name,
    column_name,
    ordinal_position,
    column_default,
    is_nullable,
    data_type,
    character_maximum_length,
    numeric_precision,
    numeric_scale,
    comment
FROM {database}.INFORMATION_SCHEMA.COLUMNS
WHERE table_schema = {schema_literal}
  AND table_name IN ({tables_in})
ORDER BY table_name, ordinal_position"""


def connection_test_sql() -> str:
    """Generate the no-op query used to test a connection."""
    return "SELECT 1"
