"""
==============================================================
Comprehensive pytest suite for introspection/introspector.py
==============================================================

Sections:
---------
1. Unit tests - Wildcard matching and filtering
2. Integration tests - SchemaIntrospector against a fake executor
3. Edge case tests - Casing, empty inputs, failure propagation

Available markers:
------------------
unit, integration, edge_case

Test Coverage:
--------------
- match_pattern / filter_tables: wildcard semantics, include then exclude
- list_tables: query scope, row conversion, filtering
- list_columns: one query per schema, ordering preserved
- list_all_columns / introspect: per-schema batching
- test_connection: boolean result only

How to Execute:
---------------
All tests:          pytest tests/tests_introspection/test_introspector.py -v
By category:        pytest tests/tests_introspection/test_introspector.py -m integration
"""

import logging

import pytest

from core.config import IntrospectionConfig
from introspection.introspector import (
    SchemaIntrospector,
    filter_tables,
    group_tables_by_schema,
    match_pattern,
)
from models.schema_models import ColumnInfo, TableInfo
from utils.database_utils import QueryExecutionError


def _table(name, schema='CORE'):
    return TableInfo(table_catalog='ANALYTICS', table_schema=schema, table_name=name)


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
@pytest.mark.parametrize("value, pattern, expected", [
    ("EVENTS_RAW", "EVENTS*", True),
    ("USER_EVENTS", "EVENTS*", False),
    ("STAGING_TEMP", "*_TEMP", True),
    ("STAGING_TEMPLATE", "*_TEMP", False),
    ("EVENTS", "EVENTS*", True),
    ("users", "USERS", True),
    ("USERS1", "USERS?", True),
    ("USERS", "USERS?", False),
    ("USERS12", "USERS?", False),
    ("ANYTHING", "*", True),
])
def test_match_pattern(value, pattern, expected):
    """* is any run, ? one character, case-insensitive and anchored to the whole name."""
    assert match_pattern(value, pattern) is expected


@pytest.mark.unit
def test_match_pattern_treats_regex_characters_literally():
    assert match_pattern("A.B", "A.B") is True
    assert match_pattern("AXB", "A.B") is False
    assert match_pattern("COST$", "COST$") is True
    assert match_pattern("T(1)", "T(1)") is True


@pytest.mark.unit
def test_filter_tables_include_then_exclude():
    tables = [_table(n) for n in ("EVENTS_RAW", "EVENTS_TEMP", "USER_EVENTS", "USERS")]

    result = filter_tables(tables, include_patterns=["EVENTS*"], exclude_patterns=["*_TEMP"])

    assert [t.table_name for t in result] == ["EVENTS_RAW"]


@pytest.mark.unit
def test_filter_tables_without_patterns_keeps_everything():
    tables = [_table("A"), _table("B")]

    assert filter_tables(tables) == tables
    assert filter_tables(tables, [], []) == tables


@pytest.mark.unit
def test_filter_tables_uses_bare_table_name():
    """Patterns never see the schema-qualified name."""
    tables = [_table("USERS", schema="CORE")]

    assert filter_tables(tables, include_patterns=["CORE.*"]) == []
    assert filter_tables(tables, include_patterns=["USERS"]) == tables


@pytest.mark.unit
def test_group_tables_by_schema_keeps_first_seen_order():
    tables = [_table("B", "STAGING"), _table("A", "CORE"), _table("C", "STAGING")]

    grouped = group_tables_by_schema(tables)

    assert list(grouped) == ["STAGING", "CORE"]
    assert grouped["STAGING"] == ["B", "C"]


# =====================
# 2. INTEGRATION TESTS
# =====================

@pytest.mark.integration
def test_list_tables_converts_rows(fake_executor, table_row):
    executor = fake_executor(tables=[
        table_row("CORE", "ORDERS"),
        table_row("CORE", "USERS_V", table_type="VIEW", comment="Users view"),
    ])
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE"])

    tables = SchemaIntrospector(executor).list_tables(config)

    assert [t.key for t in tables] == [("CORE", "ORDERS"), ("CORE", "USERS_V")]
    assert tables[1].is_view is True
    assert tables[1].comment == "Users view"
    assert len(executor.queries) == 1
    assert "FROM ANALYTICS.INFORMATION_SCHEMA.TABLES" in executor.queries[0][0]


@pytest.mark.integration
def test_list_tables_logs_view_count(fake_executor, table_row, caplog):
    executor = fake_executor(tables=[
        table_row("CORE", "ORDERS"),
        table_row("CORE", "ORDERS_V", table_type="VIEW"),
        table_row("CORE", "USERS_V", table_type="VIEW"),
    ])
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE"])

    with caplog.at_level(logging.DEBUG, logger="introspection.introspector"):
        SchemaIntrospector(executor).list_tables(config)

    assert "3 after filtering (2 views)" in caplog.text


@pytest.mark.integration
def test_list_tables_applies_filters(fake_executor, table_row):
    executor = fake_executor(tables=[
        table_row("CORE", name) for name in ("EVENTS_RAW", "STAGING_TEMP", "STAGING_TEMPLATE", "USER_EVENTS")
    ])
    config = IntrospectionConfig(
        database="ANALYTICS",
        schemas=["CORE"],
        include_tables=["EVENTS*", "STAGING*"],
        exclude_tables=["*_TEMP"],
    )

    tables = SchemaIntrospector(executor).list_tables(config)

    assert [t.table_name for t in tables] == ["EVENTS_RAW", "STAGING_TEMPLATE"]


@pytest.mark.integration
def test_list_columns_single_query(fake_executor, column_row):
    executor = fake_executor(columns=[
        column_row("CORE", "ORDERS", "ORDER_ID", 1, "NUMBER", nullable="NO"),
        column_row("CORE", "USERS", "USER_ID", 1, "NUMBER", nullable="NO"),
    ])

    columns = SchemaIntrospector(executor).list_columns("ANALYTICS", "CORE", ["ORDERS", "USERS"])

    assert len(executor.queries) == 1
    assert all(isinstance(c, ColumnInfo) for c in columns)
    assert [c.table_name for c in columns] == ["ORDERS", "USERS"]
    assert columns[0].is_nullable is False


@pytest.mark.integration
def test_list_all_columns_batches_per_schema(fake_executor, table_row, column_row):
    """N tables over S schemas issue S column queries, not N."""
    executor = fake_executor(
        tables=[
            table_row("CORE", "ORDERS"),
            table_row("CORE", "USERS"),
            table_row("CORE", "PRODUCTS"),
            table_row("STAGING", "EVENTS_RAW"),
        ],
        columns=[
            column_row("CORE", "ORDERS", "ORDER_ID", 1, "NUMBER"),
            column_row("CORE", "USERS", "USER_ID", 1, "NUMBER"),
            column_row("CORE", "USERS", "EMAIL", 2, "VARCHAR"),
            column_row("STAGING", "EVENTS_RAW", "PAYLOAD", 1, "VARIANT"),
        ],
    )
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE", "STAGING"])

    columns = SchemaIntrospector(executor).list_all_columns(config)

    column_queries = [q for q in executor.metadata_queries if "COLUMNS" in q]
    assert len(column_queries) == 2
    assert "table_name IN ('ORDERS', 'USERS', 'PRODUCTS')" in column_queries[0]
    assert [c.column_name for c in columns] == ["ORDER_ID", "USER_ID", "EMAIL", "PAYLOAD"]


@pytest.mark.integration
def test_introspect_lists_tables_once(fake_executor, users_catalog):
    tables_rows, column_rows = users_catalog
    executor = fake_executor(tables=tables_rows, columns=column_rows)
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE"])

    tables, columns = SchemaIntrospector(executor).introspect(config)

    table_queries = [q for q in executor.metadata_queries if "TABLES" in q]
    assert len(table_queries) == 1
    assert [t.table_name for t in tables] == ["USERS"]
    assert [c.column_name for c in columns] == ["USER_ID", "EMAIL", "REVENUE"]


@pytest.mark.integration
def test_test_connection_success(fake_executor):
    executor = fake_executor()

    assert SchemaIntrospector(executor).test_connection() is True
    assert executor.queries == [("SELECT 1", ())]


@pytest.mark.integration
def test_test_connection_failure_returns_false(fake_executor):
    executor = fake_executor(error=QueryExecutionError("boom", "SELECT 1"))

    assert SchemaIntrospector(executor).test_connection() is False


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_list_columns_with_no_tables_issues_no_query(fake_executor):
    executor = fake_executor()

    assert SchemaIntrospector(executor).list_columns("ANALYTICS", "CORE", []) == []
    assert executor.queries == []


@pytest.mark.edge_case
def test_list_all_columns_without_tables_issues_only_table_query(fake_executor):
    executor = fake_executor(tables=[])
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE"])

    assert SchemaIntrospector(executor).list_all_columns(config) == []
    assert len(executor.queries) == 1


@pytest.mark.edge_case
def test_lowercase_schema_is_treated_as_quoted(fake_executor, table_row):
    """A lowercase schema is sent as-is; no rows come back and no error is raised."""
    executor = fake_executor(tables=[])
    config = IntrospectionConfig(database="ANALYTICS", schemas=["core"])

    assert SchemaIntrospector(executor).list_tables(config) == []
    assert "table_schema IN ('core')" in executor.queries[0][0]


@pytest.mark.edge_case
def test_quoting_flags_reach_the_query(fake_executor):
    executor = fake_executor(tables=[])
    config = IntrospectionConfig(
        database="ANALYTICS", schemas=["core"], quoted_identifiers={"core": False}
    )

    SchemaIntrospector(executor).list_tables(config)

    assert "table_schema IN ('CORE')" in executor.queries[0][0]


@pytest.mark.edge_case
def test_executor_errors_propagate(fake_executor):
    error = QueryExecutionError("Query execution failed: denied", "SELECT ...")
    executor = fake_executor(error=error)
    config = IntrospectionConfig(database="ANALYTICS", schemas=["CORE"])

    with pytest.raises(QueryExecutionError) as exc_info:
        SchemaIntrospector(executor).list_all_columns(config)

    assert exc_info.value is error
