"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- fake_executor: FakeExecutor that records SQL and answers metadata queries
- table_row / column_row: builders for INFORMATION_SCHEMA-shaped rows
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'codegen', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "e2e: End-to-end tests - complete workflow tests")


class FakeExecutor:
    """
    In-memory query executor.

    Answers INFORMATION_SCHEMA.TABLES queries with ``tables`` and
    INFORMATION_SCHEMA.COLUMNS queries with the ``columns`` rows whose schema
    appears in the query. Every call is recorded in ``queries``.
    """

    def __init__(self, tables=None, columns=None, error=None):
        self.tables = tables or []
        self.columns = columns or []
        self.error = error
        self.queries = []
        self.connected = False
        self.closed = False

    def connect(self):
        self.connected = True

    def close(self):
        self.closed = True

    def execute(self, sql_text, params=()):
        self.queries.append((sql_text, tuple(params)))
        if self.error is not None:
            raise self.error
        if 'INFORMATION_SCHEMA.TABLES' in sql_text:
            return list(self.tables)
        if 'INFORMATION_SCHEMA.COLUMNS' in sql_text:
            return [
                row for row in self.columns
                if f"table_schema = '{row['TABLE_SCHEMA']}'" in sql_text
                and f"'{row['TABLE_NAME']}'" in sql_text
            ]
        return [{'1': 1}]

    @property
    def metadata_queries(self):
        return [q for q, _ in self.queries if 'INFORMATION_SCHEMA' in q]


def make_table_row(schema, name, table_type='BASE TABLE', comment=None, catalog='ANALYTICS'):
    """Row shaped like Snowflake's INFORMATION_SCHEMA.TABLES (upper-case keys)."""
    return {
        'TABLE_CATALOG': catalog,
        'TABLE_SCHEMA': schema,
        'TABLE_NAME': name,
        'TABLE_TYPE': table_type,
        'COMMENT': comment,
    }


def make_column_row(schema, table, name, position, data_type, nullable='YES', comment=None):
    """Row shaped like Snowflake's INFORMATION_SCHEMA.COLUMNS (upper-case keys)."""
    return {
        'TABLE_CATALOG': 'ANALYTICS',
        'TABLE_SCHEMA': schema,
        'TABLE_NAME': table,
        'COLUMN_NAME': name,
        'ORDINAL_POSITION': position,
        'COLUMN_DEFAULT': None,
        'IS_NULLABLE': nullable,
        'DATA_TYPE': data_type,
        'CHARACTER_MAXIMUM_LENGTH': None,
        'NUMERIC_PRECISION': None,
        'NUMERIC_SCALE': None,
        'COMMENT': comment,
    }


@pytest.fixture
def fake_executor():
    """Factory for FakeExecutor instances."""
    def factory(tables=None, columns=None, error=None):
        return FakeExecutor(tables=tables, columns=columns, error=error)

    return factory


@pytest.fixture
def table_row():
    return make_table_row


@pytest.fixture
def column_row():
    return make_column_row


@pytest.fixture
def users_catalog():
    """Tables/columns for CORE.USERS as returned by Snowflake."""
    tables = [make_table_row('CORE', 'USERS', comment='Application users')]
    columns = [
        make_column_row('CORE', 'USERS', 'USER_ID', 1, 'NUMBER', nullable='NO'),
        make_column_row('CORE', 'USERS', 'EMAIL', 2, 'VARCHAR(255)', nullable='NO'),
        make_column_row('CORE', 'USERS', 'REVENUE', 3, 'NUMBER(38,2)', nullable='YES'),
    ]
    return tables, columns
