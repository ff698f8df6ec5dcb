"""
=========================
Templated SQL Compilation.
=========================

Turns an interleaved sequence of literal SQL segments and parameter values
into parameterized SQL with ``?`` placeholders (Snowflake qmark style), plus
a few hints extracted from the statement text.

Interleaving contract:
    ``strings`` holds exactly one more segment than ``values``. Each value
    sits between two segments:

        parse_sql_template(["SELECT a FROM t WHERE x = ", " AND y = ", ""], [5, "US"])
        -> sql    "SELECT a FROM t WHERE x = ? AND y = ?"
           params (5, 'US')

    Segments may not contain a literal ``?``: every placeholder in the output
    stands for exactly one value. Pass such text as a value instead.

Values are moved to ``params`` before whitespace normalization runs, so
they are never inspected, quoted or altered by the string pass. That is the
injection defense: values only ever reach the driver as bind parameters.

Metadata extraction is regex based and only looks at the top-level
``SELECT ... FROM <name>``; joins, subqueries and CTEs are not understood.

Usage:
    from sql.template import sql

    query = sql(["SELECT email, revenue FROM analytics.core.users WHERE revenue > ", ""], 1000)
    query.to_sql().metadata.columns   # ['email', 'revenue']
    rows = query.execute(executor)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sql.validator import validate_sql
from utils.database_utils import QueryExecutionError

logger = logging.getLogger(__name__)

PLACEHOLDER = '?'

_FROM_PATTERN = re.compile(r'\bFROM\s+([a-zA-Z0-9_.]+)', re.IGNORECASE)
_SELECT_PATTERN = re.compile(r'\bSELECT\s+(.*?)\s+FROM\b', re.IGNORECASE | re.DOTALL)
_ALIAS_PATTERN = re.compile(r'\s+(?:AS\s+)?["\']?([a-zA-Z0-9_]+)["\']?\s*$', re.IGNORECASE)
_TRAILING_NAME_PATTERN = re.compile(r'([a-zA-Z0-9_]+)\s*$')


class InvalidSqlError(Exception):
    """Exception raised by sql() when a compiled query fails validation."""

    def __init__(self, sql_text: str, errors: List[str]):
        self.sql = sql_text
        self.errors = list(errors)
        super().__init__(
            "Invalid SQL query:\n" + "\n".join(self.errors) + f"\nSQL: {sql_text}"
        )


@dataclass(frozen=True)
class QueryMetadata:
    """Best-effort hints about a query.

    Attributes:
        table: Dotted name following the first FROM, if found
        columns: Selected column names (aliases preferred), None for ``*``
    """

    table: Optional[str] = None
    columns: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ParsedQuery:
    """Compiled query: SQL with placeholders and its bind parameters."""

    sql: str
    params: Tuple[Any, ...] = ()
    metadata: QueryMetadata = field(default_factory=QueryMetadata)


def normalize_whitespace(sql_text: str) -> str:
    """
    Normalize whitespace in a SQL skeleton.

    Trims the ends, collapses whitespace runs to one space, writes commas as
    ``", "`` and removes whitespace just inside parentheses.
    """
    sql_text = sql_text.strip()
    sql_text = re.sub(r'\s+', ' ', sql_text)
    sql_text = re.sub(r'\s*,\s*', ', ', sql_text)
    sql_text = re.sub(r'\(\s+', '(', sql_text)
    sql_text = re.sub(r'\s+\)', ')', sql_text)
    return sql_text.strip()


def _column_name(expression: str) -> str:
    alias = _ALIAS_PATTERN.search(expression)
    if alias:
        return alias.group(1)
    name = _TRAILING_NAME_PATTERN.search(expression)
    return name.group(1) if name else expression.strip()


def extract_metadata(sql_text: str) -> QueryMetadata:
    """
    Extract the FROM table and the selected column names from a query.

    Args:
        sql_text: Normalized SQL

    Returns:
        QueryMetadata; fields are None when nothing matched
    """
    table = None
    columns = None

    from_match = _FROM_PATTERN.search(sql_text)
    if from_match:
        table = from_match.group(1)

    select_match = _SELECT_PATTERN.search(sql_text)
    if select_match:
        selection = select_match.group(1)
        if selection.strip() != '*':
            names = [_column_name(part) for part in selection.split(',')]
            columns = tuple(name for name in names if name)

    return QueryMetadata(table=table, columns=columns)


def parse_sql_template(strings: Sequence[str], values: Sequence[Any]) -> ParsedQuery:
    """
    Compile interleaved literal segments and values into a ParsedQuery.

    Args:
        strings: Literal SQL segments
        values: Parameter values, one between each pair of segments

    Returns:
        ParsedQuery whose params are ``values`` in order

    Raises:
        ValueError: If len(strings) != len(values) + 1, or a segment
            contains a literal placeholder
    """
    if len(strings) != len(values) + 1:
        raise ValueError(
            f"Expected {len(values) + 1} SQL segments for {len(values)} values, "
            f"got {len(strings)}"
        )
    for segment in strings:
        if PLACEHOLDER in segment:
            raise ValueError(
                f"SQL segment contains a literal '{PLACEHOLDER}'; pass it as a value: {segment!r}"
            )

    parts = []
    params = []
    for index, segment in enumerate(strings):
        parts.append(segment)
        if index < len(values):
            parts.append(PLACEHOLDER)
            params.append(values[index])

    sql_text = normalize_whitespace(''.join(parts))

    return ParsedQuery(
        sql=sql_text,
        params=tuple(params),
        metadata=extract_metadata(sql_text),
    )


class SqlQuery:
    """
    A compiled, validated query ready to run through an executor.

    The executor is any object with ``execute(sql_text, params) -> rows``
    (see introspection.introspector.QueryExecutor); there is no global
    connection.
    """

    def __init__(self, parsed: ParsedQuery, executor=None):
        self._parsed = parsed
        self._executor = executor

    @property
    def sql(self) -> str:
        return self._parsed.sql

    @property
    def params(self) -> Tuple[Any, ...]:
        return self._parsed.params

    def execute(self, executor=None) -> List[Dict[str, Any]]:
        """
        Run the query and return its rows.

        Args:
            executor: Executor to use; defaults to the one bound at creation

        Raises:
            QueryExecutionError: If no executor is available, or from the executor
        """
        executor = executor or self._executor
        if executor is None:
            raise QueryExecutionError(
                "No executor provided. Pass one to sql(..., executor=...) "
                "or to SqlQuery.execute()."
            )
        logger.debug(f"Executing query with {len(self.params)} parameter(s): {self.sql}")
        return executor.execute(self._parsed.sql, self._parsed.params)

    def to_sql(self) -> ParsedQuery:
        """Return the compiled SQL, parameters and metadata without executing."""
        return self._parsed

    def __str__(self) -> str:
        return self._parsed.sql

    def __repr__(self) -> str:
        return f"SqlQuery(sql={self._parsed.sql!r}, params={self._parsed.params!r})"


def sql(strings: Sequence[str], *values: Any, executor=None) -> SqlQuery:
    """
    Compile and validate a templated query.

    Args:
        strings: Literal SQL segments
        *values: Parameter values interleaved between the segments
        executor: Optional executor bound to the returned query

    Returns:
        SqlQuery

    Raises:
        InvalidSqlError: If validate_sql reports any problem
        ValueError: If the segment/value counts do not interleave
            or a segment contains a literal placeholder

    Example:
        >>> query = sql(["SELECT * FROM users WHERE id = ", ""], 42)
        >>> str(query)
        'SELECT * FROM users WHERE id = ?'
    """
    parsed = parse_sql_template(strings, values)

    validation = validate_sql(parsed.sql)
    if not validation.valid:
        raise InvalidSqlError(parsed.sql, validation.errors)

    return SqlQuery(parsed, executor=executor)


def execute_query(executor, sql_text: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """Run raw SQL through an executor, bypassing compilation and validation."""
    return executor.execute(sql_text, tuple(params))
