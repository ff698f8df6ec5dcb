"""
=====================
SQL Sanity Checks.
=====================

Structural checks run over compiled SQL before it is sent to Snowflake:

- Balanced parentheses
- Statement chaining into a destructive statement (``; DROP ...``)

These are best-effort hints, not a parser. Failures are returned as a list
of human-readable reasons and never raised; the caller decides whether to
reject the query. The chaining check can be skipped because it flags
legitimate multi-statement scripts too.

Usage:
    from sql.validator import validate_sql

    result = validate_sql("SELECT * FROM t WHERE id IN (1, 2")
    result.valid    # False
    result.errors   # ['Unbalanced parentheses']
"""

import re
from dataclasses import dataclass, field
from typing import List

UNBALANCED_PARENTHESES = 'Unbalanced parentheses'

DANGEROUS_PATTERNS = [
    (re.compile(r';\s*DROP\s+', re.IGNORECASE),
     'Potentially dangerous SQL pattern detected: DROP statement chained after ";"'),
    (re.compile(r';\s*DELETE\s+FROM\s+', re.IGNORECASE),
     'Potentially dangerous SQL pattern detected: DELETE FROM statement chained after ";"'),
    (re.compile(r';\s*TRUNCATE\s+', re.IGNORECASE),
     'Potentially dangerous SQL pattern detected: TRUNCATE statement chained after ";"'),
    (re.compile(r';\s*ALTER\s+', re.IGNORECASE),
     'Potentially dangerous SQL pattern detected: ALTER statement chained after ";"'),
]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_sql; ``valid`` is True iff ``errors`` is empty."""

    valid: bool
    errors: List[str] = field(default_factory=list)


def find_dangerous_patterns(sql: str) -> List[str]:
    """Return one message per destructive statement chained after a semicolon."""
    return [message for pattern, message in DANGEROUS_PATTERNS if pattern.search(sql)]


def check_parentheses(sql: str) -> bool:
    """Return True when every ')' closes an earlier '(' and none is left open."""
    depth = 0
    for char in sql:
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def validate_sql(sql: str, skip_dangerous_patterns: bool = False) -> ValidationResult:
    """
    Run the structural checks over a SQL string.

    Args:
        sql: SQL text to check
        skip_dangerous_patterns: If True, only parenthesis balance is checked

    Returns:
        ValidationResult with every reason found
    """
    errors = []

    if not skip_dangerous_patterns:
        errors.extend(find_dangerous_patterns(sql))

    if not check_parentheses(sql):
        errors.append(UNBALANCED_PARENTHESES)

    return ValidationResult(valid=not errors, errors=errors)
