"""
Backend-neutral query descriptors built on the PostgreSQL AST via pglast.

A :class:`QueryDescriptor` carries PostgreSQL text with ``$n`` placeholders
and its parameter tuple. Both backends accept the same descriptor, so no SQL
is ever assembled by string interpolation of values.
"""

import dataclasses
import re
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pglast import ast, parse_sql
from pglast.stream import RawStream

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclasses.dataclass(frozen=True)
class QueryDescriptor:
    """A named, parameterized statement understood by every backend."""

    name: str
    sql: str
    params: Tuple[Any, ...] = ()
    returns_rows: bool = False

    def with_params(self, *params: Any) -> "QueryDescriptor":
        """Return a copy bound to ``params``; the SQL text is not re-parsed."""
        return dataclasses.replace(self, params=tuple(params))


def returns_rows(sql: str) -> bool:
    """
    Decide from the parse tree whether ``sql`` produces a row set.

    A single SELECT, or a single INSERT/UPDATE/DELETE with a RETURNING list,
    returns rows. Everything else (DDL, scripts, plain DML) is a mutation.
    """
    statements = parse_sql(sql)
    if len(statements) != 1:
        return False
    stmt = statements[0].stmt
    if isinstance(stmt, ast.SelectStmt):
        return True
    if isinstance(stmt, (ast.InsertStmt, ast.UpdateStmt, ast.DeleteStmt)):
        return bool(stmt.returningList)
    return False


def statement(name: str, sql: str, *params: Any) -> QueryDescriptor:
    """
    Create a descriptor from literal SQL text.

    Args:
        name: Operation label used when the query is recorded
        sql: PostgreSQL statement, values referenced as ``$1``, ``$2``...
        *params: Values bound to the placeholders

    Returns:
        QueryDescriptor: Descriptor with ``returns_rows`` derived from the AST
    """
    return QueryDescriptor(
        name=name, sql=sql.strip(), params=tuple(params), returns_rows=returns_rows(sql)
    )


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def insert_rows(
    name: str,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    schema: Optional[str] = None,
) -> QueryDescriptor:
    """
    Build a multi-row ``INSERT ... VALUES`` with one placeholder per value.

    The placeholder template is parsed back with pglast and rendered from
    the resulting tree, so the text handed to a backend is always a single,
    well-formed InsertStmt.

    Args:
        name: Operation label
        table: Target table
        columns: Column names, in value order
        rows: Row value sequences, each as long as ``columns``
        schema: Optional schema name

    Returns:
        QueryDescriptor: Parameterized insert
    """
    parameters: List[Any] = []
    values_lists = []
    for row in rows:
        if len(row) != len(columns):
            raise ValueError(
                f"Number of values ({len(row)}) must match number of columns ({len(columns)})"
            )
        placeholders = []
        for value in row:
            parameters.append(value)
            placeholders.append(f"${len(parameters)}")
        values_lists.append(f"({', '.join(placeholders)})")

    if not values_lists:
        raise ValueError(f"Insert into {table} needs at least one row")

    relation = _identifier(table)
    if schema is not None:
        relation = f"{_identifier(schema)}.{relation}"
    template = (
        f"INSERT INTO {relation} ({', '.join(_identifier(c) for c in columns)}) "
        f"VALUES {', '.join(values_lists)}"
    )

    statements = parse_sql(template)
    return QueryDescriptor(
        name=name, sql=RawStream()(statements[0]), params=tuple(parameters)
    )


def delete_all(name: str, table: str, schema: Optional[str] = None) -> QueryDescriptor:
    """Build an unconditional ``DELETE FROM table``."""
    delete_stmt = ast.DeleteStmt(
        relation=ast.RangeVar(relname=table, schemaname=schema, inh=True)
    )
    return QueryDescriptor(name=name, sql=RawStream()(delete_stmt))
