from __future__ import annotations

from typing import Iterator, Optional, Type, TypeVar

from sqlglot import exp

E = TypeVar("E", bound=exp.Expression)


def clause(stmt: exp.Expression, kind: Type[E]) -> Optional[E]:
    """Direct child clause of ``stmt`` of the given type (WHERE, FROM, LIMIT, ORDER)."""
    for value in stmt.args.values():
        if isinstance(value, kind):
            return value
    return None


def select_nodes(audit) -> Iterator[exp.Select]:
    """Every SELECT in every statement, subqueries and unions included."""
    for stmt in audit.ti_stmts:
        yield from stmt.find_all(exp.Select)


def function_name(node: exp.Expression) -> str:
    if isinstance(node, exp.Anonymous):
        return str(node.name).upper()
    if isinstance(node, exp.Func):
        return node.sql_name().upper()
    return ""
