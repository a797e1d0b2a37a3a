from __future__ import annotations

from typing import Iterable, List, Optional, Set

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from sqlreviewer.logging_config import get_logger

logger = get_logger(__name__)


def schema_meta_info(
    sql: str,
    current_db: str = "",
    *,
    dialect: str = "mysql",
    stmts: Optional[Iterable[exp.Expression]] = None,
) -> List[str]:
    """
    Tables referenced by ``sql`` as sorted, de-duplicated "`db`.`tbl`" strings.

    Unqualified tables take ``current_db``; with no database at all only "`tbl`"
    is returned. CTE names are not tables and are skipped. Already-parsed
    statements can be passed in ``stmts`` to avoid a second parse.
    """
    if stmts is None:
        if not sql or not sql.strip():
            return []
        try:
            stmts = [s for s in sqlglot.parse(sql, read=dialect) if s is not None]
        except SqlglotError as e:
            logger.debug("schema meta unavailable: %s", e)
            return []

    tables: Set[str] = set()
    for stmt in stmts:
        ctes = {cte.alias_or_name for cte in stmt.find_all(exp.CTE)}
        for table in stmt.find_all(exp.Table):
            name = table.name
            if not name or (not table.db and name in ctes):
                continue
            db = table.db or current_db
            tables.add(f"`{db}`.`{name}`" if db else f"`{name}`")

    return sorted(tables)


def pretty(sql: str, dialect: str = "mysql") -> str:
    """Pretty-printed ``sql``; the input is returned unchanged when it cannot be parsed."""
    if not sql or not sql.strip():
        return sql or ""
    try:
        return ";\n".join(sqlglot.transpile(sql, read=dialect, write=dialect, pretty=True))
    except SqlglotError as e:
        logger.debug("pretty print failed, using raw SQL: %s", e)
        return sql
