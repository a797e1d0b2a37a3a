from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TypeVar

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from sqlreviewer.exceptions import ParseError, ParseTimeoutError
from sqlreviewer.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class Query4Audit:
    query: str                              # raw SQL text as received
    stmt: Optional[exp.Expression] = None   # lenient (generic dialect) AST
    stmt_error: Optional[str] = None        # why the lenient parse failed, if it did
    ti_stmts: List[exp.Expression] = field(default_factory=list)  # authoritative ASTs
    charset: Optional[str] = None
    collation: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return bool(self.ti_stmts)


def new_query4audit(
    sql: str,
    charset: Optional[str] = None,
    collation: Optional[str] = None,
    *,
    dialect: str = "mysql",
    timeout: Optional[float] = None,
) -> Query4Audit:
    """
    Parse one SQL statement twice:
      - leniently with sqlglot's generic dialect; a failure is logged and kept on the audit
      - authoritatively in ``dialect``; a failure raises ParseError carrying the audit

    Each parse is bounded by ``timeout`` seconds. Only the authoritative parse
    raises ParseTimeoutError; a slow lenient parse is recorded like a failed one.
    Empty SQL is not an error.
    """
    audit = Query4Audit(query=sql or "", charset=charset, collation=collation)
    if not audit.query.strip():
        return audit

    try:
        audit.stmt = _with_timeout(lambda: sqlglot.parse_one(audit.query), timeout)
    except concurrent.futures.TimeoutError:
        audit.stmt_error = f"lenient parse exceeded {timeout:g}s"
        logger.warning("lenient parse timed out after %gs, continuing without it", timeout)
    except SqlglotError as e:
        audit.stmt_error = str(e)
        logger.warning("lenient parse failed, continuing without it: %s", _first_line(e))

    try:
        stmts = _with_timeout(lambda: sqlglot.parse(audit.query, read=dialect), timeout)
    except concurrent.futures.TimeoutError:
        raise ParseTimeoutError(timeout, audit) from None
    except SqlglotError as e:
        raise ParseError(str(e), audit) from e

    audit.ti_stmts = [s for s in stmts if s is not None]
    return audit


def _with_timeout(func: Callable[[], T], timeout: Optional[float]) -> T:
    if timeout is None:
        return func()

    # a runaway parse keeps its worker thread, the caller returns at the timeout
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(func)
        return future.result(timeout=timeout)
    finally:
        executor.shutdown(wait=False)


def _first_line(e: Exception) -> str:
    text = str(e).strip()
    return text.splitlines()[0] if text else type(e).__name__


def split_statements(text: str) -> List[str]:
    """Split a script on ``;`` outside quotes and comments.

    Empty and comment-only statements are dropped.
    """
    out: List[str] = []
    buf: List[str] = []
    has_code = False
    i, n = 0, len(text)
    quote: Optional[str] = None

    def flush():
        stmt = "".join(buf).strip()
        if stmt and has_code:
            out.append(stmt)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if quote:
            buf.append(ch)
            if ch == "\\" and quote != "`" and nxt:
                buf.append(nxt)
                i += 2
                continue
            if ch == quote:
                if nxt == quote:
                    buf.append(nxt)
                    i += 2
                    continue
                quote = None
            i += 1
            continue

        if ch in ("'", '"', "`"):
            quote = ch
            has_code = True
            buf.append(ch)
        elif (ch == "-" and nxt == "-") or ch == "#":
            end = text.find("\n", i)
            end = n if end == -1 else end
            buf.append(text[i:end])
            i = end
            continue
        elif ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            buf.append(text[i:end])
            i = end
            continue
        elif ch == ";":
            flush()
            buf = []
            has_code = False
        else:
            has_code = has_code or not ch.isspace()
            buf.append(ch)
        i += 1

    flush()
    return out
