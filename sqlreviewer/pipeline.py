from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from sqlreviewer.analyze.filters import finalize, is_blacklisted
from sqlreviewer.analyze.heuristic import run_heuristic_checks
from sqlreviewer.analyze.merge import Resolver, SupersedePolicy, merge_findings
from sqlreviewer.config import ReviewConfig, default_config
from sqlreviewer.core.findings import OK_CODE, Finding, is_valid_code
from sqlreviewer.exceptions import ConfigurationError, InvalidFindingsError, ParseError
from sqlreviewer.extract.fingerprint import fingerprint, query_id
from sqlreviewer.extract.query_loader import Query4Audit, new_query4audit, split_statements
from sqlreviewer.extract.schema_meta import pretty, schema_meta_info
from sqlreviewer.logging_config import get_logger
from sqlreviewer.report.model import Report, build_report
from sqlreviewer.report.render import render_report
from sqlreviewer.rules.registry import RuleCatalog

logger = get_logger(__name__)

PARSE_ERROR_CODE = "ERR.000"
MARKDOWN_FAMILY = ("markdown", "html", "explain-digest", "duplicate-key-checker")


@dataclass(frozen=True)
class ReviewOutcome:
    report: Report
    rendered: str
    audit: Query4Audit
    parse_error: Optional[ParseError] = None

    @property
    def findings(self) -> Mapping[str, Finding]:
        return self.report.findings

    @property
    def score(self) -> int:
        return self.report.score


def parse_error_finding(error: ParseError) -> Finding:
    return Finding(
        item=PARSE_ERROR_CODE,
        severity="L8",
        summary="SQL could not be parsed",
        content=str(error),
    )


def review(
    sql: str,
    *,
    catalog: RuleCatalog,
    config: Optional[ReviewConfig] = None,
    current_db: str = "",
    fmt: Optional[str] = None,
    charset: Optional[str] = None,
    collation: Optional[str] = None,
    extra: Iterable[Mapping[str, Finding]] = (),
    policy: Optional[Resolver] = None,
    run_ai: bool = False,
) -> Optional[ReviewOutcome]:
    """
    Review one statement end to end.

    Returns None when the statement is blacklisted. A parse failure does not
    raise: it becomes an ERR.000 finding in place of the heuristic results.
    """
    config = config or default_config
    fmt = fmt or config.report_type

    fp = fingerprint(sql)
    if is_blacklisted(sql, config.blacklist) or (fp and is_blacklisted(fp, config.blacklist)):
        logger.info("statement %s is blacklisted, skipped", query_id(fp) or "<empty>")
        return None

    parse_error: Optional[ParseError] = None
    try:
        audit = new_query4audit(
            sql, charset, collation, dialect=config.dialect, timeout=config.parse_timeout
        )
        heuristic = run_heuristic_checks(audit, catalog, config.ignore_rules)
    except ParseError as e:
        logger.warning("parse failed: %s", e)
        parse_error = e
        audit = e.audit
        heuristic = {PARSE_ERROR_CODE: parse_error_finding(e)}

    resolver = policy or SupersedePolicy(config.supersede_rules)
    merged = merge_findings(heuristic, *extra, policy=resolver)
    final = finalize(merged, catalog.finding(OK_CODE), config.ignore_rules)

    tables = schema_meta_info(sql, current_db, stmts=audit.ti_stmts) if audit.ti_stmts else []
    pretty_sql = ""
    if fmt in MARKDOWN_FAMILY and config.explain_sql_report_type == "pretty":
        pretty_sql = pretty(sql, config.dialect) if audit.ti_stmts else sql

    narrative = None
    if run_ai:
        if not os.environ.get("OPENAI_API_KEY"):
            raise ConfigurationError(
                "OPENAI_API_KEY not set. Add it to .env or the environment to use --ai."
            )
        from sqlreviewer.ai.review_ai import generate_review_narrative
        narrative = generate_review_narrative(sql, final.values())

    report = build_report(
        sql,
        fp,
        query_id(fp),
        final,
        tables=tuple(tables),
        pretty_sql=pretty_sql,
        narrative=narrative,
    )
    return ReviewOutcome(
        report=report,
        rendered=render_report(report, fmt, config),
        audit=audit,
        parse_error=parse_error,
    )


def review_many(script: str, **kwargs) -> List[ReviewOutcome]:
    """Review every statement of ``script``; blacklisted statements are left out.

    A script with no statements is reviewed as empty SQL.
    """
    outcomes = []
    for stmt in split_statements(script) or [""]:
        outcome = review(stmt, **kwargs)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def load_extra_findings(path: Path) -> Dict[str, Finding]:
    """
    Findings produced by an external analyzer (index advisor, EXPLAIN digest...).

    Accepts either {code: {Severity, Summary, ...}} or a list of rule objects
    carrying their own Item.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise InvalidFindingsError(f"Cannot read findings from {path}: {e}") from e

    if isinstance(data, dict):
        pairs = [(code, raw) for code, raw in data.items()]
    elif isinstance(data, list):
        pairs = [(raw.get("Item") if isinstance(raw, dict) else None, raw) for raw in data]
    else:
        raise InvalidFindingsError(f"{path}: expected an object or a list of rules")

    out: Dict[str, Finding] = {}
    for code, raw in pairs:
        if not isinstance(raw, dict) or not code or not is_valid_code(str(code)):
            raise InvalidFindingsError(f"{path}: invalid rule entry {raw!r}", details={"code": str(code)})
        try:
            out[str(code)] = Finding.from_dict(raw, item=str(code))
        except (TypeError, ValueError) as e:
            raise InvalidFindingsError(f"{path}: bad value in {code}: {e}", details={"code": str(code)}) from e
    return out
