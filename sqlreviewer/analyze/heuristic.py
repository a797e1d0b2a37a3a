from __future__ import annotations

from typing import Dict, Iterable

from sqlreviewer.analyze.filters import is_ignored
from sqlreviewer.core.findings import OK_CODE, Finding
from sqlreviewer.extract.query_loader import Query4Audit
from sqlreviewer.logging_config import get_logger
from sqlreviewer.rules.registry import RuleCatalog

logger = get_logger(__name__)


def run_heuristic_checks(
    audit: Query4Audit, catalog: RuleCatalog, ignore_rules: Iterable[str] = ()
) -> Dict[str, Finding]:
    """
    Evaluate every built-in check once against ``audit``.

    A check is skipped when all the codes it answers for are ignored, and
    nothing runs without an authoritative AST. OK results are not kept.
    """
    if not audit.ti_stmts:
        return {}

    patterns = tuple(ignore_rules)
    findings: Dict[str, Finding] = {}

    for check in catalog.checks():
        if check.codes and all(is_ignored(code, patterns) for code in check.codes):
            continue
        result = check.evaluate(audit, catalog)
        if result.item != OK_CODE:
            logger.debug("%r fired %s", check, result.item)
            findings[result.item] = result

    return findings
