from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlreviewer.analyze.scoring import clamp, score
from sqlreviewer.core.findings import CATEGORY_ORDER, Category, Finding

Bucket = Tuple[Category, Tuple[Finding, ...]]


@dataclass(frozen=True)
class Report:
    """Immutable snapshot of one reviewed statement, partitioned for rendering."""

    sql: str
    fingerprint: str
    query_id: str
    findings: Mapping[str, Finding]
    buckets: Tuple[Bucket, ...]
    score: int
    tables: Tuple[str, ...] = ()
    pretty_sql: str = ""
    narrative: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def bucket(self, category: Category) -> Tuple[Finding, ...]:
        for cat, items in self.buckets:
            if cat is category:
                return items
        return ()

    @property
    def err_findings(self) -> Tuple[Finding, ...]:
        """ERR entries with content. Empty-content ones are internal non-findings."""
        return tuple(f for f in self.bucket(Category.ERR) if f.content)

    @property
    def rendered_score(self) -> int:
        """Score shown by the markdown family: 0 on execution errors, else IDX and heuristic deductions."""
        if self.err_findings:
            return 0
        return score(self.bucket(Category.IDX) + self.bucket(Category.HEURISTIC))

    def ordered(self) -> List[Finding]:
        return [f for _, items in self.buckets for f in items]


def partition(findings: Mapping[str, Finding]) -> Tuple[Bucket, ...]:
    """Group findings by category in rendering precedence, each group sorted by code."""
    grouped: Dict[Category, List[Finding]] = {cat: [] for cat in CATEGORY_ORDER}
    for code in sorted(findings):
        f = findings[code]
        grouped[f.category].append(f)
    return tuple((cat, tuple(grouped[cat])) for cat in CATEGORY_ORDER)


def build_report(
    sql: str,
    fingerprint: str,
    query_id: str,
    findings: Mapping[str, Finding],
    *,
    tables: Tuple[str, ...] = (),
    pretty_sql: str = "",
    narrative: Optional[Dict[str, Any]] = None,
) -> Report:
    snapshot = MappingProxyType(dict(findings))
    return Report(
        sql=sql,
        fingerprint=fingerprint,
        query_id=query_id,
        findings=snapshot,
        buckets=partition(snapshot),
        score=clamp(score(snapshot.values())),
        tables=tuple(tables),
        pretty_sql=pretty_sql or sql,
        narrative=narrative,
    )
