"""Markdown family: markdown, explain-digest, duplicate-key-checker and html."""

from __future__ import annotations

import re

from sqlreviewer.core.findings import Category
from sqlreviewer.report.formatters.base import BaseFormatter, template_env

_BLANK_RUNS = re.compile(r"\n{3,}")


def sample_text(report, style: str) -> str:
    if style == "fingerprint":
        return report.fingerprint
    if style == "sample":
        return report.sql
    return report.pretty_sql


class MarkdownFormatter(BaseFormatter):
    name = "markdown"
    template_name = "report.md.j2"

    def format(self, report, config) -> str:
        exp = report.bucket(Category.EXP)
        template = template_env().get_template(self.template_name)
        text = template.render(
            report=report,
            variant=self.name,
            sample=sample_text(report, config.explain_sql_report_type),
            score=report.rendered_score,
            errors=report.err_findings,
            exp_root=next((f for f in exp if f.item == "EXP.000"), None),
            exp_rest=[f for f in exp if f.item != "EXP.000"],
            profiling=report.bucket(Category.PRO),
            trace=report.bucket(Category.TRA),
            index=report.bucket(Category.IDX),
            heuristic=report.bucket(Category.HEURISTIC),
            narrative=report.narrative,
        )
        return _BLANK_RUNS.sub("\n\n", text).strip() + "\n"


class ExplainDigestFormatter(MarkdownFormatter):
    name = "explain-digest"


class DuplicateKeyFormatter(MarkdownFormatter):
    """Prints each index finding's case as the original CREATE TABLE."""

    name = "duplicate-key-checker"


class HtmlFormatter(MarkdownFormatter):
    name = "html"
    template_name = "report.html.j2"
