"""Plain line-oriented formats: text, lint and the diagnostic dump."""

from __future__ import annotations

from rich.pretty import pretty_repr

from sqlreviewer.core.findings import OK_CODE, Category
from sqlreviewer.report.formatters.base import BaseFormatter


class TextFormatter(BaseFormatter):
    name = "text"

    def format(self, report, config) -> str:
        blocks = []
        for f in report.ordered():
            blocks.append(
                "\n".join(
                    [
                        f"Query: {report.sql}",
                        f"ID: {report.query_id}",
                        f"Item: {f.item}",
                        f"Severity: {f.severity}",
                        f"Summary: {f.summary}",
                        f"Content: {f.content}",
                    ]
                )
            )
        return "\n\n".join(blocks)


class LintFormatter(BaseFormatter):
    """``<code> <summary>`` per finding. OK and EXP entries are not lint."""

    name = "lint"

    def format(self, report, config) -> str:
        return "\n".join(
            f"{f.item} {f.summary}"
            for f in report.ordered()
            if f.item != OK_CODE and f.category is not Category.EXP
        )


class DumpFormatter(BaseFormatter):
    """Fallback for unknown formats: the query and one repr per finding."""

    name = "dump"

    def format(self, report, config) -> str:
        lines = [f"Query: {report.sql}"]
        lines.extend(pretty_repr(f.to_dict(), max_width=200) for f in report.ordered())
        return "\n".join(lines)
