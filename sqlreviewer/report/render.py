from __future__ import annotations

import json
import re
from typing import Dict, Type

from sqlreviewer.config import ReviewConfig
from sqlreviewer.logging_config import get_logger
from sqlreviewer.report.formatters.base import BaseFormatter, template_env
from sqlreviewer.report.formatters.json_formatter import JsonFormatter
from sqlreviewer.report.formatters.markdown_formatter import (
    DuplicateKeyFormatter,
    ExplainDigestFormatter,
    HtmlFormatter,
    MarkdownFormatter,
)
from sqlreviewer.report.formatters.text_formatter import DumpFormatter, LintFormatter, TextFormatter
from sqlreviewer.report.model import Report
from sqlreviewer.rules.registry import RuleCatalog

logger = get_logger(__name__)

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
    "lint": LintFormatter,
    "markdown": MarkdownFormatter,
    "html": HtmlFormatter,
    "explain-digest": ExplainDigestFormatter,
    "duplicate-key-checker": DuplicateKeyFormatter,
}

_BLANK_RUNS = re.compile(r"\n{3,}")


def get_formatter(name: str) -> BaseFormatter:
    """Formatter for ``name``; unknown or missing names get the diagnostic dump."""
    cls = FORMATTERS.get(name or "")
    if cls is None:
        logger.debug("unknown report format %r, falling back to dump", name)
        return DumpFormatter()
    return cls()


def render_report(report: Report, fmt: str, config: ReviewConfig) -> str:
    return get_formatter(fmt).format(report, config)


def render_rule_listing(catalog: RuleCatalog, fmt: str = "markdown") -> str:
    """Every catalog rule except OK, sorted by code, as JSON or a markdown document."""
    rules = catalog.listing()
    if fmt == "json":
        return json.dumps([r.to_dict() for r in rules], indent=2, ensure_ascii=False)

    text = template_env().get_template("rules.md.j2").render(rules=rules)
    return _BLANK_RUNS.sub("\n\n", text).strip() + "\n"
