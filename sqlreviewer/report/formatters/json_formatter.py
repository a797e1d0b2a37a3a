"""JSON output for machine consumption."""

from __future__ import annotations

import json
from typing import Any, Dict

from sqlreviewer.core.findings import Category
from sqlreviewer.report.formatters.base import BaseFormatter


class JsonFormatter(BaseFormatter):
    name = "json"

    def format(self, report, config) -> str:
        heuristic = [
            f
            for f in sorted(report.findings.values(), key=lambda f: f.item)
            if f.category not in (Category.EXP, Category.IDX)
            and not (f.category is Category.ERR and not f.content)
        ]
        doc: Dict[str, Any] = {
            "ID": report.query_id,
            "Fingerprint": report.fingerprint,
            "Score": report.score,
            "Sample": report.sql,
            "Explain": [f.to_dict() for f in report.bucket(Category.EXP)],
            "HeuristicRules": [f.to_dict() for f in heuristic],
            "IndexRules": [f.to_dict() for f in report.bucket(Category.IDX)],
            "Tables": list(report.tables),
        }
        return json.dumps(doc, indent=2, ensure_ascii=False)
