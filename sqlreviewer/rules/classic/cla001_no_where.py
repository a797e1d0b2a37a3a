from sqlglot import exp

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.rules.base import Check
from sqlreviewer.rules.sqlglot_helpers import clause


class CLA001(Check):
    """SELECT, DELETE or UPDATE at the top level without a WHERE clause."""

    codes = ("CLA.001", "CLA.014", "CLA.015")
    title = "Statement has no WHERE condition"

    def evaluate(self, audit, catalog):
        for stmt in audit.ti_stmts:
            if clause(stmt, exp.Where) is not None:
                continue

            if isinstance(stmt, exp.Select):
                source = clause(stmt, exp.From)
                if source is None or source.name.lower() == "dual":
                    continue
                return catalog.finding("CLA.001")
            if isinstance(stmt, exp.Delete):
                return catalog.finding("CLA.014")
            if isinstance(stmt, exp.Update):
                return catalog.finding("CLA.015")

        return catalog.finding(OK_CODE)
