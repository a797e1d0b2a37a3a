from sqlglot import exp

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.rules.base import Check
from sqlreviewer.rules.sqlglot_helpers import clause, select_nodes


class RES002(Check):
    codes = ("RES.002",)
    title = "LIMIT without ORDER BY"

    def evaluate(self, audit, catalog):
        for select in select_nodes(audit):
            if clause(select, exp.Limit) is not None and clause(select, exp.Order) is None:
                return catalog.finding("RES.002")
        return catalog.finding(OK_CODE)
