from sqlglot import exp

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.rules.base import Check
from sqlreviewer.rules.sqlglot_helpers import function_name


class CLA002(Check):
    codes = ("CLA.002",)
    title = "ORDER BY RAND()"

    def evaluate(self, audit, catalog):
        for stmt in audit.ti_stmts:
            for order in stmt.find_all(exp.Order):
                for func in order.find_all(exp.Func):
                    if function_name(func) == "RAND":
                        return catalog.finding("CLA.002")
        return catalog.finding(OK_CODE)
