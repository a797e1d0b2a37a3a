from sqlglot import exp

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.rules.base import Check
from sqlreviewer.rules.sqlglot_helpers import select_nodes


def _is_star(node: exp.Expression) -> bool:
    if isinstance(node, exp.Alias):
        node = node.this
    return isinstance(node, exp.Star) or (isinstance(node, exp.Column) and isinstance(node.this, exp.Star))


class COL001(Check):
    """``*`` or ``tbl.*`` in a select list. COUNT(*) and friends are fine."""

    codes = ("COL.001",)
    title = "SELECT *"

    def evaluate(self, audit, catalog):
        for select in select_nodes(audit):
            if any(_is_star(e) for e in select.expressions):
                return catalog.finding("COL.001")
        return catalog.finding(OK_CODE)
