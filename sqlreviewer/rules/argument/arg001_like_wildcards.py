from sqlglot import exp

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.rules.base import Check

WILDCARDS = ("%", "_")


class ARG001(Check):
    """
    LIKE against a string literal:
      - ARG.001 when the pattern starts with a wildcard (index unusable)
      - ARG.002 when it has no wildcard at all (really an equality)
    A leading wildcard anywhere in the query wins over a wildcard-free pattern.
    """

    codes = ("ARG.001", "ARG.002")
    title = "LIKE pattern shape"

    def evaluate(self, audit, catalog):
        no_wildcard = False

        for stmt in audit.ti_stmts:
            for like in stmt.find_all(exp.Like, exp.ILike):
                pattern = like.expression
                if not isinstance(pattern, exp.Literal) or not pattern.is_string:
                    continue
                text = pattern.this
                if text.startswith(WILDCARDS):
                    return catalog.finding("ARG.001")
                if not any(w in text for w in WILDCARDS):
                    no_wildcard = True

        if no_wildcard:
            return catalog.finding("ARG.002")
        return catalog.finding(OK_CODE)
