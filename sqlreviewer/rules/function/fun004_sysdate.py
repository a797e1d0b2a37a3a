import re

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.extract.fingerprint import fingerprint
from sqlreviewer.rules.base import Check

SYSDATE_CALL = re.compile(r"\bsysdate\s*\(")


class FUN004(Check):
    """SYSDATE() is evaluated per row and is unsafe for statement-based replication."""

    codes = ("FUN.004",)
    title = "SYSDATE()"

    def evaluate(self, audit, catalog):
        if SYSDATE_CALL.search(fingerprint(audit.query)):
            return catalog.finding("FUN.004")
        return catalog.finding(OK_CODE)
