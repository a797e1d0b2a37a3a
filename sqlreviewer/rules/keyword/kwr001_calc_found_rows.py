import re

from sqlreviewer.core.findings import OK_CODE
from sqlreviewer.extract.fingerprint import fingerprint
from sqlreviewer.rules.base import Check

# matched on the fingerprint so string literals and comments cannot trigger it
CALC_FOUND_ROWS = re.compile(r"\bsql_calc_found_rows\b")


class KWR001(Check):
    codes = ("KWR.001",)
    title = "SQL_CALC_FOUND_ROWS"

    def evaluate(self, audit, catalog):
        if CALC_FOUND_ROWS.search(fingerprint(audit.query)):
            return catalog.finding("KWR.001")
        return catalog.finding(OK_CODE)
