from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Tuple

from sqlreviewer.core.findings import OK_CODE, Finding
from sqlreviewer.extract.query_loader import Query4Audit

if TYPE_CHECKING:
    from sqlreviewer.rules.registry import RuleCatalog


class Check(ABC):
    """A detection routine answering for one or more catalog codes.

    ``evaluate`` returns the catalog finding for the code that fired, or the
    ``OK`` finding when nothing did.
    """

    codes: Tuple[str, ...] = ()
    title: str = ""

    @abstractmethod
    def evaluate(self, audit: Query4Audit, catalog: "RuleCatalog") -> Finding:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self.codes)})"


class OKCheck(Check):
    """Bound to catalog entries whose detection lives in an external analyzer."""

    title = "No built-in detection"

    def evaluate(self, audit, catalog):
        return catalog.finding(OK_CODE)


OK_CHECK = OKCheck()
