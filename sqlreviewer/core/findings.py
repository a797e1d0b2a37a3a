from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

OK_CODE = "OK"

CODE_RE = re.compile(r"[A-Z]{3}\.\d{3}")
_SEVERITY_RE = re.compile(r"L([0-8])")


class Category(Enum):
    """Report bucket of a finding. Declaration order is rendering precedence."""

    ERR = "ERR"
    EXP = "EXP"
    PRO = "PRO"
    TRA = "TRA"
    IDX = "IDX"
    HEURISTIC = "heuristic"

    @classmethod
    def of(cls, code: str) -> "Category":
        prefix = code.split(".", 1)[0]
        if prefix in ("ERR", "EXP", "PRO", "TRA", "IDX"):
            return cls(prefix)
        return cls.HEURISTIC


CATEGORY_ORDER = tuple(Category)


def severity_level(severity: str) -> Optional[int]:
    """Return the numeric level of an ``L0``..``L8`` severity, or None when malformed."""
    m = _SEVERITY_RE.fullmatch(severity or "")
    return int(m.group(1)) if m else None


def is_valid_code(code: str) -> bool:
    return code == OK_CODE or bool(CODE_RE.fullmatch(code or ""))


@dataclass(frozen=True)
class Finding:
    item: str
    severity: str
    summary: str
    content: str = ""
    case: str = ""
    position: int = 0
    category: Category = field(default=None, compare=False)  # type: ignore[assignment]

    def __post_init__(self):
        if self.category is None:
            object.__setattr__(self, "category", Category.of(self.item))

    @property
    def level(self) -> Optional[int]:
        return severity_level(self.severity)

    def at(self, position: int) -> "Finding":
        return replace(self, position=position)

    def to_dict(self) -> Dict[str, Any]:
        # the producing check is never serialized
        return {
            "Item": self.item,
            "Severity": self.severity,
            "Summary": self.summary,
            "Content": self.content,
            "Case": self.case,
            "Position": self.position,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], item: Optional[str] = None) -> "Finding":
        code = item or data.get("Item") or ""
        return cls(
            item=code,
            severity=str(data.get("Severity", "")),
            summary=str(data.get("Summary", "")),
            content=str(data.get("Content", "")),
            case=str(data.get("Case", "")),
            position=int(data.get("Position", 0) or 0),
        )
