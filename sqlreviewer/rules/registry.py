from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import yaml
from jinja2 import Environment, StrictUndefined
from jinja2.exceptions import TemplateError

from sqlreviewer.config import ReviewConfig, default_config
from sqlreviewer.core.findings import OK_CODE, Finding, is_valid_code, severity_level
from sqlreviewer.exceptions import CatalogError, UnknownRuleError
from sqlreviewer.rules.base import OK_CHECK, Check
from sqlreviewer.rules.argument.arg001_like_wildcards import ARG001
from sqlreviewer.rules.classic.cla001_no_where import CLA001
from sqlreviewer.rules.classic.cla002_order_by_rand import CLA002
from sqlreviewer.rules.column.col001_select_star import COL001
from sqlreviewer.rules.function.fun004_sysdate import FUN004
from sqlreviewer.rules.keyword.kwr001_calc_found_rows import KWR001
from sqlreviewer.rules.result.res002_limit_without_order import RES002

CATALOG_FILE = Path(__file__).parent / "catalog.yaml"


def builtin_checks() -> List[Check]:
    return [
        ARG001(),
        CLA001(),
        CLA002(),
        COL001(),
        FUN004(),
        KWR001(),
        RES002(),
    ]


class RuleCatalog:
    """Immutable registry of rule metadata and the check bound to each code.

    Built once, then shared read-only by every review.
    """

    def __init__(self, rules: Iterable[Finding], checks: Optional[Iterable[Check]] = None):
        table: Dict[str, Finding] = {}
        for rule in rules:
            if not is_valid_code(rule.item):
                raise CatalogError(f"Malformed rule code: {rule.item!r}")
            if severity_level(rule.severity) is None:
                raise CatalogError(f"Malformed severity {rule.severity!r} for {rule.item}")
            if rule.item in table:
                raise CatalogError(f"Duplicate rule code: {rule.item}")
            table[rule.item] = rule

        if OK_CODE not in table:
            raise CatalogError("Catalog has no OK entry")

        bound: Dict[str, Check] = {}
        for check in checks or ():
            for code in check.codes:
                if code not in table:
                    raise CatalogError(f"{type(check).__name__} answers for unknown code {code}")
                if code in bound:
                    raise CatalogError(f"Code {code} is bound to more than one check")
                bound[code] = check

        self._rules: Mapping[str, Finding] = MappingProxyType(table)
        self._checks: Mapping[str, Check] = MappingProxyType(
            {code: bound.get(code, OK_CHECK) for code in table}
        )

    @staticmethod
    def default(config: Optional[ReviewConfig] = None) -> "RuleCatalog":
        """Catalog from the bundled YAML, contents rendered against ``config``."""
        return RuleCatalog(
            load_catalog_entries(CATALOG_FILE, config or default_config),
            builtin_checks(),
        )

    def lookup(self, code: str) -> Optional[Finding]:
        return self._rules.get(code)

    def __getitem__(self, code: str) -> Finding:
        try:
            return self._rules[code]
        except KeyError:
            raise UnknownRuleError(code) from None

    def __contains__(self, code: object) -> bool:
        return code in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.all_codes())

    def finding(self, code: str, position: int = 0) -> Finding:
        rule = self[code]
        return rule.at(position) if position else rule

    def all_codes(self) -> List[str]:
        return sorted(self._rules)

    def check_for(self, code: str) -> Check:
        if code not in self._checks:
            raise UnknownRuleError(code)
        return self._checks[code]

    def checks(self) -> List[Check]:
        """Distinct checks in code order. OKCheck is left out, it never fires."""
        seen: List[Check] = []
        for code in self.all_codes():
            check = self._checks[code]
            if check is OK_CHECK or any(check is s for s in seen):
                continue
            seen.append(check)
        return seen

    def listing(self) -> List[Finding]:
        """Every rule except OK, sorted by code."""
        return [self._rules[c] for c in self.all_codes() if c != OK_CODE]


def load_catalog_entries(path: Path, config: ReviewConfig) -> List[Finding]:
    try:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Cannot read rule catalog {path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogError(f"Rule catalog {path} must be a list of rules")

    env = Environment(undefined=StrictUndefined, autoescape=False)
    context = config.template_context()
    return [_entry_to_finding(entry, env, context) for entry in raw]


def _entry_to_finding(entry: Any, env: Environment, context: Dict[str, Any]) -> Finding:
    if not isinstance(entry, dict) or "item" not in entry:
        raise CatalogError(f"Catalog entry without an item code: {entry!r}")

    content = str(entry.get("content", ""))
    if "{{" in content:
        try:
            content = env.from_string(content).render(**context)
        except TemplateError as e:
            raise CatalogError(f"Cannot render content of {entry['item']}: {e}") from e

    return Finding(
        item=str(entry["item"]),
        severity=str(entry.get("severity", "")),
        summary=str(entry.get("summary", "")),
        content=content,
        case=str(entry.get("case", "")),
    )
