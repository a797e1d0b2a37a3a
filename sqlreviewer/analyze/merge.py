from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from sqlreviewer.core.findings import Finding
from sqlreviewer.exceptions import InvalidConfigError

SuggestionSet = Dict[str, Finding]
Resolver = Callable[[Mapping[str, Finding]], SuggestionSet]

# winner -> codes it makes redundant
DEFAULT_SUPERSEDES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "ERR.000": ("KWR.001",),
    "SUB.001": ("ARG.005", "JOI.006"),
    "SUB.004": ("SUB.001",),
    "KEY.008": ("KEY.004",),
    "JOI.002": ("JOI.006",),
    "JOI.008": ("JOI.007",),
    "IDX.001": ("CLA.004",),
})


class SupersedePolicy:
    """
    Drop findings made redundant by a more specific one.

    Winners are visited in sorted code order and a loser is removed only if its
    winner is still present at that point. Applying the policy twice gives the
    same map as applying it once.
    """

    def __init__(self, table: Optional[Mapping[str, Iterable[str]]] = None):
        source = DEFAULT_SUPERSEDES if table is None else table
        frozen: Dict[str, Tuple[str, ...]] = {}
        for winner, losers in source.items():
            losers = tuple(losers)
            if winner in losers:
                raise InvalidConfigError("supersede_rules", winner, "a rule cannot supersede itself")
            frozen[winner] = losers
        self.table: Mapping[str, Tuple[str, ...]] = MappingProxyType(frozen)

    def __call__(self, findings: Mapping[str, Finding]) -> SuggestionSet:
        out = dict(findings)
        for winner in sorted(self.table):
            if winner not in out:
                continue
            for loser in self.table[winner]:
                out.pop(loser, None)
        return out


def merge_findings(*maps: Mapping[str, Finding], policy: Optional[Resolver] = None) -> SuggestionSet:
    """Combine analyzer outputs, later maps overriding earlier ones, then apply ``policy``."""
    merged: SuggestionSet = {}
    for m in maps:
        merged.update(m)
    resolve = policy if policy is not None else SupersedePolicy()
    return resolve(merged)
