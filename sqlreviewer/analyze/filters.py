from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Optional, Pattern

from sqlreviewer.core.findings import OK_CODE, Finding
from sqlreviewer.logging_config import get_logger

logger = get_logger(__name__)

WILDCARD = "*"


def is_ignored(code: str, patterns: Iterable[str]) -> bool:
    """True when a pattern, stripped of ``*`` at either end, is a prefix of ``code``.

    The OK sentinel is never ignored and neither an empty pattern nor ``OK``
    suppresses anything.
    """
    if code == OK_CODE:
        return False
    for pattern in patterns:
        prefix = pattern.strip(WILDCARD)
        if not prefix or prefix == OK_CODE:
            continue
        if code.startswith(prefix):
            logger.debug("rule %s ignored by pattern %r", code, pattern)
            return True
    return False


@lru_cache(maxsize=512)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning("skipping malformed blacklist regex %r: %s", pattern, e)
        return None


def is_blacklisted(sql: str, patterns: Iterable[str]) -> bool:
    """True when ``sql`` equals an entry or a case-insensitive regex entry matches inside it."""
    for pattern in patterns:
        if not pattern:
            continue
        if sql == pattern:
            logger.debug("blacklist exact match: %r", pattern)
            return True
        regex = _compile(pattern)
        if regex is not None and regex.search(sql):
            logger.debug("blacklist regex match: %r", pattern)
            return True
    return False


def finalize(
    findings: Mapping[str, Finding], ok: Finding, ignore_rules: Iterable[str] = ()
) -> Dict[str, Finding]:
    """
    Apply the OK-sentinel and ignore-list invariants to a merged suggestion set.

    Returns a new dict; ``findings`` is left untouched. The result is never empty.
    """
    patterns = tuple(ignore_rules)
    out = {code: f for code, f in findings.items() if not is_ignored(code, patterns)}

    if len(out) > 1:
        out.pop(OK_CODE, None)
    if not out:
        out[OK_CODE] = ok
    return out
