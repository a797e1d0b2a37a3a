from __future__ import annotations

import hashlib
import re

# leftmost match wins, so quotes hide comment markers and comments hide quotes
_LEXEME = re.compile(
    r"""(?P<string>'(?:[^'\\]|\\.|'')*'|"(?:[^"\\]|\\.|"")*")"""
    r"|(?P<ident>`[^`]*`)"
    r"|(?P<comment>/\*.*?\*/|(?:--|\#)[^\n]*)",
    re.DOTALL,
)
_HEX = re.compile(r"(?<![\w`])0x[0-9a-f]+(?![\w`])")
_NUMBER = re.compile(r"(?<![\w`.])\d+(?:\.\d+)?(?:e[+-]?\d+)?(?![\w`])")
_WHITESPACE = re.compile(r"\s+")
_IN_LIST = re.compile(r"\bin\s*\(\s*\?(?:\s*,\s*\?)*\s*\)")
_VALUES_LIST = re.compile(r"\bvalues\s*\([^()]*\)(?:\s*,\s*\([^()]*\))*")


def _strip_lexeme(m: re.Match) -> str:
    if m.group("string") is not None:
        return "?"
    if m.group("comment") is not None:
        return " "
    return m.group(0)


def fingerprint(sql: str) -> str:
    """Normalized shape of ``sql`` with literals replaced by ``?``.

    Two queries differing only in constants share a fingerprint.
    """
    if not sql or not sql.strip():
        return ""

    s = _LEXEME.sub(_strip_lexeme, sql)
    s = s.lower()
    s = _HEX.sub("?", s)
    s = _NUMBER.sub("?", s)
    s = _WHITESPACE.sub(" ", s).strip()
    s = _IN_LIST.sub("in(?+)", s)
    s = _VALUES_LIST.sub("values(?+)", s)
    return s.rstrip("; ").strip()


def query_id(fp: str) -> str:
    """16 upper-case hex characters taken from the second half of the fingerprint's MD5."""
    if not fp:
        return ""
    return hashlib.md5(fp.encode("utf-8")).hexdigest()[16:32].upper()
