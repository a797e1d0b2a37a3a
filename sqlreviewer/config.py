"""Configuration loading for sqlreviewer.

Sources are merged in priority order:
    1. Defaults (defined on ReviewConfig)
    2. YAML config file (``--config``)
    3. ``SQLREVIEWER_*`` environment variables
    4. Explicit overrides (passed as kwargs)

A request takes one ReviewConfig snapshot and uses it for its whole lifetime.
Reloading replaces the snapshot, it never mutates one.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

import yaml
from sqlglot.dialects.dialect import Dialect

from sqlreviewer.exceptions import InvalidConfigError
from sqlreviewer.logging_config import get_logger

logger = get_logger(__name__)

SampleStyle = Literal["pretty", "sample", "fingerprint"]
SAMPLE_STYLES = ("pretty", "sample", "fingerprint")

ENV_PREFIX = "SQLREVIEWER_"


@dataclass(frozen=True)
class ReviewConfig:
    """Settings consumed by the review core.

    Attributes:
        ignore_rules: Rule code prefixes to drop from the output (``*`` allowed at either end)
        blacklist: Exact SQL texts or case-insensitive regexes that skip review entirely
        max_text_cols_count: TEXT/BLOB column limit quoted by COL.007
        max_varchar_length: VARCHAR length limit quoted by COL.017
        column_not_allow_type: Column types quoted by COL.018
        allow_engines: Storage engines quoted by TBL.002
        allow_charsets: Character sets quoted by TBL.005
        allow_collates: Collations quoted by TBL.008
        explain_sql_report_type: How markdown headers show the query
        report_type: Output format used when none is requested
        parse_timeout: Seconds allowed for parsing one statement, None for no limit
        dialect: sqlglot dialect of the authoritative parser
        supersede_rules: Override policy table (winner code -> suppressed codes), None for the default
    """

    ignore_rules: Tuple[str, ...] = ()
    blacklist: Tuple[str, ...] = ()
    max_text_cols_count: int = 2
    max_varchar_length: int = 1022
    column_not_allow_type: Tuple[str, ...] = ("boolean",)
    allow_engines: Tuple[str, ...] = ("innodb",)
    allow_charsets: Tuple[str, ...] = ("utf8", "utf8mb4")
    allow_collates: Tuple[str, ...] = ()
    explain_sql_report_type: SampleStyle = "pretty"
    report_type: str = "markdown"
    parse_timeout: Optional[float] = 10.0
    dialect: str = "mysql"
    supersede_rules: Optional[Mapping[str, Tuple[str, ...]]] = None

    def template_context(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


default_config = ReviewConfig()

_FIELDS = {f.name: f for f in fields(ReviewConfig)}
_TUPLE_FIELDS = {
    "ignore_rules",
    "blacklist",
    "column_not_allow_type",
    "allow_engines",
    "allow_charsets",
    "allow_collates",
}
_INT_FIELDS = {"max_text_cols_count", "max_varchar_length"}


def load_config(config_file: Optional[Path] = None, **overrides) -> ReviewConfig:
    """Build a ReviewConfig from defaults, a YAML file, the environment and overrides.

    Keys may use hyphens (``ignore-rules``) or underscores. ``blacklist_file``
    names a text file whose lines are appended to ``blacklist``.

    Raises:
        InvalidConfigError: On unknown keys or values of the wrong shape
    """
    raw: Dict[str, Any] = {}

    if config_file is not None:
        raw.update(_load_yaml_file(Path(config_file)))

    raw.update(_load_from_env())
    raw.update({k: v for k, v in overrides.items() if v is not None})

    return _build(raw)


class ConfigStore:
    """Holds the active ReviewConfig and swaps it atomically on reload."""

    def __init__(self, config_file: Optional[Path] = None, **overrides):
        self._config_file = config_file
        self._overrides = overrides
        self._lock = threading.Lock()
        self._current = load_config(config_file, **overrides)

    def current(self) -> ReviewConfig:
        return self._current

    def reload(self) -> ReviewConfig:
        fresh = load_config(self._config_file, **self._overrides)
        with self._lock:
            self._current = fresh
        logger.debug("configuration reloaded from %s", self._config_file)
        return fresh


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise InvalidConfigError(str(path), "<file>", f"not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigError(str(path), type(data).__name__, "top level must be a mapping")

    # a relative blacklist file is relative to the config file, not the working directory
    for key in ("blacklist_file", "blacklist-file"):
        value = data.get(key)
        if isinstance(value, str) and not Path(value).is_absolute():
            data[key] = str(path.parent / value)
    return data


def _load_from_env() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for name in _FIELDS:
        if name == "supersede_rules":
            continue
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            out[name] = value
    blacklist_file = os.environ.get(f"{ENV_PREFIX}BLACKLIST_FILE")
    if blacklist_file:
        out["blacklist_file"] = blacklist_file
    return out


def read_blacklist_file(path: Path) -> Tuple[str, ...]:
    """One exact SQL or regex per line; blank lines and ``#`` comments are skipped."""
    entries = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            entries.append(line)
    return tuple(entries)


def _build(raw: Mapping[str, Any]) -> ReviewConfig:
    values: Dict[str, Any] = {}
    extra_blacklist: Tuple[str, ...] = ()

    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name == "blacklist_file":
            try:
                extra_blacklist += read_blacklist_file(Path(value))
            except OSError as e:
                raise InvalidConfigError(str(key), value, f"cannot read blacklist file: {e}") from e
            continue
        if name not in _FIELDS:
            raise InvalidConfigError(str(key), value, "unknown setting")
        values[name] = _coerce(name, value)

    if extra_blacklist:
        values["blacklist"] = tuple(values.get("blacklist", ())) + extra_blacklist

    return ReviewConfig(**values)


def _coerce(name: str, value: Any) -> Any:
    if name in _TUPLE_FIELDS:
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(v.strip() for v in value.split(",") if v.strip())
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return tuple(value)
        raise InvalidConfigError(name, value, "expected a list of strings")

    if name in _INT_FIELDS:
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidConfigError(name, value, "expected an integer") from None
        if number < 0:
            raise InvalidConfigError(name, value, "must not be negative")
        return number

    if name == "parse_timeout":
        if value is None or (isinstance(value, str) and value.lower() in ("", "none", "off")):
            return None
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            raise InvalidConfigError(name, value, "expected a number of seconds") from None
        return seconds if seconds > 0 else None

    if name == "explain_sql_report_type":
        if value not in SAMPLE_STYLES:
            raise InvalidConfigError(name, value, f"expected one of {', '.join(SAMPLE_STYLES)}")
        return value

    if name == "supersede_rules":
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise InvalidConfigError(name, value, "expected a mapping of code to codes")
        table = {}
        for winner, losers in value.items():
            if isinstance(losers, str):
                losers = [losers]
            if not isinstance(losers, (list, tuple)):
                raise InvalidConfigError(name, value, f"codes superseded by {winner} must be a list")
            table[str(winner)] = tuple(str(code) for code in losers)
        return table

    if not isinstance(value, str):
        raise InvalidConfigError(name, value, "expected a string")

    if name == "dialect":
        try:
            Dialect.get_or_raise(value)
        except ValueError as e:
            raise InvalidConfigError(name, value, str(e)) from None

    return value
