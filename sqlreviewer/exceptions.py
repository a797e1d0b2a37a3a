"""Exception hierarchy for sqlreviewer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from sqlreviewer.extract.query_loader import Query4Audit


class SqlReviewError(Exception):
    """Base exception for all sqlreviewer errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(SqlReviewError):
    """Base class for configuration-related errors."""


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is unknown or has the wrong shape."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value!r}",
            details={"key": key, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ParseError(SqlReviewError):
    """The authoritative parser rejected the statement.

    ``audit`` holds the partially built Query4Audit so callers can still
    inspect the raw text and whatever the lenient parser produced.
    """

    def __init__(self, message: str, audit: "Query4Audit"):
        super().__init__(message)
        self.audit = audit


class ParseTimeoutError(ParseError):
    """Parsing did not finish within the configured timeout."""

    def __init__(self, timeout: float, audit: "Query4Audit"):
        super().__init__(f"SQL parsing exceeded {timeout:g}s", audit)
        self.timeout = timeout


class CatalogError(SqlReviewError):
    """The rule catalog definition is inconsistent."""


class UnknownRuleError(SqlReviewError, KeyError):
    """A rule code is not registered in the catalog."""

    def __init__(self, code: str):
        super().__init__(f"Unknown rule code: {code}", details={"code": code})
        self.code = code

    def __str__(self) -> str:
        return SqlReviewError.__str__(self)


class InvalidFindingsError(SqlReviewError):
    """Findings contributed by an external analyzer could not be read."""
