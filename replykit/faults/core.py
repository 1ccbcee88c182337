"""
replykit faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels and the log level each maps to
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines the logging level used when a fault is reported.
    """
    INFO = "info"       # Expected condition, e.g. client went away
    WARN = "warn"       # Request-level failure, e.g. unreadable file
    ERROR = "error"     # Misuse of the response lifecycle
    FATAL = "fatal"     # Unusable configuration

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = "", severity: Severity = Severity.ERROR):
        self.name = name
        self.description = description
        self.severity = severity

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.RESPONSE = FaultDomain("response", "HTTP response errors", Severity.ERROR)
FaultDomain.IO = FaultDomain("io", "I/O operations", Severity.WARN)
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors", Severity.FATAL)


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    Attributes:
        code: Stable machine-readable identifier (e.g., "RESPONSE_FINALIZED")
        message: Human-readable summary
        severity: Fault severity; defaults to the domain's severity
        domain: Fault domain (RESPONSE, IO, CONFIG)
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="RESPONSE_FINALIZED",
            message="Response already finished",
            domain=FaultDomain.RESPONSE,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fallback to class attributes if not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        self.severity = severity or self.domain.severity
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"Fault(code={self.code!r}, domain={self.domain.name}, "
            f"severity={self.severity.value})"
        )

    def report(self, logger: logging.Logger, context: str = "") -> None:
        """Log this fault at the level its severity maps to."""
        prefix = f"{context}: " if context else ""
        logger.log(
            self.severity.log_level,
            f"{prefix}[{self.domain.name.upper()}] {self.code}: {self.message}",
        )
