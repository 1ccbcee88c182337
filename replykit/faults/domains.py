"""
replykit faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- RESPONSE faults (finalization / header commit violations)
- IO faults (file delivery, client disconnect)
- CONFIG faults
"""

import errno as errno_codes
from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# RESPONSE Faults
# ============================================================================

class ResponseFault(Fault):
    """Base class for response lifecycle faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.RESPONSE,
            severity=severity,
            metadata=metadata,
        )


class ResponseFinalizedFault(ResponseFault):
    """Body write or completion attempted after the response was finished."""

    def __init__(self, operation: str, **kwargs):
        super().__init__(
            code="RESPONSE_FINALIZED",
            message=f"Cannot {operation}: response already finished",
            metadata={"operation": operation, **kwargs.get("metadata", {})},
        )


class HeadersCommittedFault(ResponseFault):
    """Header or status change attempted after the start line was sent."""

    def __init__(self, operation: str, name: Optional[str] = None, **kwargs):
        target = f" '{name}'" if name else ""
        super().__init__(
            code="HEADERS_COMMITTED",
            message=f"Cannot {operation}{target}: headers already sent",
            metadata={"operation": operation, "header": name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# IO Faults
# ============================================================================

class IOFault(Fault):
    """Base class for I/O faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.WARN,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.IO,
            severity=severity,
            metadata=metadata,
        )


class FileDeliveryFault(IOFault):
    """
    Filesystem operation failed while delivering a file.

    Wraps the raw ``OSError`` and keeps the system-provided details
    (errno, symbolic code, failing syscall, path).
    """

    def __init__(self, syscall: str, path: str, error: OSError):
        self.syscall = syscall
        self.path = path
        self.error = error
        super().__init__(
            code="FILE_DELIVERY_FAILED",
            message=f"Filesystem {syscall} on '{path}' failed: {error.strerror or error}",
            metadata={"syscall": syscall, "path": path, "errno": error.errno},
        )

    @property
    def errno(self) -> Optional[int]:
        return self.error.errno

    @property
    def error_code(self) -> Optional[str]:
        """Symbolic errno name, e.g. ``ENOENT``."""
        if self.error.errno is None:
            return None
        return errno_codes.errorcode.get(self.error.errno)

    def error_descriptor(self) -> dict[str, Any]:
        """Raw error fields as sent in a failed delivery's body."""
        return {
            "errno": self.error.errno,
            "code": self.error_code,
            "syscall": self.syscall,
            "path": self.error.filename if self.error.filename is not None else self.path,
            "message": str(self.error),
        }


class ClientDisconnectFault(IOFault):
    """Client disconnected while the response was being written."""

    def __init__(self, bytes_sent: int = 0, reason: str = "", **kwargs):
        super().__init__(
            code="CLIENT_DISCONNECT",
            message=f"Client disconnected after {bytes_sent} bytes" + (f": {reason}" if reason else ""),
            severity=Severity.INFO,
            metadata={"bytes_sent": bytes_sent, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigError(Fault):
    """Configuration value is unknown or has the wrong type."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid config '{key}': {reason}",
            domain=FaultDomain.CONFIG,
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )
