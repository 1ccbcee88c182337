"""
replykit faults - Typed fault signals for response formatting.

Errors are structured values with a stable code, a domain and a severity,
so transports and callers can map them without string matching.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- Domain faults for response lifecycle, file I/O and configuration
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ResponseFault,
    ResponseFinalizedFault,
    HeadersCommittedFault,
    IOFault,
    FileDeliveryFault,
    ClientDisconnectFault,
    ConfigError,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ResponseFault",
    "ResponseFinalizedFault",
    "HeadersCommittedFault",
    "IOFault",
    "FileDeliveryFault",
    "ClientDisconnectFault",
    "ConfigError",
]
