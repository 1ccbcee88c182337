"""
replykit - Response formatting over a raw HTTP response channel.

Complete integration of:
- ResponseWriter: header/status primitives and the send/json/jsonp pipeline
- FileDelivery: download/attachment streaming with 503 error responses
- Channels: ASGI transport channel and an in-memory recording channel
- Faults: Structured error handling with fault domains
- Config: Typed defaults loadable from environment and .env files

Module-level functions delegate to shared default instances:

    from replykit import ASGIChannel, send, download

    async def app(scope, receive, send_message):
        channel = ASGIChannel(send_message, scope)
        await send(channel, {"hello": "world"})
"""

__version__ = "0.1.0"

# ============================================================================
# Core
# ============================================================================

from .config import ResponseConfig, ConfigLoader
from .channel import ResponseChannel, BaseChannel, ASGIChannel
from .writer import ResponseWriter, BODY_HEADERS, default_writer
from .delivery import (
    FileDelivery,
    DeliveryState,
    DeliveryResult,
    Delivered,
    Failed,
    default_delivery,
)
from .payload import (
    TextPayload,
    ScalarPayload,
    BinaryPayload,
    JsonPayload,
    classify,
)

# Collaborators
from .etag import generate_etag
from .disposition import content_disposition
from .vary_merge import merge_vary
from .status_codes import STATUS_NAMES, reason_phrase

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ResponseFinalizedFault,
    HeadersCommittedFault,
    FileDeliveryFault,
    ClientDisconnectFault,
    ConfigError,
)

# ============================================================================
# Module-level shortcuts (default instances)
# ============================================================================

header = default_writer.header
safe_header = default_writer.safe_header
append_header = default_writer.append_header
remove_header = default_writer.remove_header
status = default_writer.status
content_type = default_writer.content_type
location = default_writer.location
vary = default_writer.vary
write = default_writer.write
finish = default_writer.finish
send = default_writer.send
json = default_writer.json
jsonp = default_writer.jsonp
redirect = default_writer.redirect

download = default_delivery.download
attachment = default_delivery.attachment


__all__ = [
    "__version__",
    # Core
    "ResponseConfig",
    "ConfigLoader",
    "ResponseChannel",
    "BaseChannel",
    "ASGIChannel",
    "ResponseWriter",
    "BODY_HEADERS",
    "default_writer",
    "FileDelivery",
    "DeliveryState",
    "DeliveryResult",
    "Delivered",
    "Failed",
    "default_delivery",
    "TextPayload",
    "ScalarPayload",
    "BinaryPayload",
    "JsonPayload",
    "classify",
    # Collaborators
    "generate_etag",
    "content_disposition",
    "merge_vary",
    "STATUS_NAMES",
    "reason_phrase",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ResponseFinalizedFault",
    "HeadersCommittedFault",
    "FileDeliveryFault",
    "ClientDisconnectFault",
    "ConfigError",
    # Shortcuts
    "header",
    "safe_header",
    "append_header",
    "remove_header",
    "status",
    "content_type",
    "location",
    "vary",
    "write",
    "finish",
    "send",
    "json",
    "jsonp",
    "redirect",
    "download",
    "attachment",
]
