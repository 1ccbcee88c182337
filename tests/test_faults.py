"""
Test fault taxonomy used by replykit.
"""

import errno
import logging

import pytest

from replykit.faults import (
    ClientDisconnectFault,
    ConfigError,
    Fault,
    FaultDomain,
    FileDeliveryFault,
    ResponseFinalizedFault,
    Severity,
)


def test_fault_requires_code_message_domain():
    with pytest.raises(TypeError):
        Fault(code="X")


def test_fault_severity_defaults_to_domain():
    fault = Fault(code="X", message="boom", domain=FaultDomain.RESPONSE)

    assert fault.severity == Severity.ERROR
    assert str(fault) == "[X] boom"
    assert ConfigError("chunk_size", "must be positive").severity == Severity.FATAL


@pytest.mark.parametrize("severity, level", [
    (Severity.INFO, logging.INFO),
    (Severity.WARN, logging.WARNING),
    (Severity.ERROR, logging.ERROR),
    (Severity.FATAL, logging.CRITICAL),
])
def test_severity_log_level(severity, level):
    assert severity.log_level == level


def test_report_logs_at_severity(caplog):
    logger = logging.getLogger("replykit.test")
    fault = ClientDisconnectFault(bytes_sent=3, reason="reset")

    with caplog.at_level(logging.INFO, logger="replykit.test"):
        fault.report(logger, "download")

    (record,) = caplog.records
    assert record.levelno == logging.INFO
    assert record.getMessage() == (
        "download: [IO] CLIENT_DISCONNECT: Client disconnected after 3 bytes: reset"
    )


def test_response_finalized_fault():
    fault = ResponseFinalizedFault("send")

    assert fault.code == "RESPONSE_FINALIZED"
    assert fault.domain == FaultDomain.RESPONSE
    assert "send" in fault.message


def test_file_delivery_fault_descriptor():
    error = FileNotFoundError(errno.ENOENT, "No such file or directory", "/no/such/file")
    fault = FileDeliveryFault("stat", "/no/such/file", error)

    assert fault.domain == FaultDomain.IO
    assert fault.severity == Severity.WARN
    assert fault.error_code == "ENOENT"
    assert fault.error_descriptor() == {
        "errno": errno.ENOENT,
        "code": "ENOENT",
        "syscall": "stat",
        "path": "/no/such/file",
        "message": str(error),
    }


def test_client_disconnect_is_informational():
    fault = ClientDisconnectFault(bytes_sent=10)

    assert fault.severity == Severity.INFO
    assert fault.metadata["bytes_sent"] == 10
