from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    CONFIGURATION_MISSING = "configuration_missing"
    REMOTE_REJECTED = "remote_rejected"
    TRANSPORT_FAILURE = "transport_failure"


class RemediationError(Exception):
    """Base class for every failure the service knows how to report.

    `context` carries structured details for the server-side log. It must
    never hold credential material.
    """

    kind: ErrorKind
    http_status: int = 500
    result_status: str = "error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class InvalidRequest(RemediationError):
    kind = ErrorKind.INVALID_REQUEST
    http_status = 400


class UnsupportedAction(InvalidRequest):
    """Action is well-formed but not routed anywhere."""

    result_status = "ignored"

    def __init__(self, action: str) -> None:
        super().__init__("Unsupported action", {"action": action})


class ConfigurationMissing(RemediationError):
    kind = ErrorKind.CONFIGURATION_MISSING

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message, {"missing": list(missing)})
        self.missing = list(missing)


class RemoteRejected(RemediationError):
    kind = ErrorKind.REMOTE_REJECTED


class TransportFailure(RemediationError):
    kind = ErrorKind.TRANSPORT_FAILURE
