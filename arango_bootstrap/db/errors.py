"""Error type raised by the bootstrap helpers."""

from __future__ import annotations

from arango.exceptions import ArangoError
from requests import RequestException

CONNECT = "connect"
CHECK = "check"
FETCH = "fetch"
CREATE = "create"

# Failures raised by the driver or its HTTP transport.
DRIVER_ERRORS = (ArangoError, RequestException)

_STEP_PHRASES = {
    CONNECT: "connect to",
    CHECK: "check existence of",
    FETCH: "fetch",
    CREATE: "create",
}


class BootstrapError(Exception):
    """A driver failure tagged with the step and resource it happened on.

    ``operation`` is one of ``connect``, ``check``, ``fetch`` or ``create``;
    ``kind`` is ``database``, ``collection`` or ``index``; ``resource`` is the
    qualified resource name and ``cause`` the original driver exception.
    """

    def __init__(self, operation: str, kind: str, resource: str, cause: BaseException) -> None:
        self.operation = operation
        self.kind = kind
        self.resource = resource
        self.cause = cause
        phrase = _STEP_PHRASES.get(operation, operation)
        super().__init__(f"failed to {phrase} {kind} '{resource}': {cause}")
