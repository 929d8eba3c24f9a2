"""
Error kinds surfaced by the query gateway.

Every error renders to a machine-parsable payload so the HTTP layer can
report it without letting exceptions cross the boundary.
"""

from typing import Any, Dict


class GatewayError(Exception):
    """Base class for errors reported back to the caller of a single request."""

    status = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "status": self.status}


class MalformedInputError(GatewayError):
    """A descriptor, payload or filter could not be parsed."""

    status = "bad_request"


class StoreUnavailableError(GatewayError):
    """The backing store could not be reached or failed to run an operation."""

    status = "store_unavailable"


class EmptyResultError(GatewayError):
    """The query ran but there is nothing to chart."""

    status = "empty_result"


class TypeInferenceError(EmptyResultError):
    """The first row carries no usable value to infer the column type from."""
