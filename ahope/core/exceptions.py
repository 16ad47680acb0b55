"""
Error taxonomy for the bootstrap core.

TransportError covers anything the remote Parse Server (or the network in
between) declined. It is never recovered inside the core; the only failure
handled locally is a missing class, which the schema fetch reports as a tagged
result instead of an exception.
"""

from enum import Enum
from typing import Any, Dict, Optional


# Parse error code returned when a class (or its schema) does not exist.
INVALID_CLASS_NAME = 103


class BootstrapError(Exception):
    """Base class for failures raised by the bootstrap core"""


class TransportError(BootstrapError):
    """Network, auth or validation failure reported by the remote store"""


class ParseApiError(TransportError):
    """Parse Server answered with an error body ({"code": ..., "error": ...})"""

    def __init__(self, status_code: int, code: Optional[int], message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"Parse error {code} (HTTP {status_code}): {message}")

    @property
    def is_class_not_found(self) -> bool:
        return self.code == INVALID_CLASS_NAME

    @classmethod
    def from_response_body(cls, status_code: int, body: Any) -> "ParseApiError":
        if isinstance(body, dict):
            return cls(status_code, body.get("code"), str(body.get("error", "")))
        return cls(status_code, None, str(body))


class ParseTransportError(TransportError):
    """The request never produced a Parse response (connection error, timeout)"""


class InvariantViolation(BootstrapError):
    """Programming error, e.g. building the role hierarchy out of order"""


class SchemaErrorKind(str, Enum):
    CLASS_NOT_FOUND = "class_not_found"
    OTHER = "other"


class SchemaFetchResult:
    """Outcome of a schema fetch: either the remote schema or a tagged error."""

    def __init__(
        self,
        class_name: str,
        schema: Optional[Dict[str, Any]] = None,
        error_kind: Optional[SchemaErrorKind] = None,
        error: Optional[TransportError] = None,
    ):
        if (schema is None) == (error_kind is None):
            raise InvariantViolation("SchemaFetchResult needs exactly one of schema or error_kind")
        self.class_name = class_name
        self.schema = schema
        self.error_kind = error_kind
        self.error = error

    @classmethod
    def found(cls, class_name: str, schema: Dict[str, Any]) -> "SchemaFetchResult":
        return cls(class_name, schema=schema)

    @classmethod
    def class_not_found(cls, class_name: str, error: Optional[TransportError] = None) -> "SchemaFetchResult":
        return cls(class_name, error_kind=SchemaErrorKind.CLASS_NOT_FOUND, error=error)

    @classmethod
    def failed(cls, class_name: str, error: TransportError) -> "SchemaFetchResult":
        return cls(class_name, error_kind=SchemaErrorKind.OTHER, error=error)

    @property
    def ok(self) -> bool:
        return self.schema is not None

    @property
    def field_names(self) -> set:
        return set((self.schema or {}).get("fields") or {})

    @property
    def index_names(self) -> set:
        return set((self.schema or {}).get("indexes") or {})

    def __repr__(self) -> str:
        state = "found" if self.ok else self.error_kind.value
        return f"SchemaFetchResult({self.class_name!r}, {state})"
