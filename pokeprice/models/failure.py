"""
Failure classification.

Every error that reaches a client is a KnownError subclass carrying a
FailureKind and an HTTP status code. The API layer converts them to a
uniform ErrorResponse body; nothing else is allowed to escape as a raw 500.

Taxonomy:
- Upstream unreachable / non-2xx: UpstreamError. Callers recover by
  falling back to cached or static data.
- Malformed upstream response: not an error. Normalizers fall back to an
  empty result.
- Missing required identifier: MissingIdentifierError. A caller
  programming error, raised before any fetch is attempted.
- Reconciliation miss: not an error. "No mapping" is a first-class state.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    MISSING_REQUIRED = "missing_required"
    NOT_FOUND = "not_found"
    EXTERNAL_API_ERROR = "external_api_error"


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint on failure."""

    error: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to an ErrorResponse."""
        return ErrorResponse(error=self.message, kind=self.kind, detail=self.detail)


class MissingIdentifierError(KnownError):
    """
    A required identifier (set id, card id) was not supplied.

    Raised before any upstream fetch is attempted.
    """

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message=f"{identifier} is required",
            status_code=400,
        )


class UpstreamError(KnownError):
    """
    An upstream API was unreachable or answered with a non-2xx status.

    The message includes the response body text when one was obtainable.
    """

    def __init__(self, service: str, status_code: int | None, body: str | None = None):
        self.service = service
        self.upstream_status = status_code
        self.body = body

        if status_code is None:
            message = f"{service} request failed"
        else:
            message = f"{service} API error: {status_code}"
        if body:
            message = f"{message}. Details: {body}"

        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=body,
            status_code=502,
        )


class SetNotFoundError(KnownError):
    """The requested set id is not in the set list."""

    def __init__(self, set_id: int):
        self.set_id = set_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Set not found: {set_id}",
            status_code=404,
        )
