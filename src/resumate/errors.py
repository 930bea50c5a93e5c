"""Application error taxonomy.

Route handlers let these propagate; the handlers registered in
``resumate.api.server`` turn them into JSON responses.
"""

from __future__ import annotations

from typing import Any, Iterable, List


class ResuMateError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}


class UnauthenticatedError(ResuMateError):
    status_code = 401
    default_message = "Unauthorized"


class UnauthorizedError(ResuMateError):
    """Session is valid but the record belongs to someone else."""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(ResuMateError):
    status_code = 404
    default_message = "Not found"


class ValidationFailedError(ResuMateError):
    status_code = 400
    default_message = "Validation error"

    def __init__(self, message: str | None = None, errors: List[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_errors(
        cls, raw_errors: Iterable[dict[str, Any]], message: str = "Validation error"
    ) -> "ValidationFailedError":
        """Build from pydantic-style error dicts (``loc``/``msg``)."""
        errors = []
        for err in raw_errors:
            loc = [str(p) for p in err.get("loc", ()) if p != "body"]
            errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "")})
        return cls(message, errors=errors)

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class UpstreamError(ResuMateError):
    """An LLM call, model-output parse, URL fetch or PDF render failed."""

    status_code = 500
    default_message = "Upstream service failed"
