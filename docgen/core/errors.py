"""
Error taxonomy for the generation pipeline.

Every failure surfaced to callers carries a machine-readable ``kind``
and a human-readable ``detail``. Nothing here is retried automatically;
resubmitting the same request is the caller's decision.
"""

from typing import Any, Dict, Optional


class DocGenError(Exception):
    """Base class for all pipeline errors."""

    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "detail": self.detail}


class NotFound(DocGenError):
    """Referenced project, profile, document or screen is absent."""
    kind = "not_found"


class Forbidden(DocGenError):
    """The project exists but belongs to another owner."""
    kind = "forbidden"


class InsufficientCredits(DocGenError):
    """Owner has no credits left and is not on an unlimited balance."""
    kind = "insufficient_credits"


class MissingPrerequisite(DocGenError):
    """An upstream input must exist before this generation can run."""

    kind = "missing_prerequisite"

    def __init__(self, detail: str, document_type: Optional[str] = None):
        super().__init__(detail)
        self.document_type = document_type

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.document_type:
            data["document_type"] = self.document_type
        return data


class MalformedResponse(DocGenError):
    """
    Generator output failed shape validation.

    The raw response is kept on the exception for operator diagnostics
    and is deliberately left out of ``to_dict``.
    """

    kind = "malformed_response"

    def __init__(self, detail: str, raw_response: str = ""):
        super().__init__(detail)
        self.raw_response = raw_response


class GenerationFailed(DocGenError):
    """The backend call itself errored."""
    kind = "generation_failed"


class PersistenceFailed(DocGenError):
    """The store rejected a write."""
    kind = "persistence_failed"


class ConfigurationError(DocGenError):
    """Unknown document type, template or wireframe format."""
    kind = "configuration_error"


class InvalidEstimate(DocGenError):
    """A cost estimate payload violates the numeric rules."""
    kind = "invalid_estimate"
