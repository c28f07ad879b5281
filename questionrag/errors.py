"""Error types raised by QuestionRAG."""

from __future__ import annotations


class QuestionRagError(Exception):
    """Base class for all QuestionRAG errors."""


class ConfigurationError(QuestionRagError):
    """Missing or rejected credentials or hosts."""


class ParseError(QuestionRagError):
    """A dataset payload or a search hit does not have the expected shape."""


class UpstreamError(QuestionRagError):
    """The vector store or chat provider returned a non-success response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NetworkError(QuestionRagError):
    """A remote service could not be reached or timed out."""
