"""
Search error taxonomy.

Routers translate these into the JSON error envelope; the search session
turns ``TransportFailure`` into its Error state.
"""
from enum import Enum
from typing import Any


class ErrorType(Enum):
    INVALID_QUERY = "invalid_query"
    QUERY_REJECTED = "query_rejected"
    SOURCE_UNAVAILABLE = "source_unavailable"
    TRANSPORT_FAILURE = "transport_failure"


class SearchError(Exception):
    error_type: ErrorType

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.error_type.value,
            "message": str(self),
            "details": self.details,
        }


class InvalidQuery(SearchError):
    """Blank search input, rejected before any source is queried."""

    error_type = ErrorType.INVALID_QUERY

    def __init__(self, message: str = "Search term is required. Use ?q=your-search-term"):
        super().__init__(message)


class QueryRejected(SearchError):
    """A source refused the query text (e.g. malformed full-text syntax)."""

    error_type = ErrorType.QUERY_REJECTED

    def __init__(self, source_type: str, message: str = "Invalid search query"):
        super().__init__(message, {"source": source_type})
        self.source_type = source_type


class SourceUnavailable(SearchError):
    """A source errored or timed out. Never reported as an empty match."""

    error_type = ErrorType.SOURCE_UNAVAILABLE

    def __init__(self, source_type: str, reason: str):
        super().__init__(f"Source '{source_type}' unavailable: {reason}", {"source": source_type})
        self.source_type = source_type
        self.reason = reason


class TransportFailure(SearchError):
    """The client could not get a usable answer from the search endpoint."""

    error_type = ErrorType.TRANSPORT_FAILURE
    user_message = "Something went wrong connecting to the search server. Please try again."

    def __init__(self, reason: str):
        super().__init__(self.user_message, {"reason": reason})
        self.reason = reason
