"""Errors raised while running a SPARQL query."""

from typing import Optional


class QueryError(Exception):
    """Base exception for a failed query run"""
    pass


class InputError(QueryError):
    """Endpoint or query text is missing"""
    pass


class InvalidEndpointError(QueryError):
    """Endpoint is not a well-formed http(s) URL"""
    pass


class NetworkError(QueryError):
    """Request was rejected or answered with a non-ok status"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(QueryError):
    """Response body is not a SPARQL JSON result"""
    pass
