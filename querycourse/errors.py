"""
Error taxonomy of the client.

Only two kinds exist:
- HttpError: the request never produced a usable response (connection, DNS,
  timeout, non-success status)
- ParseError: the response body could not be decoded into the expected shape,
  or a required result was missing
"""

from __future__ import annotations


class QueryError(Exception):
    """
    Base class of both error kinds. Carries a human-readable message.
    """

    prefix = "Query Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class HttpError(QueryError):
    prefix = "HTTP Error"


class ParseError(QueryError):
    prefix = "Parse Error"
