"""
querycourse - client for the NTUST course query API.

Main objects:
- Client / AsyncClient: search() and query() against the API
- ClientBuilder: timeout, user agent, base URL and local address options
- CourseInfo / CourseDetails / SearchOptions / Language: the data model
- QueryError, HttpError, ParseError: the two error kinds
"""

from querycourse.async_client import AsyncClient
from querycourse.client import Client
from querycourse.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ClientBuilder, ClientConfig
from querycourse.errors import HttpError, ParseError, QueryError
from querycourse.merge import merge_courses
from querycourse.model import CourseDetails, CourseInfo, Language, SearchOptions

__all__ = [
    "AsyncClient",
    "Client",
    "ClientBuilder",
    "ClientConfig",
    "CourseDetails",
    "CourseInfo",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "HttpError",
    "Language",
    "ParseError",
    "QueryError",
    "SearchOptions",
    "merge_courses",
]
