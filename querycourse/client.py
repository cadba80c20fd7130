"""
Blocking client for the NTUST querycourse API.

    from querycourse import Client, Language, SearchOptions

    with Client() as client:
        courses = client.search(SearchOptions("1131", course_no="cs"))
        details = client.query("1122", "AT2005701", Language.EN)

Every call is a single round trip; nothing is retried or cached.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter

from querycourse.config import DETAILS_PATH, SEARCH_PATH, ClientBuilder, ClientConfig
from querycourse.errors import HttpError, ParseError
from querycourse.merge import merge_courses
from querycourse.model import CourseDetails, CourseInfo, Language, SearchOptions
from querycourse.parse import encode_search_options, parse_course_details_list, parse_course_info_list

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response decoding (shared with async_client)
# ---------------------------------------------------------------------------


def _load_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise ParseError(f"response is not valid JSON: {e}") from e


def decode_search_body(body: bytes, merge_results: bool) -> List[CourseInfo]:
    courses = parse_course_info_list(_load_json(body))
    logger.debug("search returned %d rows", len(courses))
    return merge_courses(courses) if merge_results else courses


def decode_details_body(body: bytes) -> CourseDetails:
    details = parse_course_details_list(_load_json(body))
    if not details:
        raise ParseError("no course found")
    return details[0]


def details_params(semester: str, course_no: str, language: Language) -> dict[str, str]:
    return {"semester": semester, "course_no": course_no, "language": language.as_str()}


# ---------------------------------------------------------------------------
# Transport setup
# ---------------------------------------------------------------------------


class SourceAddressAdapter(HTTPAdapter):
    """
    HTTPAdapter that binds outgoing connections to a local address.
    """

    def __init__(self, source_address: str, **kwargs: Any) -> None:
        # must be set before HTTPAdapter.__init__ calls init_poolmanager()
        self._source_address = (source_address, 0)
        super().__init__(**kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        kwargs["source_address"] = self._source_address
        super().init_poolmanager(*args, **kwargs)


def create_session(config: ClientConfig) -> requests.Session:
    session = requests.Session()
    if config.local_address:
        adapter = SourceAddressAdapter(config.local_address)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
    session.headers.update(config.headers())
    return session


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class Client:
    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None) -> None:
        self._config = config or ClientConfig()
        self._owns_session = session is None
        self._session = session if session is not None else create_session(self._config)

    @classmethod
    def builder(cls) -> ClientBuilder:
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._config.headers(),
                timeout=self._config.timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise HttpError(str(e)) from e
        return resp

    def search(self, options: SearchOptions, merge_results: bool = True) -> List[CourseInfo]:
        """
        Search courses. With merge_results, rows that only differ by
        scheduling node are folded into one record per course number.

        Raises HttpError or ParseError.
        """
        resp = self._send("POST", self._config.url_for(SEARCH_PATH), json=encode_search_options(options))
        return decode_search_body(resp.content, merge_results)

    def query(self, semester: str, course_no: str, language: Language = Language.ZH) -> CourseDetails:
        """
        Fetch the details of one course.

        Raises HttpError, or ParseError (also when no course matches).
        """
        resp = self._send(
            "GET",
            self._config.url_for(DETAILS_PATH),
            params=details_params(semester, course_no, language),
        )
        return decode_details_body(resp.content)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
